"""
AI-Powered Insurance Policy Analyzer

This package turns free-text insurance policies into a structured risk
assessment using:
- OpenAI chat completions with forced tool calling for extraction
- A strict JSON schema that the model output must satisfy
- A tolerant normalizer that maps the payload onto typed results
"""

__version__ = "1.0.0"
