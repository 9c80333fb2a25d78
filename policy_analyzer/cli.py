"""
CLI tool for analyzing insurance policies.
Usage: analyze-policy <policy_file> [--jurisdiction EU] [--json]
"""

import sys
import json
import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from policy_analyzer.config import get_settings
from policy_analyzer.core.correlation import configure_logging
from policy_analyzer.exceptions import PolicyAnalysisError
from policy_analyzer.pipeline.models import JURISDICTIONS, AnalysisRequest, AnalysisResult
from policy_analyzer.pipeline.orchestrator import PolicyAnalyzer


# ANSI color codes for terminal output
class Colors:
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


RISK_COLORS = {
    "low": Colors.GREEN,
    "medium": Colors.YELLOW,
    "high": Colors.RED,
}


def print_header(text: str):
    """Print a header with formatting."""
    print(f"\n{Colors.BOLD}{Colors.BLUE}{text}{Colors.ENDC}")


def print_result(result: AnalysisResult):
    """Print the analysis result in a formatted way."""
    print("\n" + "=" * 70)
    print(f"{Colors.BOLD}{Colors.GREEN}        POLICY ANALYSIS COMPLETE{Colors.ENDC}")
    print("=" * 70)

    coverage = result.coverage
    print(f"\n{Colors.BOLD}Coverage:{Colors.ENDC} {coverage.coverage_type or 'n/a'} - {coverage.coverage_amount or 'n/a'}")
    for item in coverage.coverage_breakdown:
        print(f"  - {item.category.replace('_', ' ').title()}: {item.limit}")

    if result.deductibles:
        print_header("Deductibles:")
        for deductible in result.deductibles:
            print(f"  - {deductible.get('type', 'n/a')}: {deductible.get('amount', 'n/a')}")

    if result.exclusions:
        print_header("Exclusions:")
        for exclusion in result.exclusions:
            print(f"  - {exclusion}")

    color = RISK_COLORS.get(result.risk_level, Colors.CYAN)
    print(f"\n{Colors.BOLD}Risk Level:{Colors.ENDC} {color}{result.risk_level.upper()}{Colors.ENDC}")

    if result.required_actions:
        print_header("Required Actions:")
        for action in result.required_actions:
            print(f"  - {action}")

    flags = result.flags
    if flags.needs_legal_review or flags.inconsistent_clauses_detected:
        print(f"\n{Colors.YELLOW}{Colors.BOLD}Flags:{Colors.ENDC}")
        if flags.needs_legal_review:
            print(f"  {Colors.YELLOW}Legal review recommended{Colors.ENDC}")
        if flags.inconsistent_clauses_detected:
            print(f"  {Colors.YELLOW}Inconsistent clauses detected{Colors.ENDC}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Analyze an insurance policy document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  analyze-policy policies/health.txt
  analyze-policy --text "Comprehensive health insurance..." --jurisdiction EU
  cat policies/auto.txt | analyze-policy --json
        """
    )

    parser.add_argument("file", nargs="?", help="Path to a policy text file")
    parser.add_argument("--text", "-t", help="Policy text (alternative to file)")
    parser.add_argument("--policy-type", "-p", help="Policy type, e.g. health or auto")
    parser.add_argument("--jurisdiction", choices=JURISDICTIONS, help="Policy jurisdiction")
    parser.add_argument("--language", "-l", default="en", help="Output language (default: en)")
    parser.add_argument("--json", "-j", action="store_true", help="Output result as JSON only")
    return parser


def read_policy_text(args: argparse.Namespace, parser: argparse.ArgumentParser) -> str:
    if args.text:
        return args.text

    if args.file:
        file_path = Path(args.file)
        if not file_path.exists():
            print(f"{Colors.RED}Error: File not found: {args.file}{Colors.ENDC}")
            sys.exit(1)
        return file_path.read_text(encoding="utf-8")

    # Try reading from stdin
    if not sys.stdin.isatty():
        return sys.stdin.read()

    parser.print_help()
    sys.exit(1)


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    policy_text = read_policy_text(args, parser)

    try:
        request = AnalysisRequest(
            policy_text=policy_text,
            policy_type=args.policy_type,
            jurisdiction=args.jurisdiction,
            language=args.language,
        )
    except ValidationError as e:
        print(f"{Colors.RED}Error: invalid input{Colors.ENDC}")
        for error in e.errors():
            print(f"  {'.'.join(str(p) for p in error['loc'])}: {error['msg']}")
        sys.exit(1)

    configure_logging("ERROR" if args.json else get_settings().log_level)

    if not args.json:
        print(f"\n{Colors.BOLD}Insurance Policy Analysis{Colors.ENDC}")
        print("-" * 40)
        print("Analyzing policy...")

    try:
        result = PolicyAnalyzer().analyze(request)
    except PolicyAnalysisError as e:
        if args.json:
            print(json.dumps({"error": str(e), "detail": str(e.__cause__)}))
        else:
            print(f"\n{Colors.RED}Error: {e}{Colors.ENDC}")
            print(f"  Cause: {e.__cause__}")
        sys.exit(1)

    if args.json:
        print(json.dumps(result.model_dump(by_alias=True), indent=2))
    else:
        print_result(result)

    sys.exit(0)


if __name__ == "__main__":
    main()
