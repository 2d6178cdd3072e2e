import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from dotenv import load_dotenv

from .client import build_client, require_api_key
from .errors import IndexOutOfRange, PromptTesterError
from .evaluators import DEFAULT_EVALUATOR, get_evaluator
from .generate import generate_test_cases
from .loader import check_format, load_prompt_config, load_test_cases, save_test_cases
from .plan import run_plan_file
from .runner import run_case, run_suite

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return n


def cmd_generate(client: Any, args: argparse.Namespace) -> int:
    config = load_prompt_config(args.prompt)

    testcases_path = Path(args.testcases)
    check_format(testcases_path)
    existing = []
    if testcases_path.exists():
        existing = load_test_cases(testcases_path)
        print(f"Found {len(existing)} existing test cases")

    print(f"Generating {args.num} new test cases...")
    combined = generate_test_cases(client, config, existing, args.num, model=args.model)
    save_test_cases(testcases_path, combined)

    print(f"Existing: {len(existing)} | New: {len(combined) - len(existing)} | Total: {len(combined)}")
    print(f"Saved to {testcases_path}")
    return 0


def cmd_test(client: Any, args: argparse.Namespace) -> int:
    config = load_prompt_config(args.prompt)
    cases = load_test_cases(args.testcases)
    evaluator = get_evaluator(args.eval)

    print(f"Running {len(cases)} test cases with prompt from {args.prompt} (eval: {args.eval}):\n")
    suite = run_suite(client, cases, config, evaluator)
    print(f"Results: {suite.passed}/{suite.total} tests passed")
    return 0


def cmd_run(client: Any, args: argparse.Namespace) -> int:
    config = load_prompt_config(args.prompt)
    cases = load_test_cases(args.testcases)
    if args.index < 0 or args.index >= len(cases):
        raise IndexOutOfRange(args.index, len(cases))
    evaluator = get_evaluator(args.eval)

    print(f"Running test case {args.index} (eval: {args.eval}):")
    result = run_case(client, cases[args.index], config, evaluator, index=args.index)
    if result.passed:
        print(f"✓ Test case {args.index} PASSED")
    else:
        print(f"✗ Test case {args.index} FAILED")
    return 0


def cmd_eval(client: Any, args: argparse.Namespace) -> int:
    plan = run_plan_file(client, args.plan)

    print("=" * 60)
    print(f"{'Suite':<30} {'Passed':>10} {'Total':>8}")
    print("-" * 60)
    for report in plan.suites:
        print(f"{report.name:<30} {report.result.passed:>10} {report.result.total:>8}")
    print("=" * 60)
    print(f"{plan.name} Total: {plan.passed}/{plan.total} tests passed")
    return 0


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="prompt-tester", description="Evaluate LLM prompts against test cases.")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="generate test cases from the prompt's system message")
    gen.add_argument("--prompt", required=True, help="prompt config file (.json, .yaml, .yml)")
    gen.add_argument("--testcases", required=True, help="test cases file (created if missing)")
    gen.add_argument("--num", type=_positive_int, default=10, help="number of test cases to generate")
    gen.add_argument("--model", default=None, help="model used for generation (default: $GENERATOR_MODEL or gpt-4.1)")
    gen.set_defaults(func=cmd_generate)

    test = sub.add_parser("test", help="run all test cases against a prompt")
    test.add_argument("--prompt", required=True, help="prompt config file")
    test.add_argument("--testcases", required=True, help="test cases file")
    test.add_argument("--eval", default=DEFAULT_EVALUATOR, help="evaluation type: strict or json")
    test.set_defaults(func=cmd_test)

    run = sub.add_parser("run", help="run a single test case by zero-based index")
    run.add_argument("--prompt", required=True, help="prompt config file")
    run.add_argument("--testcases", required=True, help="test cases file")
    run.add_argument("--index", required=True, type=int, help="test case index")
    run.add_argument("--eval", default=DEFAULT_EVALUATOR, help="evaluation type: strict or json")
    run.set_defaults(func=cmd_run)

    ev = sub.add_parser("eval", help="run an eval plan of several suites")
    ev.add_argument("--plan", required=True, help="eval plan file")
    ev.set_defaults(func=cmd_eval)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    load_dotenv()
    try:
        require_api_key()
        client = build_client()
        return args.func(client, args)
    except PromptTesterError as e:
        logger.debug("command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
