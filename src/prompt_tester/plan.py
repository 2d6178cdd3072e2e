"""Run an eval plan: several suites, each with its own prompt, cases and evaluator."""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from .evaluators import get_evaluator
from .loader import load_eval_plan, load_prompt_config, load_test_cases
from .runner import run_suite
from .schemas import EvalPlan, PlanResult, SuiteReport

logger = logging.getLogger(__name__)


def _resolve(path: str, base_dir: Optional[Path]) -> Path:
    p = Path(path).expanduser()
    if base_dir is not None and not p.is_absolute():
        return base_dir / p
    return p


def run_plan(client: Any, plan: EvalPlan, base_dir: Optional[Path] = None) -> PlanResult:
    """Run every suite of ``plan`` in order and sum the counts.

    A suite whose prompt, cases or eval type cannot be resolved aborts the
    whole plan; nothing is returned for suites that already ran.
    """
    reports = []
    for n, suite in enumerate(plan.tests, 1):
        config = load_prompt_config(_resolve(suite.prompt, base_dir))
        cases = load_test_cases(_resolve(suite.samples, base_dir))
        evaluator = get_evaluator(suite.eval_type)

        print("=" * 60)
        print(f"[{n}/{len(plan.tests)}] {suite.name} ({len(cases)} cases, eval: {suite.eval_type})")
        print("=" * 60)
        logger.debug("suite %s: prompt=%s samples=%s", suite.name, suite.prompt, suite.samples)

        result = run_suite(client, cases, config, evaluator)
        print(f"{suite.name}: {result.passed}/{result.total} tests passed\n")
        reports.append(SuiteReport(name=suite.name, result=result))

    return PlanResult(name=plan.name, suites=tuple(reports))


def run_plan_file(client: Any, path: Union[Path, str]) -> PlanResult:
    path = Path(path)
    plan = load_eval_plan(path)
    return run_plan(client, plan, base_dir=path.parent)
