import logging
import time
from typing import Any, Sequence

from .client import run_chat_inference
from .errors import EvaluationFailure, ProviderError
from .evaluators import Evaluator
from .schemas import PromptConfig, RunResult, SuiteResult, TestCase

logger = logging.getLogger(__name__)


def run_case(
    client: Any,
    case: TestCase,
    config: PromptConfig,
    evaluator: Evaluator,
    index: int = 0,
) -> RunResult:
    messages = config.with_user_message(case.input)

    t0 = time.time()
    try:
        response = run_chat_inference(client, config.model, messages, **config.sampling_params())
    except ProviderError as e:
        print(f"  ERROR: {e}\n")
        return RunResult(
            index=index,
            input=case.input,
            expected=case.expected,
            actual=None,
            passed=False,
            diagnostic=str(e),
            latency_ms=int((time.time() - t0) * 1000),
        )
    latency_ms = int((time.time() - t0) * 1000)
    response = response.strip()

    print(f"Input: {case.input}")
    print(f"Expected: {case.expected}")
    print(f"Got: {response}")

    try:
        passed, diagnostic = evaluator.evaluate(case.expected, response)
    except EvaluationFailure as e:
        print(f"EVAL ERROR: {e}\n")
        passed, diagnostic = False, str(e)
    else:
        if diagnostic:
            print(diagnostic)
        print(f"PASSED: {passed}\n")

    return RunResult(
        index=index,
        input=case.input,
        expected=case.expected,
        actual=response,
        passed=passed,
        diagnostic=diagnostic,
        latency_ms=latency_ms,
    )


def run_suite(
    client: Any,
    cases: Sequence[TestCase],
    config: PromptConfig,
    evaluator: Evaluator,
) -> SuiteResult:
    results = []
    for i, case in enumerate(cases):
        print(f"Test {i + 1}:")
        results.append(run_case(client, case, config, evaluator, index=i))

    suite = SuiteResult(results=tuple(results))
    logger.info("suite finished: %d/%d passed", suite.passed, suite.total)
    return suite
