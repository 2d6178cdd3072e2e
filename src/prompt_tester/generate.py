import json
import logging
import os
from typing import Any, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .client import run_chat_inference
from .errors import GenerationParseFailure
from .schemas import Message, PromptConfig, TestCase

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR_MODEL = "gpt-4.1"

GENERATION_TEMPLATE = """Given this system prompt: "{system_prompt}"

Generate {count} diverse test cases as JSON array in this exact format:
[
  {{
    "input": "example input text",
    "expected": "expected output"
  }}
]

Make the test cases varied and realistic. Include edge cases and different scenarios that would test the system prompt thoroughly.
Respond with the JSON array only, without markdown fences or any other text."""

_cases_adapter = TypeAdapter(List[TestCase])


def build_generation_messages(system_prompt: str, count: int) -> tuple:
    return (
        Message(role="developer", content=system_prompt),
        Message(role="user", content=GENERATION_TEMPLATE.format(system_prompt=system_prompt, count=count)),
    )


def parse_test_cases(text: str) -> List[TestCase]:
    try:
        return _cases_adapter.validate_python(json.loads(text))
    except (json.JSONDecodeError, RecursionError, ValidationError) as e:
        raise GenerationParseFailure(f"failed to parse generated test cases: {e}") from e


def generate_test_cases(
    client: Any,
    config: PromptConfig,
    existing: Sequence[TestCase],
    count: int,
    model: Optional[str] = None,
) -> List[TestCase]:
    """Synthesize ``count`` cases from the config's system prompt.

    Returns ``existing`` unchanged followed by the new cases.
    """
    if count <= 0:
        raise ValueError(f"count must be a positive integer, got {count}")

    model = model or os.getenv("GENERATOR_MODEL", DEFAULT_GENERATOR_MODEL)
    system_prompt = config.system_prompt()
    if not system_prompt:
        logger.warning("no system message in prompt config; generating from an empty system prompt")

    messages = build_generation_messages(system_prompt, count)
    text = run_chat_inference(client, model, messages)

    generated = parse_test_cases(text)
    if len(generated) > count:
        logger.info("provider returned %d cases, keeping the first %d", len(generated), count)
        generated = generated[:count]

    return list(existing) + generated
