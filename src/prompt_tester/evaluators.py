"""Judging strategies that decide whether a model answer matches a test case.

Every evaluator exposes ``evaluate(expected, actual) -> Verdict`` and nothing
else; runners never look at the concrete class. New kinds are added with
:func:`register_evaluator` and selected by name with :func:`get_evaluator`.
"""

import json
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Protocol, Type

from .errors import EvaluationFailure, UnknownEvaluatorError

DEFAULT_EVALUATOR = "strict"


class Verdict(NamedTuple):
    passed: bool
    diagnostic: Optional[str] = None


class Evaluator(Protocol):
    def evaluate(self, expected: str, actual: str) -> Verdict:
        ...


EVALUATORS: Dict[str, Type[Evaluator]] = {}


def register_evaluator(kind: str) -> Callable[[Type[Evaluator]], Type[Evaluator]]:
    def _register(cls: Type[Evaluator]) -> Type[Evaluator]:
        EVALUATORS[kind] = cls
        return cls

    return _register


def get_evaluator(kind: Optional[str] = None) -> Evaluator:
    name = (kind or "").strip() or DEFAULT_EVALUATOR
    cls = EVALUATORS.get(name)
    if cls is None:
        raise UnknownEvaluatorError(name, sorted(EVALUATORS))
    return cls()


@register_evaluator("strict")
class StrictEvaluator:
    """Case-insensitive comparison of the trimmed strings."""

    def evaluate(self, expected: str, actual: str) -> Verdict:
        return Verdict(expected.strip().lower() == actual.strip().lower())


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _child(path: str, key: str) -> str:
    if key.isidentifier():
        return f"{path}.{key}"
    return f"{path}[{json.dumps(key, ensure_ascii=False)}]"


def json_diff(expected: Any, actual: Any, path: str = "$") -> List[str]:
    """List every structural difference between two decoded JSON values.

    Object keys compare as sets; arrays compare position by position.
    """
    kind = _type_name(expected)
    if kind != _type_name(actual):
        return [f"{path}: expected {kind}, got {_type_name(actual)}"]

    if kind == "object":
        diffs: List[str] = []
        for key in expected:
            if key not in actual:
                diffs.append(f"{path}: missing key {key!r}")
            else:
                diffs.extend(json_diff(expected[key], actual[key], _child(path, key)))
        for key in actual:
            if key not in expected:
                diffs.append(f"{path}: unexpected key {key!r}")
        return diffs

    if kind == "array":
        diffs = []
        if len(expected) != len(actual):
            diffs.append(f"{path}: expected array of length {len(expected)}, got {len(actual)}")
        for i, (e, a) in enumerate(zip(expected, actual)):
            diffs.extend(json_diff(e, a, f"{path}[{i}]"))
        return diffs

    if expected != actual:
        return [
            f"{path}: expected {json.dumps(expected, ensure_ascii=False)}, "
            f"got {json.dumps(actual, ensure_ascii=False)}"
        ]
    return []


def _parse(text: str, which: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, RecursionError) as e:
        raise EvaluationFailure("malformed_json", which, e) from e


@register_evaluator("json")
class JSONEvaluator:
    """Structural equality of two JSON documents."""

    def evaluate(self, expected: str, actual: str) -> Verdict:
        expected_json = _parse(expected, "expected")
        actual_json = _parse(actual, "actual")

        try:
            diffs = json_diff(expected_json, actual_json)
        except RecursionError as e:
            raise EvaluationFailure("too_deep", "actual", e) from e
        if not diffs:
            return Verdict(True)
        return Verdict(False, "JSON mismatch:\n" + "\n".join(f"  {d}" for d in diffs))
