"""Load prompt configs, test cases and eval plans from JSON or YAML files."""

import json
from pathlib import Path
from typing import Any, List, Union

import yaml
from pydantic import TypeAdapter, ValidationError

from .errors import ConfigLoadError, UnsupportedFormat
from .schemas import EvalPlan, PromptConfig, TestCase, dump_cases

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}

_cases_adapter = TypeAdapter(List[TestCase])


def check_format(path: Union[Path, str]) -> str:
    """Return the lower-cased suffix of ``path`` or raise UnsupportedFormat."""
    path = Path(path)
    ext = path.suffix.lower()
    if ext not in JSON_SUFFIXES | YAML_SUFFIXES:
        raise UnsupportedFormat(path)
    return ext


def load_document(path: Union[Path, str]) -> Any:
    path = Path(path)
    ext = check_format(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(path, e) from e

    try:
        if ext in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError, RecursionError) as e:
        raise ConfigLoadError(path, e) from e


def load_prompt_config(path: Union[Path, str]) -> PromptConfig:
    data = load_document(path)
    try:
        return PromptConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(path, e) from e


def load_test_cases(path: Union[Path, str]) -> List[TestCase]:
    data = load_document(path)
    if data is None:
        return []
    try:
        return _cases_adapter.validate_python(data)
    except ValidationError as e:
        raise ConfigLoadError(path, e) from e


def load_eval_plan(path: Union[Path, str]) -> EvalPlan:
    data = load_document(path)
    try:
        return EvalPlan.model_validate(data)
    except ValidationError as e:
        raise ConfigLoadError(path, e) from e


def save_test_cases(path: Union[Path, str], cases: List[TestCase]) -> None:
    path = Path(path)
    ext = check_format(path)
    rows = dump_cases(cases)

    if ext in YAML_SUFFIXES:
        text = yaml.safe_dump(rows, sort_keys=False, allow_unicode=True)
    else:
        text = json.dumps(rows, ensure_ascii=False, indent=2) + "\n"

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
