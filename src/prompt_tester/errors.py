from pathlib import Path
from typing import Optional, Union


class PromptTesterError(Exception):
    """Base class for every error the harness reports to the user."""


class ConfigLoadError(PromptTesterError):
    def __init__(self, path: Union[Path, str], cause: Union[Exception, str]) -> None:
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"failed to load {self.path}: {cause}")


class UnsupportedFormat(ConfigLoadError):
    def __init__(self, path: Union[Path, str]) -> None:
        ext = Path(path).suffix.lower() or "<none>"
        super().__init__(path, f"unsupported file format: {ext} (use .json, .yaml, or .yml)")


class UnknownEvaluatorError(PromptTesterError):
    def __init__(self, kind: str, known: list[str]) -> None:
        self.kind = kind
        super().__init__(f"unknown evaluation type: {kind} (use {', '.join(repr(k) for k in known)})")


class MissingCredentialsError(PromptTesterError):
    pass


class ProviderError(PromptTesterError):
    pass


class EvaluationFailure(PromptTesterError):
    def __init__(self, kind: str, which: str, cause: Optional[Exception] = None) -> None:
        self.kind = kind
        self.which = which
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        if kind == "malformed_json":
            super().__init__(f"failed to parse {which} JSON{detail}")
        else:
            super().__init__(f"cannot compare {which} JSON ({kind}){detail}")


class GenerationParseFailure(PromptTesterError):
    pass


class IndexOutOfRange(PromptTesterError):
    def __init__(self, index: int, count: int) -> None:
        self.index = index
        self.count = count
        if count:
            super().__init__(f"index {index} out of range (0-{count - 1})")
        else:
            super().__init__(f"index {index} out of range (no test cases)")
