from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


Role = Literal["system", "user", "assistant", "developer"]


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


class JSONSchemaFormat(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: Optional[str] = None
    schema_: Dict[str, Any] = Field(default_factory=dict, alias="schema")
    strict: bool = False


class ResponseFormat(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    json_schema: Optional[JSONSchemaFormat] = None


class PromptConfig(BaseModel):
    """One model invocation: model id, base messages and sampling controls.

    Unknown keys (for example an editor ``$schema`` hint) are ignored.
    """

    model_config = ConfigDict(frozen=True)

    model: str
    messages: Tuple[Message, ...]
    temperature: Optional[float] = None
    max_tokens: Optional[int] = Field(default=None, ge=0)
    top_p: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    stop: Optional[Tuple[str, ...]] = None
    response_format: Optional[ResponseFormat] = None

    def system_prompt(self) -> str:
        for m in self.messages:
            if m.role == "system":
                return m.content
        return ""

    def with_user_message(self, content: str) -> Tuple[Message, ...]:
        return self.messages + (Message(role="user", content=content),)

    def sampling_params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {}
        if self.temperature is not None:
            params["temperature"] = self.temperature
        if self.max_tokens is not None:
            params["max_tokens"] = self.max_tokens
        if self.top_p is not None:
            params["top_p"] = self.top_p
        if self.stop is not None:
            params["stop"] = list(self.stop)
        if self.response_format is not None:
            params["response_format"] = self.response_format.model_dump(by_alias=True, exclude_none=True)
        return params


class TestCase(BaseModel):
    model_config = ConfigDict(frozen=True)
    # keeps pytest from collecting this model when a test module imports it
    __test__ = False

    input: str
    expected: str


class SuiteDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    prompt: str
    samples: str
    eval_type: str = "strict"

    @field_validator("eval_type", mode="before")
    @classmethod
    def _default_eval_type(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "strict"
        return v.strip() if isinstance(v, str) else v


class EvalPlan(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    tests: Tuple[SuiteDefinition, ...] = ()


class RunResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    input: str
    expected: str
    actual: Optional[str] = None
    passed: bool
    diagnostic: Optional[str] = None
    latency_ms: int = 0


class SuiteResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: Tuple[RunResult, ...] = ()

    @computed_field
    @property
    def passed(self) -> int:
        return sum(1 for r in self.results if r.passed)

    @computed_field
    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def pass_rate(self) -> float:
        return (self.passed / self.total) if self.total else 0.0


class SuiteReport(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    result: SuiteResult


class PlanResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    suites: Tuple[SuiteReport, ...] = ()

    @computed_field
    @property
    def passed(self) -> int:
        return sum(s.result.passed for s in self.suites)

    @computed_field
    @property
    def total(self) -> int:
        return sum(s.result.total for s in self.suites)


def dump_cases(cases: List[TestCase]) -> List[Dict[str, str]]:
    return [c.model_dump() for c in cases]
