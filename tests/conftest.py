import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from prompt_tester.schemas import PromptConfig


class FakeClient:
    """Stands in for InferenceClient: replays scripted answers and records calls.

    A scripted item that is an Exception instance is raised instead of returned.
    """

    def __init__(self, answers=()):
        self.answers = list(answers)
        self.calls = []

    def chat_completion(self, model, messages, **params):
        self.calls.append({"model": model, "messages": messages, "params": params})
        answer = self.answers.pop(0)
        if isinstance(answer, Exception):
            raise answer
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=answer))])


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def prompt_config():
    return PromptConfig.model_validate(
        {
            "model": "gpt-4o-mini",
            "messages": [
                {"role": "system", "content": "Classify sentiment as positive or negative."},
                {"role": "assistant", "content": "Ready."},
            ],
            "temperature": 0.0,
        }
    )


def write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def prompt_file(tmp_path):
    return write_json(
        tmp_path / "prompt.json",
        {
            "model": "gpt-4o-mini",
            "messages": [{"role": "system", "content": "Answer with one word."}],
        },
    )


@pytest.fixture
def cases_file(tmp_path):
    return write_json(
        tmp_path / "cases.json",
        [
            {"input": "I love it", "expected": "positive"},
            {"input": "I hate it", "expected": "negative"},
            {"input": "Best day ever", "expected": "positive"},
        ],
    )
