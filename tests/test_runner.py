import logging

from prompt_tester.evaluators import JSONEvaluator, StrictEvaluator
from prompt_tester.runner import run_case, run_suite
from prompt_tester.schemas import TestCase


def test_run_case_appends_user_turn_without_mutating_config(fake_client, prompt_config):
    client = fake_client(["  Positive \n"])
    before = prompt_config.messages

    result = run_case(client, TestCase(input="great", expected="positive"), prompt_config, StrictEvaluator())

    assert result.passed is True
    assert result.actual == "Positive"
    assert prompt_config.messages == before
    sent = client.calls[0]["messages"]
    assert sent[:-1] == [m.model_dump() for m in before]
    assert sent[-1] == {"role": "user", "content": "great"}
    assert client.calls[0]["model"] == "gpt-4o-mini"
    assert client.calls[0]["params"] == {"temperature": 0.0}


def test_run_case_provider_error_is_recorded(fake_client, prompt_config, capsys):
    client = fake_client([ConnectionError("connection reset")])

    result = run_case(client, TestCase(input="x", expected="y"), prompt_config, StrictEvaluator(), index=4)

    assert result.passed is False
    assert result.actual is None
    assert result.index == 4
    assert "connection reset" in result.diagnostic
    assert "ERROR" in capsys.readouterr().out


def test_run_case_evaluation_failure_is_recorded(fake_client, prompt_config):
    client = fake_client(["not json at all"])

    result = run_case(client, TestCase(input="x", expected='{"a": 1}'), prompt_config, JSONEvaluator())

    assert result.passed is False
    assert result.actual == "not json at all"
    assert "actual JSON" in result.diagnostic


def test_run_case_prints_detail(fake_client, prompt_config, capsys):
    run_case(fake_client(["negative"]), TestCase(input="meh", expected="positive"), prompt_config, StrictEvaluator())

    out = capsys.readouterr().out
    assert "Input: meh" in out
    assert "Expected: positive" in out
    assert "Got: negative" in out
    assert "PASSED: False" in out


def test_run_suite_counts_and_order(fake_client, prompt_config, capsys):
    cases = [
        TestCase(input="one", expected="a"),
        TestCase(input="two", expected="b"),
        TestCase(input="three", expected="c"),
        TestCase(input="four", expected="d"),
    ]
    client = fake_client(["a", "wrong", RuntimeError("boom"), "D"])

    suite = run_suite(client, cases, prompt_config, StrictEvaluator())

    assert suite.total == 4
    assert suite.passed == 2
    assert [r.input for r in suite.results] == ["one", "two", "three", "four"]
    assert [r.index for r in suite.results] == [0, 1, 2, 3]
    assert [r.passed for r in suite.results] == [True, False, False, True]
    assert len(client.calls) == 4
    for call, case in zip(client.calls, cases):
        assert len(call["messages"]) == len(prompt_config.messages) + 1
        assert call["messages"][-1]["content"] == case.input
    out = capsys.readouterr().out
    assert out.index("Test 1:") < out.index("Test 2:") < out.index("Test 4:")


def test_run_suite_empty(fake_client, prompt_config):
    suite = run_suite(fake_client(), [], prompt_config, StrictEvaluator())
    assert (suite.passed, suite.total, suite.pass_rate) == (0, 0, 0.0)


def test_run_suite_deeply_nested_answer_fails_only_its_case(fake_client, prompt_config):
    cases = [TestCase(input="deep", expected="[]"), TestCase(input="flat", expected="[]")]
    client = fake_client(["[" * 100_000 + "]" * 100_000, "[]"])

    suite = run_suite(client, cases, prompt_config, JSONEvaluator())

    assert len(client.calls) == 2
    assert [r.passed for r in suite.results] == [False, True]
    assert suite.results[0].actual
    assert "actual JSON" in suite.results[0].diagnostic


def test_provider_error_is_not_logged_at_error_level(fake_client, prompt_config, caplog):
    caplog.set_level(logging.DEBUG, logger="prompt_tester")

    run_case(fake_client([TimeoutError("slow")]), TestCase(input="x", expected="y"), prompt_config, StrictEvaluator())

    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
    assert any("slow" in r.getMessage() for r in caplog.records if r.name == "prompt_tester.client")
