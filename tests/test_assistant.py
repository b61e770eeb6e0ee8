from datetime import datetime

import pytest

from agenda_engine.assistant import AssistantReply, UsageCounter, run_prompt


class EchoBackend:
    def generate(self, prompt):
        return AssistantReply(text=f"  {prompt.upper()}  ", prompt_tokens=5, eval_tokens=7)


class FailingBackend:
    def generate(self, prompt):
        raise ConnectionError("backend offline")


def test_successful_request_records_usage():
    usage = UsageCounter()
    result = run_prompt(EchoBackend(), "hello", usage, now=datetime(2024, 3, 5))
    assert result.ok
    assert result.text == "HELLO"
    assert (usage.month, usage.completed, usage.prompt_tokens, usage.eval_tokens) == ("2024-03", 1, 5, 7)


def test_failed_request_is_isolated(caplog):
    usage = UsageCounter()
    failed = run_prompt(FailingBackend(), "hello", usage, now=datetime(2024, 3, 5))
    assert not failed.ok
    assert failed.error == "backend offline"
    assert "Assistant request failed" in caplog.text

    ok = run_prompt(EchoBackend(), "again", usage, now=datetime(2024, 3, 5))
    assert ok.ok
    assert usage.completed == 2
    assert usage.prompt_tokens == 5


def test_usage_resets_each_month():
    usage = UsageCounter()
    run_prompt(EchoBackend(), "march", usage, now=datetime(2024, 3, 31, 23))
    run_prompt(EchoBackend(), "april", usage, now=datetime(2024, 4, 1, 0, 5))
    assert (usage.month, usage.completed, usage.eval_tokens) == ("2024-04", 1, 7)


def test_blank_prompt_is_rejected():
    with pytest.raises(ValueError):
        run_prompt(EchoBackend(), "   ")


class SilentBackend:
    def generate(self, prompt):
        return AssistantReply(text=None, prompt_tokens=3)


def test_missing_reply_text_fails_the_request():
    usage = UsageCounter()
    result = run_prompt(SilentBackend(), "hello", usage, now=datetime(2024, 3, 5))
    assert not result.ok
    assert result.error == "assistant returned an empty reply"
    assert (usage.completed, usage.prompt_tokens) == (1, 3)
