"""Request/response boundary to the AI assistant backend."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssistantReply:
    text: str
    prompt_tokens: int = 0
    eval_tokens: int = 0


class AssistantBackend(Protocol):
    def generate(self, prompt: str) -> AssistantReply: ...


@dataclass(frozen=True)
class AssistantResult:
    ok: bool
    text: str = ""
    error: Optional[str] = None


def _month_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


@dataclass
class UsageCounter:
    """Completed requests and token totals for the current calendar month."""

    month: str = ""
    completed: int = 0
    prompt_tokens: int = 0
    eval_tokens: int = 0

    def ensure_month(self, now: Optional[datetime] = None) -> None:
        month = _month_key(now or datetime.now())
        if self.month != month:
            self.month = month
            self.completed = 0
            self.prompt_tokens = 0
            self.eval_tokens = 0

    def record(self, reply: Optional[AssistantReply], now: Optional[datetime] = None) -> None:
        self.ensure_month(now)
        self.completed += 1
        if reply is not None:
            self.prompt_tokens += max(0, reply.prompt_tokens)
            self.eval_tokens += max(0, reply.eval_tokens)


def run_prompt(
    backend: AssistantBackend,
    prompt: str,
    usage: Optional[UsageCounter] = None,
    now: Optional[datetime] = None,
) -> AssistantResult:
    """Send one prompt; a backend failure only fails this request."""

    if not prompt or not prompt.strip():
        raise ValueError("prompt must not be empty")

    reply = None
    try:
        reply = backend.generate(prompt)
        text = (reply.text or "").strip()
        if not text:
            raise ValueError("assistant returned an empty reply")
    except Exception as exc:  # noqa: BLE001
        logger.warning("Assistant request failed: %s", exc)
        return AssistantResult(ok=False, error=str(exc) or exc.__class__.__name__)
    finally:
        if usage is not None:
            usage.record(reply, now)

    return AssistantResult(ok=True, text=text)
