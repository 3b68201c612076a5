"""Ordered first-success-wins fallback over capability-equivalent adapters."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from circuitrag.exceptions import CircuitRAGError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Attempt(Generic[T]):
    """One adapter in a fallback chain.

    Attributes:
        name: Label used in logs and error reports.
        call: Zero-argument coroutine factory performing the call.
    """

    name: str
    call: Callable[[], Awaitable[T]]


class FallbackExhausted(CircuitRAGError):
    """Raised when every attempt in a chain failed or produced nothing.

    Attributes:
        errors: (attempt name, exception or None) for each attempt, in order.
                None means the attempt ran but returned an unusable result.
    """

    def __init__(self, errors: list[tuple[str, BaseException | None]]) -> None:
        names = ", ".join(name for name, _ in errors) or "none"
        super().__init__(f"All fallback attempts failed: {names}")
        self.errors = errors


@dataclass
class FallbackChain(Generic[T]):
    """Try attempts in order; the first accepted result wins.

    Each attempt runs at most once. Exceptions are caught, logged and
    recorded so the chain can move on to the next adapter.

    Example:
        chain = FallbackChain([
            Attempt("openai", lambda: openai_client.acomplete(messages)),
            Attempt("anthropic", lambda: claude_client.acomplete(messages)),
        ])
        completion = await chain.run()
    """

    attempts: Sequence[Attempt[T]]
    accept: Callable[[T], bool] = field(default=lambda result: result is not None)

    async def run(self) -> T:
        errors: list[tuple[str, BaseException | None]] = []
        for attempt in self.attempts:
            try:
                result = await attempt.call()
            except Exception as e:
                logger.warning("Attempt '%s' failed: %s", attempt.name, e)
                errors.append((attempt.name, e))
                continue
            if self.accept(result):
                return result
            logger.info("Attempt '%s' returned no usable result", attempt.name)
            errors.append((attempt.name, None))
        raise FallbackExhausted(errors)
