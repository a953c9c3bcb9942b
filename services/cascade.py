"""
Cascade Module

A small "first success wins" combinator shared by the access-strategy cascade
and the content-source fallback cascade. Each attempt is a named callable; an
attempt fails by raising a FetchError, which is recorded rather than
propagated. Attempts run strictly one after another.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Tuple, Type

from utils.exceptions import FetchError


@dataclass
class Attempt:
    """A named step of a cascade."""
    name: str
    run: Callable[[], Any]


@dataclass
class Outcome:
    """Result of running a cascade: the winning value, or every failure seen."""
    name: Optional[str] = None
    value: Any = None
    failures: List[Tuple[str, Exception]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.name is not None

    @property
    def last_error(self) -> Optional[Exception]:
        return self.failures[-1][1] if self.failures else None


def first_success(
    attempts: Iterable[Attempt],
    on_failure: Optional[Callable[[Attempt, Exception], None]] = None,
    on_success: Optional[Callable[[Attempt], None]] = None,
    errors: Tuple[Type[BaseException], ...] = (FetchError,),
) -> Outcome:
    """
    Run attempts in order and return the first one that succeeds.

    Args:
        attempts: Ordered attempts. Generators are consumed lazily, so later
            attempts may depend on state changed by earlier failures.
        on_failure: Called with the attempt and its error after each failure.
        on_success: Called with the winning attempt.
        errors: Exception types counted as a failed attempt; anything else propagates.

    Returns:
        Outcome: ``ok`` is False when every attempt failed (or there were none).
    """
    outcome = Outcome()
    for attempt in attempts:
        try:
            value = attempt.run()
        except errors as e:
            outcome.failures.append((attempt.name, e))
            if on_failure:
                on_failure(attempt, e)
            continue

        outcome.name = attempt.name
        outcome.value = value
        if on_success:
            on_success(attempt)
        return outcome

    return outcome
