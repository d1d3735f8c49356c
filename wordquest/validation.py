"""Input validation helpers shared by the practice engine."""

from __future__ import annotations

import datetime as dt


class PracticeValidationError(ValueError):
    """Raised when the caller hands the engine input it must not coerce."""


def require_non_negative(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise PracticeValidationError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise PracticeValidationError(f"{name} must be non-negative, got {value}")
    return value


def require_correct_within_attempts(correct: int, attempts: int) -> None:
    if correct > attempts:
        raise PracticeValidationError(
            f"correct count ({correct}) cannot exceed attempt count ({attempts})"
        )


def require_percentage(name: str, value: float | None) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PracticeValidationError(f"{name} must be a number, got {value!r}")
    if not 0 <= value <= 100:
        raise PracticeValidationError(f"{name} must be within 0-100, got {value}")
    return float(value)


def require_target_word(target: str) -> str:
    if not isinstance(target, str) or not target.strip():
        raise PracticeValidationError("target word must be a non-empty string")
    return target


def parse_date(name: str, value: dt.date | str | None) -> dt.date | None:
    """Accept a date, an ISO ``YYYY-MM-DD`` string, or None."""
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.date.fromisoformat(value.strip())
        except ValueError:
            raise PracticeValidationError(f"{name} is not an ISO date: {value!r}")
    raise PracticeValidationError(f"{name} must be a date, got {value!r}")
