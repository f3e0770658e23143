"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


def entry_not_found(entry_id: str) -> str:
    """Return message for missing one-time entry."""
    return f"Entry {entry_id} not found"


def rule_not_found(rule_id: str) -> str:
    """Return message for missing recurring rule."""
    return f"Rule {rule_id} not found"


def invalid_choice(field_name: str, value: object, choices: tuple[str, ...]) -> str:
    """Return message for a value outside an enumerated set."""
    return f"Invalid {field_name} '{value}'. Expected one of: {', '.join(choices)}"


def invalid_window(start: object, end: object) -> str:
    """Return message for a window whose end precedes its start."""
    return f"Window end {end} is before window start {start}"


def day_of_month_out_of_range(dom: int) -> str:
    """Return message for a day of month outside 1-31."""
    return f"Day of month must be between 1 and 31, got {dom}"


def day_of_week_out_of_range(dow: int) -> str:
    """Return message for a day of week outside 1-7."""
    return f"Day of week must be between 1 and 7, got {dow}"


def interval_out_of_range(interval: int) -> str:
    """Return message for a non-positive recurrence interval."""
    return f"Interval must be at least 1, got {interval}"
