"""Override resolution for recurring occurrences."""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional

from budgetsnap.domain.entities import Override, OverrideType
from budgetsnap.domain.windows import as_calendar_date

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class ResolvedOccurrence:
    """Outcome of applying overrides to one scheduled occurrence.

    ``occurrence_id`` is the winning override's id, or None when no override
    matched; callers then derive ``"{rule_id}:{effective_date}"``.
    ``effective_date`` is None when the scheduled date was unusable.
    """

    effective_date: Optional[date]
    is_paid: bool = False
    occurrence_id: Optional[str] = None
    override_type: Optional[OverrideType] = None


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def last_touched(override: Override) -> datetime:
    """Timestamp used to rank overrides: updated_at, else created_at, else epoch."""
    return _as_utc(override.updated_at) or _as_utc(override.created_at) or _EPOCH


def matching_overrides(
    base_date: date, rule_id: str, overrides: Iterable[Override]
) -> list[Override]:
    """Overrides targeting ``rule_id`` on ``base_date``, in input order.

    Overrides without a usable occurrence date never match.
    """
    matches = []
    for override in overrides:
        if str(override.rule_id) != str(rule_id):
            continue
        target = as_calendar_date(override.occurrence_date)
        if target is None:
            logger.debug("Ignoring override %s without occurrence date", override.id)
            continue
        if target == base_date:
            matches.append(override)
    return matches


def pick_winner(candidates: list[Override]) -> Optional[Override]:
    """Return the most recently touched override.

    The sort is stable, so ties keep input order and the earliest listed wins.
    """
    if not candidates:
        return None
    return sorted(candidates, key=last_touched, reverse=True)[0]


def resolve_override(
    base_date: Any, rule_id: str, overrides: Iterable[Override]
) -> ResolvedOccurrence:
    """Apply the winning override to a scheduled occurrence.

    Only one override takes effect per occurrence. ``postponed`` moves the
    effective date to ``new_date``; ``paid`` marks the occurrence paid when
    ``paid_on`` is set; ``skipped`` is recorded on the result but changes
    neither date nor paid state.

    Args:
        base_date: Unmodified scheduled date (date or ISO string)
        rule_id: Rule the occurrence belongs to
        overrides: Candidate override records

    Returns:
        ResolvedOccurrence. An unusable ``base_date`` yields an
        ``effective_date`` of None; this function never raises.
    """
    scheduled = as_calendar_date(base_date)
    if scheduled is None:
        logger.debug("Cannot resolve overrides for malformed date %r", base_date)
        return ResolvedOccurrence(effective_date=None)

    chosen = pick_winner(matching_overrides(scheduled, rule_id, overrides))
    if chosen is None:
        return ResolvedOccurrence(effective_date=scheduled)

    effective = scheduled
    is_paid = False
    if chosen.override_type == OverrideType.POSTPONED:
        new_date = as_calendar_date(chosen.new_date)
        if new_date is not None:
            effective = new_date
    elif chosen.override_type == OverrideType.PAID:
        is_paid = as_calendar_date(chosen.paid_on) is not None

    occurrence_id = str(chosen.id) if chosen.id is not None else None
    return ResolvedOccurrence(
        effective_date=effective,
        is_paid=is_paid,
        occurrence_id=occurrence_id,
        override_type=chosen.override_type,
    )
