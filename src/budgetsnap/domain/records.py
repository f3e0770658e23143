"""Conversion of loosely-typed records into domain entities.

Records arrive as plain mappings (JSON exports, rows from an external
store). Bad dates become None so the engine can skip them; values that do
not fit a closed enum drop the whole record.
"""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from dateutil import parser as date_parser

from budgetsnap.domain.entities import (
    DEFAULT_CATEGORY,
    EntryType,
    Frequency,
    OneTimeEntry,
    Override,
    OverrideType,
    Rule,
)
from budgetsnap.domain.windows import as_calendar_date

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


class _Rejected(Exception):
    """Raised internally when a record cannot be converted."""


def _enum(enum_cls: type[E], value: Any, default: E) -> E:
    if value is None or value == "":
        return default
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise _Rejected(f"unknown {enum_cls.__name__} '{value}'")


def _required_enum(enum_cls: type[E], value: Any) -> E:
    if value is None or value == "":
        raise _Rejected(f"missing {enum_cls.__name__}")
    return _enum(enum_cls, value, None)


def _amount(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        raise _Rejected(f"invalid amount '{value}'")
    if not amount.is_finite():
        raise _Rejected(f"invalid amount '{value}'")
    return amount


def _int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise _Rejected(f"invalid integer '{value}'")


def _timestamp(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        return None


def _text(value: Any, default: str = "") -> str:
    return default if value is None else str(value)


def _bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        text = value.strip().lower()
        if not text:
            return default
        return text not in ("false", "0", "no")
    return bool(value)


def _convert(kind: str, record: Mapping[str, Any], build: Callable[[], T]) -> Optional[T]:
    if record.get("id") is None:
        logger.warning("Dropping %s record without id", kind)
        return None
    try:
        return build()
    except _Rejected as exc:
        logger.warning("Dropping %s %s: %s", kind, record.get("id"), exc)
        return None


def entry_from_record(record: Mapping[str, Any]) -> Optional[OneTimeEntry]:
    """Build a OneTimeEntry, or None when the record is unusable."""
    return _convert(
        "entry",
        record,
        lambda: OneTimeEntry(
            id=str(record["id"]),
            type=_enum(EntryType, record.get("type"), EntryType.EXPENSE),
            category=_text(
                record.get("category", record.get("category_name")), DEFAULT_CATEGORY
            ),
            description=_text(record.get("description")),
            amount=_amount(record.get("amount")),
            due_date=as_calendar_date(record.get("due_date")),
            paid_on=as_calendar_date(record.get("paid_on")),
            created_at=_timestamp(record.get("created_at")),
        ),
    )


def rule_from_record(record: Mapping[str, Any]) -> Optional[Rule]:
    """Build a Rule, or None when the record is unusable."""
    return _convert(
        "rule",
        record,
        lambda: Rule(
            id=str(record["id"]),
            type=_enum(EntryType, record.get("type"), EntryType.EXPENSE),
            category=_text(
                record.get("category", record.get("category_name")), DEFAULT_CATEGORY
            ),
            description=_text(record.get("description")),
            amount=_amount(record.get("amount")),
            frequency=_enum(Frequency, record.get("frequency"), Frequency.MONTHLY),
            start_anchor=as_calendar_date(record.get("start_anchor")),
            dom=_int(record.get("dom")),
            dow=_int(record.get("dow")),
            interval=_int(record.get("interval")) or 1,
            active=_bool(record.get("active"), True),
            end_date=as_calendar_date(record.get("end_date")),
            entry_id=_text(record["entry_id"]) if record.get("entry_id") is not None else None,
            created_at=_timestamp(record.get("created_at")),
        ),
    )


def override_from_record(record: Mapping[str, Any]) -> Optional[Override]:
    """Build an Override, or None when the record is unusable."""
    return _convert(
        "override",
        record,
        lambda: Override(
            id=str(record["id"]),
            rule_id=_text(record.get("rule_id")),
            occurrence_date=as_calendar_date(record.get("occurrence_date")),
            override_type=_required_enum(OverrideType, record.get("override_type")),
            paid_on=as_calendar_date(record.get("paid_on")),
            new_date=as_calendar_date(record.get("new_date")),
            created_at=_timestamp(record.get("created_at")),
            updated_at=_timestamp(record.get("updated_at")),
        ),
    )


def coerce_records(
    records: Optional[Iterable[Mapping[str, Any]]],
    convert: Callable[[Mapping[str, Any]], Optional[T]],
) -> list[T]:
    """Convert a collection of records, dropping the unusable ones."""
    converted = []
    for record in records or ():
        item = convert(record)
        if item is not None:
            converted.append(item)
    return converted
