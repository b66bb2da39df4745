"""Date and time helpers shared by the reconciliation engine."""

import logging
from datetime import datetime, time, timezone, tzinfo
from typing import Any, Optional

_LOGGER = logging.getLogger(__name__)

# Formats the backend is known to emit, tried in order
DATETIME_FORMATS = (
	"%Y-%m-%d %H:%M:%S",
	"%Y-%m-%d %H:%M",
	"%Y-%m-%dT%H:%M:%S",
	"%Y-%m-%dT%H:%M:%S.%f",
	"%Y-%m-%dT%H:%M",
	"%Y-%m-%d",
)

CLOCK_FORMATS = (
	"%I:%M %p",
	"%I:%M%p",
	"%H:%M:%S",
	"%H:%M",
)

_ZERO_DATES = ("0000-00-00", "0000-00-00 00:00:00")


def utcnow() -> datetime:
	"""Return the current instant as an aware UTC datetime."""
	return datetime.now(timezone.utc)


def ensure_aware(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
	"""Attach ``tz`` (UTC when omitted) to a naive datetime; aware values pass through."""
	if value.tzinfo is None:
		return value.replace(tzinfo=tz or timezone.utc)
	return value


def parse_datetime(value: Any, tz: Optional[tzinfo] = None) -> Optional[datetime]:
	"""Parse a backend timestamp into an aware datetime.

	Args:
		value: datetime, ISO-8601 string or MySQL ``YYYY-MM-DD HH:MM:SS`` string
		tz: Zone for naive values (the backend's local zone). UTC when omitted.

	Returns:
		Aware datetime, or None for blank, zero or unparseable values
	"""
	if value is None:
		return None
	if isinstance(value, datetime):
		return ensure_aware(value, tz)

	text = str(value).strip()
	if not text or text in _ZERO_DATES:
		return None

	iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
	try:
		return ensure_aware(datetime.fromisoformat(iso_text), tz)
	except ValueError:
		pass

	for fmt in DATETIME_FORMATS:
		try:
			return ensure_aware(datetime.strptime(text, fmt), tz)
		except ValueError:
			continue

	_LOGGER.debug(f"Failed to parse datetime: {text!r}")
	return None


def parse_clock(value: Any) -> Optional[time]:
	"""Parse a class meeting time such as ``5:00 PM`` or ``17:00``."""
	if not value:
		return None
	text = str(value).strip().upper()
	for fmt in CLOCK_FORMATS:
		try:
			return datetime.strptime(text, fmt).time()
		except ValueError:
			continue
	_LOGGER.debug(f"Failed to parse time: {value!r}")
	return None


def to_local(value: datetime, tz: Optional[tzinfo] = None) -> datetime:
	"""Convert an instant to ``tz`` for calendar arithmetic and display."""
	if tz is None:
		return ensure_aware(value)
	return ensure_aware(value).astimezone(tz)


def parse_number(value: Any, default: Optional[float] = None) -> Optional[float]:
	"""Coerce a backend numeric field (often a string) to float."""
	if value is None or value == "":
		return default
	try:
		return float(value)
	except (TypeError, ValueError):
		_LOGGER.debug(f"Failed to parse number: {value!r}")
		return default


def parse_flag(value: Any) -> bool:
	"""Interpret backend 0/1 (or "0"/"1", bool) flags."""
	if isinstance(value, bool):
		return value
	if value is None:
		return False
	try:
		return int(value) == 1
	except (TypeError, ValueError):
		return str(value).strip().lower() in ("true", "yes")
