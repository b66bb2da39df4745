"""Class meeting schedule helpers."""

import logging
from typing import Dict, List, Sequence, Tuple

from .const import DAY_NAMES
from .models import ClassInfo
from .utils import parse_clock

_LOGGER = logging.getLogger(__name__)

# Backend day tokens -> compact schedule notation
DAY_ABBREVIATIONS = {
	"Mon": "M",
	"Tue": "T",
	"Wed": "W",
	"Thu": "Th",
	"Fri": "F",
	"Sat": "Sat",
	"Sun": "Sun",
}

_WEEKDAY_INDEX = {name[:3].lower(): index for index, name in enumerate(DAY_NAMES)}
NO_MEETING_DAY = len(DAY_NAMES)


def _day_tokens(days: str) -> List[str]:
	return [token.strip() for token in (days or "").split(",") if token.strip()]


def format_day_schedule(days: str) -> str:
	"""``Mon,Tue`` -> ``MT``; unknown tokens pass through unchanged."""
	return "".join(DAY_ABBREVIATIONS.get(token, token) for token in _day_tokens(days))


def meeting_weekdays(days: str) -> List[int]:
	"""Weekday indices (Monday = 0) a class meets on, in input order."""
	weekdays = []
	for token in _day_tokens(days):
		index = _WEEKDAY_INDEX.get(token[:3].lower())
		if index is None:
			_LOGGER.debug(f"Unknown meeting day token: {token!r}")
			continue
		weekdays.append(index)
	return weekdays


def day_order(days: str) -> int:
	"""Earliest meeting weekday (Monday = 0); classes without days sort last."""
	weekdays = meeting_weekdays(days)
	return min(weekdays) if weekdays else NO_MEETING_DAY


def start_minutes(info: ClassInfo) -> int:
	"""Minutes after midnight the class starts; unknown times sort last."""
	start = parse_clock(info.start_time)
	if start is None:
		return 24 * 60
	return start.hour * 60 + start.minute


def format_time_range(info: ClassInfo) -> str:
	"""``5:00 PM - 7:00 PM`` as shown on the class list."""
	return f"{info.start_time} - {info.end_time}"


def sort_classes(classes: Sequence[ClassInfo]) -> List[ClassInfo]:
	"""Order classes by first meeting day (Monday first), then start time."""
	return sorted(classes, key=lambda info: (day_order(info.days), start_minutes(info)))


def build_week_schedule(classes: Sequence[ClassInfo]) -> List[Tuple[str, List[ClassInfo]]]:
	"""Bucket classes under every weekday they meet, Monday first.

	Days without classes are omitted; a class meeting twice a week appears
	under both days.
	"""
	buckets: Dict[int, List[ClassInfo]] = {}
	for info in classes:
		for weekday in set(meeting_weekdays(info.days)):
			buckets.setdefault(weekday, []).append(info)

	return [
		(DAY_NAMES[weekday], sorted(buckets[weekday], key=start_minutes))
		for weekday in sorted(buckets)
	]
