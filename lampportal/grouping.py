"""Stable date groupings for activities and notifications."""

from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .const import (
	ACTIVITY_STATUSES,
	DAY_NAMES,
	MONTH_NAMES,
	NO_DUE_DATE_LABEL,
	REFERENCE_YEAR,
	STATUS_COMPLETED,
	STATUS_LATE,
)
from .models import ActivityItem, Notification, NotificationGroups
from .utils import to_local, utcnow


def format_clock(value: datetime, tz: Optional[tzinfo] = None) -> str:
	"""``11:59 PM`` style time."""
	local = to_local(value, tz)
	hours = local.hour % 12 or 12
	suffix = "PM" if local.hour >= 12 else "AM"
	return f"{hours}:{local.minute:02d} {suffix}"


def format_display_datetime(value: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
	"""``Nov 15, 2025, 11:59 PM`` style timestamp; empty for None."""
	if value is None:
		return ""
	local = to_local(value, tz)
	month = MONTH_NAMES[local.month - 1][:3]
	return f"{month} {local.day}, {local.year}, {format_clock(local)}"


def due_date_label(value: Optional[datetime], tz: Optional[tzinfo] = None) -> str:
	"""Group label such as ``November 15, Saturday``."""
	if value is None:
		return NO_DUE_DATE_LABEL
	local = to_local(value, tz)
	return f"{MONTH_NAMES[local.month - 1]} {local.day}, {DAY_NAMES[local.weekday()]}"


def _label_sort_key(label: str) -> Tuple[int, datetime]:
	"""Rebuild a comparable instant from a label's month and day."""
	month_day = label.split(",")[0].split(" ")
	try:
		month = MONTH_NAMES.index(month_day[0]) + 1
		day = int(month_day[1])
		# Feb 29 has no place in a non-leap reference year; clamp it
		return 0, datetime(REFERENCE_YEAR, month, min(day, 28) if month == 2 else day)
	except (ValueError, IndexError):
		return 1, datetime.max


def group_by_due_date(
	items: Iterable[ActivityItem],
	tz: Optional[tzinfo] = None,
) -> List[Tuple[str, List[ActivityItem]]]:
	"""Group activities by due-date label and order the groups chronologically.

	Items keep their input order within a group; groups that compare equal keep
	first-seen order. Activities without a deadline form a trailing group.
	"""
	groups: Dict[str, List[ActivityItem]] = {}
	for item in items:
		groups.setdefault(due_date_label(item.deadline, tz), []).append(item)
	ordered = sorted(groups.items(), key=lambda pair: _label_sort_key(pair[0]))
	return [(label, members) for label, members in ordered]


def filter_by_status(items: Iterable[ActivityItem], status: str) -> List[ActivityItem]:
	"""Items shown under a to-do tab; the completed tab includes late work."""
	if status not in ACTIVITY_STATUSES:
		raise ValueError(f"Unknown activity status: {status}")
	if status == STATUS_COMPLETED:
		wanted = (STATUS_COMPLETED, STATUS_LATE)
	else:
		wanted = (status,)
	return [item for item in items if item.status in wanted]


def is_today_or_later(value: datetime, now: datetime, tz: Optional[tzinfo] = None) -> bool:
	"""True when ``value`` falls on the calendar day of ``now`` (or later) in ``tz``."""
	local_value = to_local(value, tz)
	local_now = to_local(now, tz)
	return local_value.date() >= local_now.date()


def group_notifications(
	notifications: Sequence[Notification],
	now: Optional[datetime] = None,
	tz: Optional[tzinfo] = None,
) -> NotificationGroups:
	"""Partition notifications into new (unread), today and earlier (read).

	``today`` is decided from the timestamp: the notification was created on
	the same calendar day as ``now`` in ``tz``. Read notifications without a
	timestamp are treated as earlier.
	"""
	if now is None:
		now = utcnow()

	groups = NotificationGroups()
	for notification in notifications:
		if not notification.is_read:
			groups.new.append(notification)
		elif notification.created_at is not None and is_today_or_later(notification.created_at, now, tz):
			groups.today.append(notification)
		else:
			groups.earlier.append(notification)
	return groups


def _plural(count: int, unit: str) -> str:
	return f"{count} {unit}{'' if count == 1 else 's'} ago"


def relative_time_label(value: Optional[datetime], now: Optional[datetime] = None) -> str:
	"""Human readable age such as ``just now``, ``5 minutes ago`` or ``2 weeks ago``."""
	if value is None:
		return ""
	if now is None:
		now = utcnow()

	seconds = int((to_local(now) - to_local(value)).total_seconds())
	if seconds < 60:
		return "just now"
	minutes = seconds // 60
	if minutes < 60:
		return _plural(minutes, "minute")
	hours = minutes // 60
	if hours < 24:
		return _plural(hours, "hour")
	days = hours // 24
	if days < 7:
		return _plural(days, "day")
	weeks = days // 7
	if weeks < 5:
		return _plural(weeks, "week")
	return _plural(days // 30, "month") if days < 365 else _plural(days // 365, "year")
