"""Status derivation for activities."""

from datetime import datetime
from typing import Optional, Tuple

from .const import STATUS_COMPLETED, STATUS_LATE, STATUS_MISSING, STATUS_NOT_STARTED
from .models import Activity, Submission
from .utils import ensure_aware


def is_late(activity: Activity, submission: Optional[Submission], now: Optional[datetime] = None) -> bool:
	"""Return True when a matched submission arrived after the deadline.

	A missing deadline or submission timestamp cannot prove lateness, so the
	submission counts as on time. ``now`` is accepted for signature symmetry
	with derive_status; lateness depends only on the two recorded instants.
	"""
	if submission is None:
		return False
	if activity.deadline is None or submission.submitted_at is None:
		return False
	return ensure_aware(submission.submitted_at) > ensure_aware(activity.deadline)


def derive_status(activity: Activity, submission: Optional[Submission], now: datetime) -> str:
	"""Derive one of not_started / missing / completed / late.

	Args:
		activity: The activity definition
		submission: Matched authoritative submission, or None
		now: Instant of evaluation; pass the current time, not a cached value

	Returns:
		Status string constant
	"""
	if submission is not None:
		return STATUS_LATE if is_late(activity, submission, now) else STATUS_COMPLETED

	if activity.deadline is not None and ensure_aware(now) > ensure_aware(activity.deadline):
		return STATUS_MISSING

	return STATUS_NOT_STARTED


def collapse_status(status: str) -> Tuple[str, bool]:
	"""Fold ``late`` into ``completed`` plus an is-late flag."""
	if status == STATUS_LATE:
		return STATUS_COMPLETED, True
	return status, False
