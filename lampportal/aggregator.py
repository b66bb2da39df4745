"""Join classes, activities and submissions into display-ready items."""

import logging
from datetime import datetime, tzinfo
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .const import COURSE_COLORS
from .models import ActivityItem, AggregatedActivities, ClassInfo
from .records import parse_activity
from .status import derive_status, is_late
from .submissions import build_index_from_records
from .utils import utcnow

_LOGGER = logging.getLogger(__name__)


def color_for_key(class_key: str, palette: Sequence[str] = COURSE_COLORS) -> str:
	"""Deterministic palette colour for a class key (sum of character codes)."""
	return palette[sum(ord(char) for char in class_key) % len(palette)]


def course_colors(classes: Sequence[ClassInfo], palette: Sequence[str] = COURSE_COLORS) -> Dict[str, str]:
	"""Assign palette colours by class position; the same roster yields the same colours."""
	colors: Dict[str, str] = {}
	for index, info in enumerate(classes):
		colors.setdefault(info.class_key, palette[index % len(palette)])
	return colors


def aggregate(
	classes: Sequence[ClassInfo],
	raw_activities: Iterable[Mapping[str, Any]],
	raw_submissions: Iterable[Mapping[str, Any]],
	now: Optional[datetime] = None,
	tz: Optional[tzinfo] = None,
) -> AggregatedActivities:
	"""Reconcile one student's activities across all of their classes.

	Args:
		classes: The student's class roster, in display order
		raw_activities: Activity rows from every class (each carrying ``classcode_fld``)
		raw_submissions: The student's submission rows for all those classes
		now: Instant of evaluation, defaults to the current time
		tz: Zone of the backend's naive timestamps

	Returns:
		AggregatedActivities with one item per distinct activity
	"""
	if now is None:
		now = utcnow()

	index = build_index_from_records(raw_submissions, tz)
	colors = course_colors(classes)
	classes_by_key = {info.class_key: info for info in classes}

	items: List[ActivityItem] = []
	seen: Set[Tuple[str, str]] = set()
	total_points = 0.0
	earned_points = 0.0

	for record in raw_activities:
		if not isinstance(record, Mapping):
			continue
		activity = parse_activity(record, tz)

		if activity.activity_key is not None:
			dedupe_key = (activity.class_key, activity.activity_key)
			if dedupe_key in seen:
				_LOGGER.debug(f"Skipping duplicate activity {activity.activity_key} in class {activity.class_key}")
				continue
			seen.add(dedupe_key)

		submission = index.get(activity.activity_key) if activity.activity_key else None
		status = derive_status(activity, submission, now)

		info = classes_by_key.get(activity.class_key)
		items.append(ActivityItem(
			activity=activity,
			status=status,
			submission=submission,
			is_late=is_late(activity, submission, now),
			course_name=info.display_name if info else activity.class_key,
			course_code=(info.subject_code or info.class_key) if info else activity.class_key,
			color=colors.get(activity.class_key) or color_for_key(activity.class_key),
		))

		total_points += activity.total_points
		if activity.is_graded:
			earned_points += activity.scored_points

	matched = sum(1 for item in items if item.submission is not None)
	_LOGGER.debug(
		f"Aggregated {len(items)} activities across {len(classes)} classes "
		f"({matched} with submissions, {len(index)} indexed submissions)"
	)

	return AggregatedActivities(
		activities=items,
		total_points=total_points,
		earned_points=earned_points,
	)
