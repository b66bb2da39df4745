"""Transform raw LAMP records into model objects."""

import logging
from datetime import tzinfo
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .const import NOTIFICATION_TYPES
from .correlator import activity_key, submission_key
from .exceptions import LampDataError
from .models import Activity, ClassInfo, Notification, Submission, TermSettings, User
from .utils import parse_datetime, parse_flag, parse_number

_LOGGER = logging.getLogger(__name__)


def _text(value: Any) -> str:
	if value is None:
		return ""
	return str(value)


def _optional_int(value: Any) -> Optional[int]:
	if value is None or value == "":
		return None
	try:
		return int(value)
	except (TypeError, ValueError):
		return None


def parse_class(record: Mapping[str, Any]) -> Optional[ClassInfo]:
	"""Parse a ``getstudentclasses`` row; rows without a class code are skipped."""
	class_key = _text(record.get("classcode_fld"))
	if not class_key:
		return None
	return ClassInfo(
		class_key=class_key,
		subject_code=_text(record.get("subjcode_fld")),
		subject_description=_text(record.get("subjdesc_fld")),
		faculty=_text(record.get("faculty_fld")).strip(),
		days=_text(record.get("day_fld")),
		start_time=_text(record.get("starttime_fld")),
		end_time=_text(record.get("endtime_fld")),
		room=_text(record.get("room_fld")),
	)


def parse_classes(records: Iterable[Mapping[str, Any]]) -> List[ClassInfo]:
	classes = []
	for record in records:
		info = parse_class(record) if isinstance(record, Mapping) else None
		if info is None:
			_LOGGER.debug(f"Skipping class record without class code: {record!r}")
			continue
		classes.append(info)
	return classes


def parse_activity(record: Mapping[str, Any], tz: Optional[tzinfo] = None, class_key: Optional[str] = None) -> Activity:
	"""Parse an activity row.

	Args:
		record: Raw ``getclassactivities`` row
		tz: Zone the backend's naive timestamps are written in
		class_key: Owning class when the row does not carry ``classcode_fld``

	Returns:
		Activity with its canonical key resolved
	"""
	graded = parse_flag(record.get("isscored_fld"))
	return Activity(
		activity_key=activity_key(record),
		class_key=_text(record.get("classcode_fld")) or _text(class_key),
		title=_text(record.get("title_fld")),
		description=_text(record.get("desc_fld")),
		deadline=parse_datetime(record.get("deadline_fld"), tz),
		posted_at=parse_datetime(record.get("datetime_fld"), tz),
		total_points=max(parse_number(record.get("totalscore_fld"), 0.0) or 0.0, 0.0),
		scored_points=parse_number(record.get("score_fld"), 0.0) if graded else None,
	)


def parse_submission(record: Mapping[str, Any], tz: Optional[tzinfo] = None) -> Submission:
	"""Parse a submission row; the key may be None when no identifier is usable."""
	return Submission(
		activity_key=submission_key(record),
		submitted_at=parse_datetime(record.get("datetime_fld"), tz),
		class_key=_text(record.get("classcode_fld")) or None,
		record_id=_text(record.get("recno_fld")) or None,
	)


def parse_notification(record: Mapping[str, Any], tz: Optional[tzinfo] = None) -> Optional[Notification]:
	"""Parse a ``getnotifications`` row; rows without an integer id are skipped."""
	notification_id = _optional_int(record.get("id"))
	if notification_id is None:
		_LOGGER.debug(f"Skipping notification without id: {record!r}")
		return None

	notification_type = _text(record.get("type"))
	if notification_type not in NOTIFICATION_TYPES:
		_LOGGER.debug(f"Notification {notification_id} has unexpected type {notification_type!r}")

	return Notification(
		id=notification_id,
		type=notification_type,
		class_key=_text(record.get("classcode_fld")),
		title=_text(record.get("title")),
		message=_text(record.get("message")),
		post_id=_optional_int(record.get("post_id")),
		activity_id=_optional_int(record.get("activity_id")),
		resource_id=_optional_int(record.get("resource_id")),
		subject_code=record.get("subjcode_fld"),
		subject_description=record.get("subjdesc_fld"),
		is_read=parse_flag(record.get("is_read")),
		created_at=parse_datetime(record.get("created_at"), tz),
	)


def parse_notifications(records: Iterable[Mapping[str, Any]], tz: Optional[tzinfo] = None) -> List[Notification]:
	notifications = []
	for record in records:
		if not isinstance(record, Mapping):
			continue
		notification = parse_notification(record, tz)
		if notification is not None:
			notifications.append(notification)
	return notifications


def parse_settings(data: Any) -> Optional[TermSettings]:
	"""Parse ``getsettings`` data; None when year or semester is missing."""
	if not isinstance(data, Mapping):
		return None
	setting = data.get("setting")
	if isinstance(setting, list):
		setting = setting[0] if setting else None
	if not isinstance(setting, Mapping):
		return None

	academic_year = _text(setting.get("acadyear_fld"))
	semester = _text(setting.get("sem_fld"))
	if not academic_year or not semester:
		return None
	return TermSettings(academic_year=academic_year, semester=semester)


def parse_user(data: Any) -> User:
	"""Parse the ``userlogin`` payload."""
	if not isinstance(data, Mapping) or not data.get("id"):
		raise LampDataError("Login response did not contain a user")
	key: Dict[str, Any] = data.get("key") or {}
	return User(
		id=_text(data.get("id")),
		fullname=_text(data.get("fullname")),
		token=key.get("token"),
		expires=_optional_int(key.get("expires")),
		role=data.get("role"),
		email=data.get("emailadd"),
		department=data.get("dept"),
		program=data.get("program"),
	)
