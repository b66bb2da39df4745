"""Tests for raw record parsing and timestamp handling."""

from datetime import datetime, time, timezone

import pytest

from lampportal.auth import LampAuth
from lampportal.exceptions import LampDataError, LampSessionError
from lampportal.models import User
from lampportal.records import (
	parse_activity,
	parse_classes,
	parse_notifications,
	parse_settings,
	parse_user,
)
from lampportal.utils import parse_clock, parse_datetime, parse_flag

from helpers import MANILA, manila


def test_parse_activity_graded_and_ungraded():
	graded = parse_activity({"recno_fld": 881, "classcode_fld": "40922", "totalscore_fld": "50",
		"isscored_fld": "1", "score_fld": "42.5", "deadline_fld": "2025-11-14 23:59:00"}, MANILA)
	ungraded = parse_activity({"actcode_fld": "A-2", "totalscore_fld": "-5", "score_fld": "10"}, class_key="40923")

	assert graded.activity_key == "881"
	assert graded.scored_points == 42.5
	assert graded.deadline == manila(2025, 11, 14, 23, 59)
	assert ungraded.class_key == "40923"
	assert ungraded.total_points == 0
	assert ungraded.is_graded is False


def test_parse_classes_skips_rows_without_code():
	classes = parse_classes([{"classcode_fld": 40922, "faculty_fld": "  Santos, Maria "}, {"subjcode_fld": "X"}, None])
	assert [(c.class_key, c.faculty) for c in classes] == [("40922", "Santos, Maria")]


def test_parse_settings_shapes():
	assert parse_settings({"setting": {"acadyear_fld": "2025-2026", "sem_fld": 2}}).semester == "2"
	assert parse_settings({"setting": [{"acadyear_fld": "2025-2026", "sem_fld": "1"}]}).academic_year == "2025-2026"
	assert parse_settings({"setting": []}) is None
	assert parse_settings({"setting": {"acadyear_fld": "2025-2026"}}) is None
	assert parse_settings(None) is None


def test_parse_notifications():
	rows = [
		{"id": "7", "type": "activity", "activity_id": "881", "post_id": None, "is_read": "1", "created_at": "2025-11-15 08:00:00"},
		{"type": "post"},
		{"id": 8, "type": "announcement", "is_read": 0},
	]
	notifications = parse_notifications(rows, MANILA)
	assert [(n.id, n.activity_id, n.is_read) for n in notifications] == [(7, 881, True), (8, None, False)]
	assert notifications[0].created_at == manila(2025, 11, 15, 8, 0)


def test_parse_user():
	user = parse_user({"id": "2021-00123", "fullname": "Juan", "role": "student", "key": {"token": "t", "expires": "1763200000"}})
	assert (user.id, user.token, user.expires) == ("2021-00123", "t", 1763200000)
	with pytest.raises(LampDataError):
		parse_user({"fullname": "nobody"})


@pytest.mark.parametrize("value, expected", [
	("2025-11-14 23:59:00", manila(2025, 11, 14, 23, 59)),
	("2025-11-14T23:59:00", manila(2025, 11, 14, 23, 59)),
	("2025-11-14T15:59:00Z", datetime(2025, 11, 14, 15, 59, tzinfo=timezone.utc)),
	("2025-11-14", manila(2025, 11, 14)),
	("0000-00-00 00:00:00", None),
	("", None),
	("soon", None),
	(None, None),
])
def test_parse_datetime(value, expected):
	assert parse_datetime(value, MANILA) == expected


def test_parse_clock_and_flag():
	assert parse_clock("5:00 PM") == time(17, 0)
	assert parse_clock("17:30") == time(17, 30)
	assert parse_clock("later") is None
	assert parse_flag("1") is True
	assert parse_flag(0) is False
	assert parse_flag("yes") is True
	assert parse_flag(None) is False


class TestAuth:

	def test_require_user_without_session(self):
		with pytest.raises(LampSessionError):
			LampAuth().require_user()

	def test_token_expiry_buffer(self):
		auth = LampAuth(expiry_buffer=300)
		auth.set_session(User(id="s", token="t", expires=10_000))
		assert auth.is_token_expired(now=9_000) is False
		assert auth.is_token_expired(now=9_700) is True
		auth.clear()
		assert auth.current_user is None and auth.token is None

	def test_unknown_expiry_counts_as_expired(self):
		auth = LampAuth()
		auth.set_session(User(id="s", token="t"))
		assert auth.is_token_expired() is True
		assert auth.authenticated is False
