"""Tests for the latest-submission index."""

from itertools import permutations

from lampportal.models import Submission
from lampportal.submissions import build_index, build_index_from_records

from helpers import MANILA, manila


def test_latest_submission_wins():
	older = Submission("881", manila(2025, 11, 10, 10, 0))
	newer = Submission("881", manila(2025, 11, 12, 9, 0))
	index = build_index([older, newer])
	assert index["881"] is newer


def test_selection_does_not_depend_on_order():
	submissions = [
		Submission("881", manila(2025, 11, 10, 10, 0), record_id="a"),
		Submission("881", manila(2025, 11, 12, 9, 0), record_id="b"),
		Submission("881", None, record_id="c"),
		Submission("882", manila(2025, 11, 11, 8, 0), record_id="d"),
	]
	results = {
		tuple(sorted((key, sub.record_id) for key, sub in build_index(order).items()))
		for order in permutations(submissions)
	}
	assert results == {(("881", "b"), ("882", "d"))}


def test_equal_timestamps_keep_first_seen():
	first = Submission("881", manila(2025, 11, 12, 9, 0), record_id="first")
	second = Submission("881", manila(2025, 11, 12, 9, 0), record_id="second")
	assert build_index([first, second])["881"].record_id == "first"


def test_untimed_submission_is_kept_when_alone():
	untimed = Submission("881", None)
	assert build_index([untimed])["881"] is untimed


def test_untimed_submission_never_replaces_timed_one():
	timed = Submission("881", manila(2025, 11, 12, 9, 0))
	index = build_index([timed, Submission("881", None)])
	assert index["881"] is timed


def test_keyless_submissions_are_dropped():
	index = build_index([Submission(None, manila(2025, 11, 12, 9, 0)), Submission("", None)])
	assert index == {}


def test_build_from_raw_records():
	records = [
		{"recno_fld": 1, "actrecno_fld": 881, "datetime_fld": "2025-11-10 10:00:00"},
		{"recno_fld": 2, "actrecno_fld": 881, "datetime_fld": "2025-11-12 09:00:00"},
		{"recno_fld": 3, "actcode_fld": "ACT-9", "datetime_fld": "0000-00-00 00:00:00"},
		"not a record",
	]
	index = build_index_from_records(records, MANILA)
	assert set(index) == {"881", "ACT-9"}
	assert index["881"].record_id == "2"
	assert index["881"].submitted_at == manila(2025, 11, 12, 9, 0)
	assert index["ACT-9"].submitted_at is None
