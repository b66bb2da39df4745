"""Tests for activity status derivation."""

from datetime import datetime

import pytest

from lampportal.const import STATUS_COMPLETED, STATUS_LATE, STATUS_MISSING, STATUS_NOT_STARTED
from lampportal.models import Activity, Submission
from lampportal.status import collapse_status, derive_status, is_late

from helpers import manila

DEADLINE = manila(2025, 11, 14, 23, 59)


def _activity(deadline=DEADLINE) -> Activity:
	return Activity(activity_key="881", class_key="40922", title="Lab 3", deadline=deadline)


def test_past_deadline_without_submission_is_missing():
	assert derive_status(_activity(), None, manila(2025, 11, 15, 8, 0)) == STATUS_MISSING


def test_before_deadline_without_submission_is_not_started():
	assert derive_status(_activity(), None, manila(2025, 11, 14, 12, 0)) == STATUS_NOT_STARTED


def test_exactly_at_deadline_is_not_yet_missing():
	assert derive_status(_activity(), None, DEADLINE) == STATUS_NOT_STARTED


def test_on_time_submission_is_completed():
	submission = Submission("881", manila(2025, 11, 14, 20, 0))
	assert derive_status(_activity(), submission, manila(2025, 11, 15, 8, 0)) == STATUS_COMPLETED
	assert is_late(_activity(), submission) is False


def test_submission_after_deadline_is_late():
	submission = Submission("881", manila(2025, 11, 15, 0, 10))
	assert derive_status(_activity(), submission, manila(2025, 11, 15, 8, 0)) == STATUS_LATE
	assert is_late(_activity(), submission) is True


def test_submission_at_deadline_is_on_time():
	submission = Submission("881", DEADLINE)
	assert derive_status(_activity(), submission, manila(2025, 11, 16)) == STATUS_COMPLETED


@pytest.mark.parametrize("now", [manila(2000, 1, 1), manila(2025, 11, 15), manila(2099, 12, 31)])
def test_no_deadline_is_never_missing(now):
	assert derive_status(_activity(deadline=None), None, now) == STATUS_NOT_STARTED


def test_untimed_submission_counts_as_on_time():
	submission = Submission("881", None)
	assert derive_status(_activity(), submission, manila(2025, 12, 1)) == STATUS_COMPLETED


def test_submission_without_deadline_is_completed():
	submission = Submission("881", manila(2025, 11, 20))
	assert derive_status(_activity(deadline=None), submission, manila(2025, 12, 1)) == STATUS_COMPLETED


def test_lateness_compares_instants_across_zones():
	# 16:30 UTC is 00:30 the next day in Manila, past the 23:59 deadline
	submission = Submission("881", datetime.fromisoformat("2025-11-14T16:30:00+00:00"))
	assert is_late(_activity(), submission) is True


def test_collapse_status():
	assert collapse_status(STATUS_LATE) == (STATUS_COMPLETED, True)
	assert collapse_status(STATUS_COMPLETED) == (STATUS_COMPLETED, False)
	assert collapse_status(STATUS_MISSING) == (STATUS_MISSING, False)
