"""Shared fixtures for the lampportal tests."""

from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest

from helpers import STUDENT_ID
from lampportal.auth import LampAuth
from lampportal.config import LampConfig
from lampportal.models import ClassInfo, User


@pytest.fixture
def config() -> LampConfig:
	return LampConfig()


@pytest.fixture
def student() -> User:
	return User(id=STUDENT_ID, fullname="Dela Cruz, Juan", token="token-abc", expires=4102444800)


@pytest.fixture
def auth(student: User) -> LampAuth:
	holder = LampAuth()
	holder.set_session(student)
	return holder


@pytest.fixture
def fake_client(auth: LampAuth, config: LampConfig) -> MagicMock:
	"""A LampClient double whose endpoint methods are AsyncMocks."""
	client = MagicMock()
	client.auth = auth
	client.config = config
	client.get_settings = AsyncMock()
	client.get_student_classes = AsyncMock(return_value=[])
	client.get_class_activities = AsyncMock(return_value=[])
	client.get_all_submissions = AsyncMock(return_value=[])
	client.get_notifications = AsyncMock(return_value=[])
	client.mark_notification_read = AsyncMock(return_value=None)
	client.mark_all_notifications_read = AsyncMock(return_value=None)
	client.delete_notification = AsyncMock(return_value=None)
	client.delete_all_notifications = AsyncMock(return_value=None)
	return client


@pytest.fixture
def classes() -> List[ClassInfo]:
	return [
		ClassInfo(
			class_key="40922",
			subject_code="IT 101",
			subject_description="Introduction to Computing",
			faculty="Santos, Maria",
			days="Mon,Thu",
			start_time="5:00 PM",
			end_time="7:00 PM",
			room="CL-3",
		),
		ClassInfo(
			class_key="40923",
			subject_code="MATH 11",
			subject_description="Discrete Mathematics",
			faculty="Reyes, Jose",
			days="Tue",
			start_time="8:00 AM",
			end_time="10:00 AM",
			room="R-204",
		),
	]
