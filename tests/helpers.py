"""Fakes and builders shared by the lampportal tests."""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from lampportal.models import Activity, ActivityItem, Notification, Submission

MANILA = ZoneInfo("Asia/Manila")
STUDENT_ID = "2021-00123"


def manila(*args: int) -> datetime:
	return datetime(*args, tzinfo=MANILA)


class MockResponse:
	"""Stands in for the aiohttp response context manager."""

	def __init__(self, status: int = 200, body: Any = None, text: Optional[str] = None, error: Optional[BaseException] = None):
		self.status = status
		self._text = text if text is not None else json.dumps(body)
		self._error = error

	async def __aenter__(self):
		if self._error is not None:
			raise self._error
		return self

	async def __aexit__(self, exc_type, exc_val, exc_tb):
		return False

	async def text(self) -> str:
		return self._text


class MockSession:
	"""Records POSTs and answers them from a queue of MockResponses."""

	def __init__(self, *responses: MockResponse):
		self.responses = list(responses)
		self.calls: List[Dict[str, Any]] = []

	def post(self, url, **kwargs):
		self.calls.append({"url": url, **kwargs})
		return self.responses.pop(0)

	async def close(self):
		pass


def envelope(data: Any = None, rem: str = "success", msg: str = "", sys: str = "") -> Dict[str, Any]:
	return {"status": {"rem": rem, "msg": msg, "sys": sys}, "data": data, "stamp": "2025-11-15 08:00:00"}


def make_notification(notification_id: int, is_read: bool = False, created_at: Optional[datetime] = None, **kwargs) -> Notification:
	return Notification(
		id=notification_id,
		type=kwargs.pop("type", "post"),
		title=kwargs.pop("title", f"Notification {notification_id}"),
		is_read=is_read,
		created_at=created_at,
		**kwargs,
	)


def make_item(status: str, deadline: Optional[datetime] = None, key: str = "1", class_key: str = "40922") -> ActivityItem:
	activity = Activity(activity_key=key, class_key=class_key, title=f"Activity {key}", deadline=deadline)
	submission = Submission(key, deadline) if status in ("completed", "late") else None
	return ActivityItem(activity=activity, status=status, submission=submission, is_late=status == "late")
