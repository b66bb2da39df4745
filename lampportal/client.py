"""Main client for the LAMP student API."""

import asyncio
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

import aiohttp

from .auth import LampAuth
from .config import LampConfig
from .const import MSG_SESSION_EXPIRED, NO_RECORDS_MARKER, REM_FAILED, REM_SUCCESS
from .exceptions import (
	LampAPIError,
	LampAuthError,
	LampConnectionError,
	LampDataError,
	LampSystemError,
	is_system_error,
)
from .models import ApiResponse, ClassInfo, Notification, TermSettings, User
from .records import parse_classes, parse_notifications, parse_settings, parse_user

_LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS = {
	"Accept": "application/json",
	"Content-Type": "application/json",
}

# Request body keys sent next to "payload" when provided
REQUEST_OPTIONS = ("panel", "device", "log", "options", "classcode", "filepath")


def format_class_codes(class_codes: Iterable[str]) -> str:
	"""Format class codes the way batched endpoints expect: ``(40922, 40923)``."""
	return f"({', '.join(str(code) for code in class_codes)})"


def is_no_records(status: int, rem: str, msg: str) -> bool:
	"""Return True for the backend's "no records" reply, which is an empty success."""
	if NO_RECORDS_MARKER not in (msg or "").lower():
		return False
	return status == 404 or rem == REM_FAILED


class LampClient:
	"""Client for the routed ``lamp.php?request=<endpoint>`` API."""

	def __init__(
		self,
		session: Optional[aiohttp.ClientSession] = None,
		config: Optional[LampConfig] = None,
		auth: Optional[LampAuth] = None,
	):
		"""Initialise LAMP client.

		Args:
			session: Optional aiohttp session. If None, one is created on enter.
			config: Client configuration, defaults to LampConfig()
			auth: Session holder shared with the coordinator and notification store
		"""
		self.config = config or LampConfig()
		self.auth = auth or LampAuth(self.config.token_expiry_buffer)
		self._session = session
		self._own_session = session is None
		self._timeout = aiohttp.ClientTimeout(total=self.config.timeout)

	async def __aenter__(self):
		"""Async context manager entry."""
		if self._own_session and self._session is None:
			self._session = aiohttp.ClientSession()
		return self

	async def __aexit__(self, exc_type, exc_val, exc_tb):
		"""Async context manager exit."""
		await self.close()

	async def close(self) -> None:
		if self._own_session and self._session:
			await self._session.close()
			self._session = None

	async def request(
		self,
		endpoint: str,
		payload: Optional[Dict[str, Any]] = None,
		authenticated: bool = True,
		**options: Any,
	) -> ApiResponse:
		"""POST one request and unwrap the response envelope.

		Args:
			endpoint: Route name, sent as ``?request=<endpoint>``
			payload: Endpoint parameters
			authenticated: Attach the bearer token and check its expiry first
			**options: Extra top-level body keys (panel, device, options, classcode, ...)

		Returns:
			Successful ApiResponse; "no records" replies come back with ``data`` None

		Raises:
			LampAuthError: Token expired locally or rejected by the backend
			LampSystemError: Backend reported a database failure
			LampAPIError: Any other unsuccessful reply
			LampConnectionError: Network failure or timeout
			LampDataError: Reply was not a valid envelope
		"""
		if self._session is None:
			raise LampAPIError("Client not properly initialised")

		headers = dict(DEFAULT_HEADERS)
		if authenticated and self.auth.token:
			if self.auth.is_token_expired():
				_LOGGER.warning(f"Token expired before {endpoint} request, clearing session")
				self.auth.clear()
				raise LampAuthError(MSG_SESSION_EXPIRED)
			headers["Authorization"] = f"Bearer {self.auth.token}"

		body: Dict[str, Any] = {"payload": payload or {}}
		for key in REQUEST_OPTIONS:
			if options.get(key) is not None:
				body[key] = options[key]

		_LOGGER.debug(f"POST {endpoint} payload keys: {sorted(body['payload'])}")

		try:
			async with self._session.post(
				self.config.base_url,
				params={"request": endpoint},
				json=body,
				headers=headers,
				timeout=self._timeout,
			) as resp:
				status = resp.status
				text = await resp.text()
		except asyncio.TimeoutError as err:
			raise LampConnectionError(f"Request timeout calling {endpoint}") from err
		except aiohttp.ClientError as err:
			raise LampConnectionError(f"Connection error: {err}") from err

		return self._handle_response(endpoint, status, text)

	def _handle_response(self, endpoint: str, status: int, text: str) -> ApiResponse:
		try:
			data = json.loads(text) if text else None
		except json.JSONDecodeError:
			data = None
			if status == 200:
				_LOGGER.error(f"Failed to parse {endpoint} response as JSON: {text[:200]}...")
				raise LampDataError(f"Invalid JSON response from {endpoint}")

		envelope = data.get("status") if isinstance(data, dict) else None
		if not isinstance(envelope, dict):
			envelope = {}
		rem = str(envelope.get("rem") or "").lower()
		msg = str(envelope.get("msg") or "")
		sys_text = str(envelope.get("sys") or "")

		if is_no_records(status, rem, msg):
			_LOGGER.debug(f"{endpoint} returned no records")
			return ApiResponse(rem=REM_SUCCESS, msg=msg, sys=sys_text, data=None, stamp=data.get("stamp"))

		if status in (401, 403):
			_LOGGER.warning(f"Authentication error for {endpoint} (HTTP {status})")
			raise LampAuthError(msg or f"Unauthorized: HTTP {status}")

		if status != 200:
			if is_system_error(sys_text):
				raise LampSystemError(f"{endpoint} failed: HTTP {status}", msg=msg, sys=sys_text, status=status)
			raise LampAPIError(f"{endpoint} failed: HTTP {status}", msg=msg, sys=sys_text, status=status)

		if not isinstance(data, dict) or not rem:
			raise LampDataError(f"Unexpected response envelope from {endpoint}")

		if rem != REM_SUCCESS:
			if is_system_error(sys_text):
				_LOGGER.error(f"Backend system error on {endpoint}: {sys_text}")
				raise LampSystemError(f"{endpoint} failed", msg=msg, sys=sys_text, status=status)
			raise LampAPIError(msg or f"{endpoint} failed", msg=msg, sys=sys_text, status=status)

		return ApiResponse(rem=rem, msg=msg, sys=sys_text, data=data.get("data"), stamp=data.get("stamp"))

	async def login(
		self,
		username: str,
		password: str,
		panel: Optional[str] = None,
		device: Optional[str] = None,
	) -> User:
		"""Login and adopt the returned token.

		Args:
			username: Student number or email
			password: Password

		Returns:
			The logged-in User
		"""
		try:
			response = await self.request(
				"userlogin",
				{"username": username, "password": password},
				authenticated=False,
				panel=panel,
				device=device,
			)
		except LampSystemError:
			raise
		except LampAPIError as err:
			raise LampAuthError(err.msg or "Login failed") from err

		user = parse_user(response.data)
		self.auth.set_session(user)
		return user

	def logout(self) -> None:
		self.auth.clear()

	async def get_settings(self) -> Optional[TermSettings]:
		"""Active academic year and semester, or None when the backend has none."""
		response = await self.request("getsettings")
		settings = parse_settings(response.data)
		if settings is None:
			_LOGGER.warning("Settings response did not contain an academic year and semester")
		return settings

	async def get_student_classes(self, student_id: str, academic_year: str, semester: str) -> List[ClassInfo]:
		response = await self.request("getstudentclasses", {
			"p_id": student_id,
			"p_ay": academic_year,
			"p_sem": str(semester),
		})
		return parse_classes(response.records)

	async def get_class_activities(self, class_code: str) -> List[Dict[str, Any]]:
		"""Raw activity rows for one class, each tagged with its class code."""
		response = await self.request("getclassactivities", {"p_classcode": class_code})
		records = []
		for record in response.records:
			if isinstance(record, dict):
				records.append({**record, "classcode_fld": record.get("classcode_fld") or class_code})
		return records

	async def get_all_submissions(self, student_id: str, class_codes: Iterable[str]) -> List[Dict[str, Any]]:
		"""Raw submission rows for the student across all ``class_codes`` in one call."""
		response = await self.request("getallsubmissions", {
			"p_id": student_id,
			"p_classcodes": format_class_codes(class_codes),
		})
		return [record for record in response.records if isinstance(record, dict)]

	async def get_notifications(self, student_no: str, limit: int = 50, offset: int = 0) -> List[Notification]:
		response = await self.request("getnotifications", {
			"p_studno": student_no,
			"p_limit": limit,
			"p_offset": offset,
		})
		return parse_notifications(response.records, self.config.tzinfo)

	async def mark_notification_read(self, student_no: str, notification_id: int) -> None:
		await self.request("marknotificationread", {
			"p_studno": student_no,
			"p_notification_id": notification_id,
		})

	async def mark_all_notifications_read(self, student_no: str) -> None:
		await self.request("markallread", {"p_studno": student_no})

	async def get_unread_notification_count(self, student_no: str) -> int:
		response = await self.request("getunreadcount", {"p_studno": student_no})
		if not isinstance(response.data, dict):
			return 0
		try:
			return int(response.data.get("count") or 0)
		except (TypeError, ValueError):
			return 0

	async def delete_notification(self, student_no: str, notification_id: int) -> None:
		await self.request("deletenotification", {
			"p_studno": student_no,
			"p_notification_id": notification_id,
		})

	async def delete_all_notifications(self, student_no: str) -> None:
		await self.request("deleteallnotifications", {"p_studno": student_no})
