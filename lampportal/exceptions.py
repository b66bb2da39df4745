"""Custom exceptions for the LAMP portal client."""

import asyncio
from typing import Optional

from .const import (
	MSG_CONNECTION,
	MSG_LOGIN_REQUIRED,
	MSG_SERVICE_UNAVAILABLE,
	MSG_TIMEOUT,
	MSG_UNEXPECTED,
)


class LampError(Exception):
	"""Base exception for LAMP errors."""
	pass


class LampAuthError(LampError):
	"""Authentication failed or the session token expired."""
	pass


class LampSessionError(LampAuthError):
	"""No current user could be resolved."""
	
	def __init__(self, message: str = MSG_LOGIN_REQUIRED) -> None:
		super().__init__(message)


class LampAPIError(LampError):
	"""API request failed."""
	
	def __init__(self, message: str, msg: str = "", sys: str = "", status: Optional[int] = None) -> None:
		super().__init__(message)
		self.msg = msg
		self.sys = sys
		self.status = status


class LampSystemError(LampAPIError):
	"""Backend reported an internal (database/SQL) failure."""
	pass


class LampConnectionError(LampError):
	"""Connection to the LAMP backend failed."""
	pass


class LampDataError(LampError):
	"""Data parsing or validation error."""
	pass


def is_system_error(sys_text: Optional[str]) -> bool:
	"""Return True when the backend's ``sys`` field describes a database failure."""
	if not sys_text:
		return False
	lowered = sys_text.lower()
	return "table" in lowered or "sql" in lowered


def user_message(err: BaseException) -> str:
	"""Translate an exception into text that is safe to show to a student."""
	if isinstance(err, LampSystemError):
		return MSG_SERVICE_UNAVAILABLE
	if isinstance(err, LampSessionError):
		return MSG_LOGIN_REQUIRED
	if isinstance(err, (asyncio.TimeoutError, TimeoutError)):
		return MSG_TIMEOUT
	if isinstance(err, LampConnectionError):
		if "timeout" in str(err).lower():
			return MSG_TIMEOUT
		return MSG_CONNECTION
	if isinstance(err, LampAPIError):
		if is_system_error(err.sys):
			return MSG_SERVICE_UNAVAILABLE
		return err.msg or str(err) or MSG_UNEXPECTED
	if isinstance(err, LampAuthError):
		return str(err) or MSG_LOGIN_REQUIRED
	return MSG_UNEXPECTED
