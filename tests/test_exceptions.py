"""Tests for the user-facing error messages."""

import asyncio

import pytest

from lampportal.const import (
	MSG_CONNECTION,
	MSG_LOGIN_REQUIRED,
	MSG_SERVICE_UNAVAILABLE,
	MSG_TIMEOUT,
	MSG_UNEXPECTED,
)
from lampportal.exceptions import (
	LampAPIError,
	LampAuthError,
	LampConnectionError,
	LampDataError,
	LampSessionError,
	LampSystemError,
	is_system_error,
	user_message,
)


@pytest.mark.parametrize("err, expected", [
	(LampSystemError("failed", sys="SQLSTATE[42S02]"), MSG_SERVICE_UNAVAILABLE),
	(LampAPIError("failed", msg="Invalid", sys="Table 'x' doesn't exist"), MSG_SERVICE_UNAVAILABLE),
	(LampAPIError("failed", msg="Invalid class code"), "Invalid class code"),
	(LampSessionError(), MSG_LOGIN_REQUIRED),
	(LampAuthError("Session expired. Please login again."), "Session expired. Please login again."),
	(LampConnectionError("Connection error: refused"), MSG_CONNECTION),
	(LampConnectionError("Request timeout calling getsettings"), MSG_TIMEOUT),
	(asyncio.TimeoutError(), MSG_TIMEOUT),
	(LampDataError("bad envelope"), MSG_UNEXPECTED),
	(KeyError("boom"), MSG_UNEXPECTED),
])
def test_user_message(err, expected):
	assert user_message(err) == expected


def test_is_system_error():
	assert is_system_error("Table 'lamp.x' doesn't exist")
	assert is_system_error("SQL syntax error")
	assert not is_system_error("No Records")
	assert not is_system_error(None)


def test_session_error_is_an_auth_error():
	assert isinstance(LampSessionError(), LampAuthError)
	assert str(LampSessionError()) == MSG_LOGIN_REQUIRED
