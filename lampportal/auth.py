"""Session state for the authenticated student."""

import logging
import time
from typing import Optional

from .const import MSG_LOGIN_REQUIRED, TOKEN_EXPIRY_BUFFER_SECONDS
from .exceptions import LampSessionError
from .models import User

_LOGGER = logging.getLogger(__name__)


class LampAuth:
	"""Holds the logged-in user together with their bearer token."""

	def __init__(self, expiry_buffer: int = TOKEN_EXPIRY_BUFFER_SECONDS) -> None:
		"""Initialise the session holder.

		Args:
			expiry_buffer: Seconds before the real expiry at which the token is
				already treated as expired
		"""
		self.expiry_buffer = expiry_buffer
		self._user: Optional[User] = None
		self._token: Optional[str] = None
		self._expires: Optional[int] = None

	@property
	def token(self) -> Optional[str]:
		return self._token

	@property
	def expires(self) -> Optional[int]:
		return self._expires

	@property
	def current_user(self) -> Optional[User]:
		return self._user

	@property
	def authenticated(self) -> bool:
		return self._user is not None and self._token is not None and not self.is_token_expired()

	def set_session(self, user: User) -> None:
		"""Adopt a freshly logged-in user and their token."""
		self._user = user
		self._token = user.token
		self._expires = user.expires
		_LOGGER.info(f"Session started for student {user.id}")

	def is_token_expired(self, now: Optional[float] = None) -> bool:
		"""Return True when the token is within ``expiry_buffer`` seconds of expiring.

		A token whose expiry is unknown is treated as expired.
		"""
		if self._expires is None:
			return True
		if now is None:
			now = time.time()
		return now >= self._expires - self.expiry_buffer

	def require_user(self) -> User:
		"""Return the current user or raise LampSessionError."""
		if self._user is None:
			raise LampSessionError(MSG_LOGIN_REQUIRED)
		return self._user

	def clear(self) -> None:
		"""Forget the user and token (logout or server-side expiry)."""
		if self._user is not None:
			_LOGGER.debug(f"Clearing session for student {self._user.id}")
		self._user = None
		self._token = None
		self._expires = None
