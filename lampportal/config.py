"""Configuration for the LAMP portal client."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import voluptuous as vol
from dotenv import load_dotenv

from .const import (
	CONF_BASE_URL,
	CONF_NOTIFICATION_PAGE_SIZE,
	CONF_TIMEOUT,
	CONF_TIMEZONE,
	CONF_TOKEN_EXPIRY_BUFFER,
	DEFAULT_BASE_URL,
	DEFAULT_NOTIFICATION_PAGE_SIZE,
	DEFAULT_TIMEOUT,
	DEFAULT_TIMEZONE,
	ENV_BASE_URL,
	ENV_NOTIFICATION_PAGE_SIZE,
	ENV_TIMEOUT,
	ENV_TIMEZONE,
	TOKEN_EXPIRY_BUFFER_SECONDS,
)

_LOGGER = logging.getLogger(__name__)


def _timezone_name(value: Any) -> str:
	"""Validate that a value names a known IANA time zone."""
	name = vol.Coerce(str)(value)
	try:
		ZoneInfo(name)
	except (ZoneInfoNotFoundError, ValueError) as err:
		raise vol.Invalid(f"Unknown time zone: {name}") from err
	return name


def _base_url(value: Any) -> str:
	url = vol.Coerce(str)(value).strip()
	if not url.startswith(("http://", "https://")):
		raise vol.Invalid(f"Base URL must be http(s): {url!r}")
	return url


CONFIG_SCHEMA = vol.Schema({
	vol.Optional(CONF_BASE_URL, default=DEFAULT_BASE_URL): _base_url,
	vol.Optional(CONF_TIMEOUT, default=DEFAULT_TIMEOUT): vol.All(vol.Coerce(float), vol.Range(min=1)),
	vol.Optional(CONF_TIMEZONE, default=DEFAULT_TIMEZONE): _timezone_name,
	vol.Optional(CONF_NOTIFICATION_PAGE_SIZE, default=DEFAULT_NOTIFICATION_PAGE_SIZE): vol.All(
		vol.Coerce(int), vol.Range(min=1, max=500)
	),
	vol.Optional(CONF_TOKEN_EXPIRY_BUFFER, default=TOKEN_EXPIRY_BUFFER_SECONDS): vol.All(
		vol.Coerce(int), vol.Range(min=0)
	),
})

_ENV_KEYS = {
	ENV_BASE_URL: CONF_BASE_URL,
	ENV_TIMEOUT: CONF_TIMEOUT,
	ENV_TIMEZONE: CONF_TIMEZONE,
	ENV_NOTIFICATION_PAGE_SIZE: CONF_NOTIFICATION_PAGE_SIZE,
}


@dataclass(frozen=True)
class LampConfig:
	"""Validated client configuration."""
	base_url: str = DEFAULT_BASE_URL
	timeout: float = DEFAULT_TIMEOUT
	timezone: str = DEFAULT_TIMEZONE
	notification_page_size: int = DEFAULT_NOTIFICATION_PAGE_SIZE
	token_expiry_buffer: int = TOKEN_EXPIRY_BUFFER_SECONDS

	@property
	def tzinfo(self) -> ZoneInfo:
		"""Time zone the backend writes its naive timestamps in."""
		return ZoneInfo(self.timezone)

	@classmethod
	def from_dict(cls, data: Mapping[str, Any]) -> "LampConfig":
		"""Build a config from a mapping, validating it with CONFIG_SCHEMA."""
		validated = CONFIG_SCHEMA(dict(data))
		return cls(**validated)

	@classmethod
	def from_env(
		cls,
		env_file: Optional[Union[str, Path]] = None,
		environ: Optional[Mapping[str, str]] = None,
	) -> "LampConfig":
		"""Load configuration from the environment (and a .env file if present).

		Args:
			env_file: Optional path to a .env file. Defaults to python-dotenv's lookup.
			environ: Mapping to read instead of os.environ (mainly for tests).

		Returns:
			Validated LampConfig
		"""
		if environ is None:
			load_dotenv(env_file)
			environ = os.environ

		data: Dict[str, Any] = {}
		for env_key, conf_key in _ENV_KEYS.items():
			value = environ.get(env_key)
			if value not in (None, ""):
				data[conf_key] = value

		config = cls.from_dict(data)
		_LOGGER.debug(f"Loaded LAMP config: base_url={config.base_url}, timezone={config.timezone}")
		return config
