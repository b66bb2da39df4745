"""Fetch orchestration for the to-do, classes and schedule screens."""

import asyncio
import logging
from datetime import datetime
from itertools import chain
from typing import Any, Dict, List, Optional, Tuple

from .aggregator import aggregate
from .auth import LampAuth
from .client import LampClient
from .config import LampConfig
from .const import (
	MSG_LOGIN_REQUIRED,
	MSG_NO_CLASSES,
	MSG_PARTIAL_CLASSES,
	MSG_SETTINGS_UNAVAILABLE,
	MSG_SUBMISSIONS_UNAVAILABLE,
)
from .exceptions import LampAPIError, LampAuthError, LampError, LampSessionError, user_message
from .models import AggregatedActivities, ClassInfo, TermSettings
from .schedule import build_week_schedule, sort_classes

_LOGGER = logging.getLogger(__name__)


def _reraise_fatal(result: Any) -> None:
	"""Cancellation and dead sessions abort the whole fetch."""
	if isinstance(result, (asyncio.CancelledError, LampAuthError)):
		raise result


class PortalCoordinator:
	"""Coordinates backend fetches and hands the results to the pure aggregation layer.

	Every public method can be repeated safely; a retry simply runs the same
	fetches again.
	"""

	def __init__(
		self,
		client: LampClient,
		auth: Optional[LampAuth] = None,
		config: Optional[LampConfig] = None,
	) -> None:
		self.client = client
		self.auth = auth or client.auth
		self.config = config or client.config

	async def get_term_settings(self) -> TermSettings:
		settings = await self.client.get_settings()
		if settings is None:
			raise LampAPIError(MSG_SETTINGS_UNAVAILABLE, msg=MSG_SETTINGS_UNAVAILABLE)
		return settings

	async def get_classes(self, settings: Optional[TermSettings] = None) -> List[ClassInfo]:
		"""The current student's classes for the active term, Monday-first."""
		user = self.auth.require_user()
		if settings is None:
			settings = await self.get_term_settings()
		classes = await self.client.get_student_classes(user.id, settings.academic_year, settings.semester)
		_LOGGER.info(f"Loaded {len(classes)} classes for {settings}")
		return sort_classes(classes)

	async def get_week_schedule(self) -> List[Tuple[str, List[ClassInfo]]]:
		return build_week_schedule(await self.get_classes())

	async def get_aggregated_activities(
		self,
		user_id: str,
		academic_year: str,
		semester: str,
		now: Optional[datetime] = None,
	) -> AggregatedActivities:
		"""Fetch and reconcile every activity of the student's classes.

		Per-class activity fetches and the single batched submission fetch run
		concurrently; nothing is aggregated until all of them have finished.

		Args:
			user_id: Student number
			academic_year: Active academic year, e.g. ``2025-2026``
			semester: Active semester
			now: Instant used for status derivation, defaults to the current time

		Returns:
			AggregatedActivities; ``error`` is set when some or all data was unavailable
		"""
		classes = await self.client.get_student_classes(user_id, academic_year, str(semester))
		if not classes:
			_LOGGER.info(f"No classes for student {user_id} in {academic_year} semester {semester}")
			return AggregatedActivities(error=MSG_NO_CLASSES)

		class_codes = [info.class_key for info in classes]
		results = await asyncio.gather(
			self.client.get_all_submissions(user_id, class_codes),
			*(self.client.get_class_activities(code) for code in class_codes),
			return_exceptions=True,
		)
		for result in results:
			_reraise_fatal(result)

		submissions = results[0]
		if isinstance(submissions, BaseException):
			_LOGGER.error(f"Failed to get submissions for student {user_id}: {submissions}")
			return AggregatedActivities(error=MSG_SUBMISSIONS_UNAVAILABLE)

		activity_batches: List[List[Dict[str, Any]]] = []
		unavailable: List[ClassInfo] = []
		for info, result in zip(classes, results[1:]):
			if isinstance(result, BaseException):
				_LOGGER.warning(f"Failed to get activities for class {info.class_key}: {result}")
				unavailable.append(info)
				continue
			_LOGGER.debug(f"Retrieved {len(result)} activities for class {info.class_key}")
			activity_batches.append(result)

		aggregated = aggregate(
			classes,
			chain.from_iterable(activity_batches),
			submissions,
			now=now,
			tz=self.config.tzinfo,
		)

		_LOGGER.info(
			f"Activity retrieval for student {user_id}: "
			f"{len(classes) - len(unavailable)}/{len(classes)} classes successful, "
			f"{len(aggregated.activities)} activities"
		)

		if unavailable:
			aggregated.unavailable_classes = [info.class_key for info in unavailable]
			aggregated.error = MSG_PARTIAL_CLASSES.format(
				classes=", ".join(info.subject_code or info.class_key for info in unavailable)
			)
		return aggregated

	async def get_todo_list(self, now: Optional[datetime] = None) -> AggregatedActivities:
		"""Everything the to-do screen shows, with failures folded into ``error``."""
		user = self.auth.current_user
		if user is None:
			return AggregatedActivities(error=MSG_LOGIN_REQUIRED)

		try:
			settings = await self.get_term_settings()
			return await self.get_aggregated_activities(
				user.id, settings.academic_year, settings.semester, now=now
			)
		except LampSessionError:
			return AggregatedActivities(error=MSG_LOGIN_REQUIRED)
		except LampError as err:
			_LOGGER.error(f"Failed to load to-do list for student {user.id}: {err}")
			return AggregatedActivities(error=user_message(err))
