"""Client-side notification state with optimistic updates."""

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .auth import LampAuth
from .client import LampClient
from .config import LampConfig
from .events import EventChannel, notification_updates
from .exceptions import LampError
from .models import Notification, NotificationState

_LOGGER = logging.getLogger(__name__)


def sort_notifications(notifications: Iterable[Notification]) -> Tuple[Notification, ...]:
	"""Newest first; notifications without a timestamp go last in their given order."""
	dated = [n for n in notifications if n.created_at is not None]
	undated = [n for n in notifications if n.created_at is None]
	dated.sort(key=lambda n: n.created_at, reverse=True)
	return tuple(dated + undated)


def merge_notifications(
	existing: Iterable[Notification],
	fetched: Iterable[Notification],
) -> Tuple[Notification, ...]:
	"""Union of both sets keyed by id; the fetched copy replaces the existing one."""
	by_id = {notification.id: notification for notification in existing}
	for notification in fetched:
		by_id[notification.id] = notification
	return sort_notifications(list(by_id.values()))


def count_unread(notifications: Iterable[Notification]) -> int:
	return sum(1 for notification in notifications if not notification.is_read)


class NotificationStore:
	"""Single source of truth for the student's notifications.

	State is published as an immutable NotificationState snapshot, replaced in
	one assignment so the list and unread count are always consistent.
	Concurrent refresh requests share one in-flight fetch.
	"""

	def __init__(
		self,
		client: LampClient,
		auth: Optional[LampAuth] = None,
		events: Optional[EventChannel] = None,
		config: Optional[LampConfig] = None,
	) -> None:
		self.client = client
		self.auth = auth or client.auth
		self.config = config or client.config
		self._events = events if events is not None else notification_updates
		self._listeners = EventChannel("notification_state")
		self._state = NotificationState()
		self._refresh_task: Optional[asyncio.Task] = None
		# id -> confirmed by the backend; reapplied over fetches that may predate the mark
		self._read_marks: Dict[int, bool] = {}
		self._unsubscribe_events: Optional[Callable[[], None]] = None

	@property
	def unread_count(self) -> int:
		return self._state.unread_count

	def get_state(self) -> NotificationState:
		return self._state

	def async_add_listener(self, listener: Callable[[NotificationState], Any]) -> Callable[[], None]:
		"""Call ``listener`` with the new state after every change; returns the remover."""
		return self._listeners.subscribe(listener)

	def _set_state(self, state: NotificationState) -> None:
		self._state = state
		self._listeners.emit(state)

	def _publish(self, notifications: Tuple[Notification, ...], unread_count: Optional[int] = None) -> None:
		if unread_count is None:
			unread_count = count_unread(notifications)
		self._set_state(replace(
			self._state,
			notifications=notifications,
			unread_count=max(unread_count, 0),
		))

	def _find(self, notification_id: int) -> Optional[Notification]:
		for notification in self._state.notifications:
			if notification.id == notification_id:
				return notification
		return None

	def _student_no(self) -> Optional[str]:
		user = self.auth.current_user
		if user is None:
			_LOGGER.debug("No logged-in student, skipping notification operation")
			return None
		return user.id

	async def async_start(self) -> None:
		"""Begin tracking notifications for the logged-in student."""
		if self._unsubscribe_events is None:
			self._unsubscribe_events = self._events.subscribe(self._handle_update_signal)
		if self._student_no() is None:
			return
		self._set_state(replace(self._state, loading=True))
		await self.refresh()

	async def async_stop(self) -> None:
		"""Stop tracking (logout): unsubscribe, drop any pending fetch and clear state."""
		if self._unsubscribe_events is not None:
			self._unsubscribe_events()
			self._unsubscribe_events = None

		task = self._refresh_task
		self._refresh_task = None
		if task is not None and not task.done():
			task.cancel()
			try:
				await task
			except asyncio.CancelledError:
				pass

		self._read_marks.clear()
		self._set_state(NotificationState())

	def _handle_update_signal(self, *args: Any) -> None:
		try:
			self._ensure_refresh_task()
		except RuntimeError:
			_LOGGER.debug("Notification update signalled outside an event loop, ignoring")

	def _ensure_refresh_task(self) -> asyncio.Task:
		if self._refresh_task is None or self._refresh_task.done():
			self._refresh_task = asyncio.get_running_loop().create_task(self._async_refresh())
			self._refresh_task.add_done_callback(self._log_refresh_error)
		return self._refresh_task

	def _log_refresh_error(self, task: asyncio.Task) -> None:
		if task.cancelled():
			return
		err = task.exception()
		if err is None:
			return
		_LOGGER.error(f"Unexpected error refreshing notifications: {err!r}", exc_info=err)
		self._set_state(replace(self._state, loading=False, refreshing=False))

	async def refresh(self) -> None:
		"""Resynchronise with the backend; joins an already running refresh."""
		await asyncio.shield(self._ensure_refresh_task())

	async def _async_refresh(self) -> None:
		student_no = self._student_no()
		if student_no is None:
			self._set_state(replace(self._state, loading=False, refreshing=False))
			return

		if not self._state.loading:
			self._set_state(replace(self._state, refreshing=True))

		settled = {nid for nid, confirmed in self._read_marks.items() if confirmed}
		try:
			fetched = await self.client.get_notifications(
				student_no, limit=self.config.notification_page_size
			)
		except LampError as err:
			_LOGGER.warning(f"Failed to refresh notifications: {err}")
			self._set_state(replace(self._state, loading=False, refreshing=False))
			return

		notifications = merge_notifications(self._state.notifications, fetched)
		if self._read_marks:
			notifications = tuple(
				n.as_read() if n.id in self._read_marks and not n.is_read else n
				for n in notifications
			)
		for nid in settled:
			self._read_marks.pop(nid, None)
		self._set_state(NotificationState(
			notifications=notifications,
			unread_count=count_unread(notifications),
		))
		_LOGGER.debug(f"Refreshed notifications: {len(notifications)} total, {self._state.unread_count} unread")

	async def mark_as_read(self, notification_id: int) -> None:
		"""Optimistically mark one notification read; resynchronise if the backend refuses."""
		student_no = self._student_no()
		if student_no is None:
			return

		current = self._find(notification_id)
		if current is None or current.is_read:
			return

		self._read_marks[notification_id] = False
		self._publish(
			tuple(n.as_read() if n.id == notification_id else n for n in self._state.notifications),
			unread_count=self._state.unread_count - 1,
		)

		try:
			await self.client.mark_notification_read(student_no, notification_id)
		except LampError as err:
			_LOGGER.warning(f"Failed to mark notification {notification_id} as read, refreshing: {err}")
			self._read_marks.pop(notification_id, None)
			await self.refresh()
			return

		if notification_id in self._read_marks:
			self._read_marks[notification_id] = True

	async def mark_all_as_read(self) -> None:
		"""Mark everything read once the backend has confirmed it."""
		student_no = self._student_no()
		if student_no is None:
			return

		try:
			await self.client.mark_all_notifications_read(student_no)
		except LampError as err:
			_LOGGER.error(f"Failed to mark all notifications as read: {err}")
			return

		for notification in self._state.notifications:
			self._read_marks[notification.id] = True
		self._publish(tuple(n.as_read() for n in self._state.notifications), unread_count=0)

	async def delete_notification(self, notification_id: int) -> None:
		"""Optimistically remove one notification; resynchronise if the backend refuses."""
		student_no = self._student_no()
		if student_no is None:
			return
		if self._find(notification_id) is None:
			return

		self._publish(tuple(n for n in self._state.notifications if n.id != notification_id))

		try:
			await self.client.delete_notification(student_no, notification_id)
		except LampError as err:
			_LOGGER.warning(f"Failed to delete notification {notification_id}, refreshing: {err}")
			await self.refresh()

	async def delete_all_notifications(self) -> None:
		student_no = self._student_no()
		if student_no is None:
			return

		self._publish((), unread_count=0)

		try:
			await self.client.delete_all_notifications(student_no)
		except LampError as err:
			_LOGGER.warning(f"Failed to delete all notifications, refreshing: {err}")
			await self.refresh()
