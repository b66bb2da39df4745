"""In-process broadcast channel for "notifications changed" events."""

import logging
from typing import Any, Callable, List

_LOGGER = logging.getLogger(__name__)

Listener = Callable[..., Any]


class EventChannel:
	"""Fan a signal out to every subscribed listener.

	Listeners are called synchronously in subscription order. A listener that
	raises is logged and skipped; the remaining listeners still run.
	"""

	def __init__(self, name: str = "events") -> None:
		self.name = name
		self._listeners: List[Listener] = []

	def subscribe(self, listener: Listener) -> Callable[[], None]:
		"""Register ``listener`` and return a callable that removes it again."""
		self._listeners.append(listener)

		def _unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return _unsubscribe

	def emit(self, *args: Any) -> None:
		# Copy so listeners may unsubscribe while being notified
		for listener in list(self._listeners):
			try:
				listener(*args)
			except Exception as err:
				_LOGGER.warning(f"Listener {listener!r} on {self.name} channel failed: {err}")

	@property
	def listener_count(self) -> int:
		return len(self._listeners)

	def clear(self) -> None:
		self._listeners.clear()


notification_updates = EventChannel("notification_updates")


def subscribe_notification_updates(listener: Listener) -> Callable[[], None]:
	"""Subscribe to the process-wide "notifications changed" signal."""
	return notification_updates.subscribe(listener)


def emit_notification_update() -> None:
	"""Tell every notification consumer to resynchronise (e.g. after a push)."""
	_LOGGER.debug(f"Emitting notification update to {notification_updates.listener_count} listeners")
	notification_updates.emit()
