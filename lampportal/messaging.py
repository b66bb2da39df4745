"""Unread chat message counting over conversation and message documents."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .models import ConversationSummary
from .utils import parse_datetime

_LOGGER = logging.getLogger(__name__)


def _message_time(value: Any) -> Optional[datetime]:
	# Document stores serialise timestamps as {"seconds": ..., "nanoseconds": ...}
	if isinstance(value, Mapping) and "seconds" in value:
		return datetime.fromtimestamp(int(value["seconds"]), tz=timezone.utc)
	return parse_datetime(value)


def is_unread_for(message: Mapping[str, Any], user_id: str) -> bool:
	"""A message is unread for ``user_id`` when someone else sent it and it is not read."""
	return message.get("senderId") != user_id and message.get("isRead") is False


def conversation_ids_for(conversations: Iterable[Mapping[str, Any]], user_id: str) -> List[str]:
	"""Ids of the conversations ``user_id`` participates in."""
	return [
		str(conversation.get("id"))
		for conversation in conversations
		if conversation.get("id") is not None and user_id in (conversation.get("participants") or ())
	]


def unread_by_conversation(
	messages: Iterable[Mapping[str, Any]],
	user_id: str,
	conversation_ids: Iterable[str],
) -> Dict[str, int]:
	wanted = set(conversation_ids)
	counts = {conversation_id: 0 for conversation_id in wanted}
	for message in messages:
		conversation_id = message.get("conversationId")
		if conversation_id in wanted and is_unread_for(message, user_id):
			counts[conversation_id] += 1
	return counts


def count_unread_messages(
	messages: Iterable[Mapping[str, Any]],
	user_id: str,
	conversation_ids: Iterable[str],
) -> int:
	"""Total unread messages for ``user_id`` across ``conversation_ids``.

	Args:
		messages: Message documents (``conversationId``, ``senderId``, ``isRead``)
		user_id: The reading user; their own messages never count
		conversation_ids: Conversations to include

	Returns:
		Number of unread messages, 0 when there are no conversations
	"""
	return sum(unread_by_conversation(messages, user_id, conversation_ids).values())


def parse_conversation(document: Mapping[str, Any], unread_count: int = 0) -> ConversationSummary:
	return ConversationSummary(
		id=str(document.get("id") or ""),
		participants=tuple(document.get("participants") or ()),
		last_message=str(document.get("lastMessage") or ""),
		last_message_time=_message_time(document.get("lastMessageTime")),
		unread_count=unread_count,
	)


def summarize_conversations(
	conversations: Iterable[Mapping[str, Any]],
	messages: Iterable[Mapping[str, Any]],
	user_id: str,
) -> List[ConversationSummary]:
	"""The user's conversations with unread counts, most recent first."""
	documents = [c for c in conversations if user_id in (c.get("participants") or ())]
	counts = unread_by_conversation(messages, user_id, conversation_ids_for(documents, user_id))
	summaries = [
		parse_conversation(document, counts.get(str(document.get("id")), 0))
		for document in documents
	]
	epoch = datetime.min.replace(tzinfo=timezone.utc)
	summaries.sort(key=lambda summary: summary.last_message_time or epoch, reverse=True)
	_LOGGER.debug(f"Summarised {len(summaries)} conversations for {user_id}")
	return summaries


def total_unread(conversations: Iterable[ConversationSummary]) -> int:
	return sum(max(summary.unread_count, 0) for summary in conversations)
