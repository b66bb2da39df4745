"""Tests for unread chat message counting."""

from datetime import datetime, timezone

from lampportal.messaging import (
	conversation_ids_for,
	count_unread_messages,
	summarize_conversations,
	total_unread,
)
from lampportal.models import ConversationSummary

ME = "2021-00123"

CONVERSATIONS = [
	{"id": "c1", "participants": [ME, "2021-00456"], "lastMessage": "see you", "lastMessageTime": {"seconds": 1763200000, "nanoseconds": 0}},
	{"id": "c2", "participants": [ME, "2021-00789"], "lastMessage": "ok", "lastMessageTime": "2025-11-15T10:00:00Z"},
	{"id": "c3", "participants": ["2021-00456", "2021-00789"], "lastMessage": "not mine"},
]

MESSAGES = [
	{"conversationId": "c1", "senderId": "2021-00456", "isRead": False},
	{"conversationId": "c1", "senderId": "2021-00456", "isRead": True},
	{"conversationId": "c1", "senderId": ME, "isRead": False},
	{"conversationId": "c2", "senderId": "2021-00789", "isRead": False},
	{"conversationId": "c2", "senderId": "2021-00789", "isRead": False},
	{"conversationId": "c3", "senderId": "2021-00456", "isRead": False},
]


def test_counts_only_others_unread_messages_in_my_conversations():
	ids = conversation_ids_for(CONVERSATIONS, ME)
	assert ids == ["c1", "c2"]
	assert count_unread_messages(MESSAGES, ME, ids) == 3


def test_no_conversations_means_zero():
	assert count_unread_messages(MESSAGES, ME, []) == 0


def test_summaries_are_newest_first_with_counts():
	summaries = summarize_conversations(CONVERSATIONS, MESSAGES, ME)
	assert [(s.id, s.unread_count) for s in summaries] == [("c2", 2), ("c1", 1)]
	assert summaries[1].last_message_time == datetime.fromtimestamp(1763200000, tz=timezone.utc)
	assert total_unread(summaries) == 3


def test_total_unread_ignores_negative_counts():
	assert total_unread([ConversationSummary("a", unread_count=2), ConversationSummary("b", unread_count=-1)]) == 2
