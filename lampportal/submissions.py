"""Index of the authoritative (latest) submission per activity."""

import logging
from datetime import tzinfo
from typing import Any, Dict, Iterable, Mapping, Optional

from .models import Submission
from .records import parse_submission

_LOGGER = logging.getLogger(__name__)


def _supersedes(incoming: Submission, stored: Submission) -> bool:
	"""Return True when ``incoming`` is strictly later than ``stored``."""
	if incoming.submitted_at is None:
		return False
	if stored.submitted_at is None:
		return True
	return incoming.submitted_at > stored.submitted_at


def build_index(submissions: Iterable[Submission]) -> Dict[str, Submission]:
	"""Map each canonical activity key to its latest submission.

	A single pass over ``submissions``. Equal timestamps keep whichever record
	was seen first; submissions without a key cannot be correlated and are
	dropped.
	"""
	index: Dict[str, Submission] = {}
	dropped = 0

	for submission in submissions:
		key = submission.activity_key
		if not key:
			dropped += 1
			continue

		stored = index.get(key)
		if stored is None or _supersedes(submission, stored):
			index[key] = submission

	if dropped:
		_LOGGER.debug(f"Dropped {dropped} submissions without a usable activity key")
	return index


def build_index_from_records(records: Iterable[Mapping[str, Any]], tz: Optional[tzinfo] = None) -> Dict[str, Submission]:
	"""Parse raw submission rows and index them."""
	return build_index(
		parse_submission(record, tz) for record in records if isinstance(record, Mapping)
	)
