"""Canonical activity keys for joining activities with submissions.

Activity definitions and submission records come from different endpoints.
An activity's own ``actcode_fld`` is often blank while its ``recno_fld`` is
what submissions actually point at, so both sides resolve their key with the
same precedence: record number first, submission code second.
"""

from typing import Any, Mapping, Optional, Sequence

from .const import ACTIVITY_KEY_FIELDS, SUBMISSION_KEY_FIELDS


def _present(value: Any) -> bool:
	return value is not None and value != ""


def canonical_key(record: Mapping[str, Any], fields: Sequence[str] = ACTIVITY_KEY_FIELDS) -> Optional[str]:
	"""Return the first present identifier among ``fields``, stringified.

	No case or whitespace normalisation is applied; records whose identifiers
	disagree simply fail to match.
	"""
	if not isinstance(record, Mapping):
		return None
	for name in fields:
		value = record.get(name)
		if _present(value):
			return str(value)
	return None


def activity_key(record: Mapping[str, Any]) -> Optional[str]:
	"""Canonical key of an activity record."""
	return canonical_key(record, ACTIVITY_KEY_FIELDS)


def submission_key(record: Mapping[str, Any]) -> Optional[str]:
	"""Canonical key of the activity a submission record answers."""
	return canonical_key(record, SUBMISSION_KEY_FIELDS)
