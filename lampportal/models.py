"""Data models for LAMP portal entities."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, List, Optional, Tuple

from .const import REM_SUCCESS, STATUS_LATE, STATUS_COMPLETED


@dataclass
class ApiResponse:
	"""Envelope every LAMP endpoint answers with."""
	rem: str
	msg: str = ""
	sys: str = ""
	data: Any = None
	stamp: Optional[str] = None

	@property
	def ok(self) -> bool:
		return self.rem == REM_SUCCESS

	@property
	def records(self) -> List[Any]:
		"""Data as a list; a null or non-list payload yields no records."""
		if isinstance(self.data, list):
			return self.data
		return []


@dataclass
class User:
	"""The authenticated student."""
	id: str
	fullname: str = ""
	token: Optional[str] = None
	expires: Optional[int] = None  # unix seconds
	role: Optional[str] = None
	email: Optional[str] = None
	department: Optional[str] = None
	program: Optional[str] = None


@dataclass(frozen=True)
class TermSettings:
	"""Active academic year and semester that scope every query."""
	academic_year: str
	semester: str

	def __str__(self) -> str:
		return f"AY {self.academic_year}, semester {self.semester}"


@dataclass(frozen=True)
class ClassInfo:
	"""A class the student is enrolled in."""
	class_key: str
	subject_code: str = ""
	subject_description: str = ""
	faculty: str = ""
	days: str = ""  # e.g. "Mon,Thu"
	start_time: str = ""  # e.g. "5:00 PM"
	end_time: str = ""
	room: str = ""

	@property
	def display_name(self) -> str:
		return self.subject_description or self.subject_code or self.class_key

	def __str__(self) -> str:
		return f"{self.subject_code or self.class_key} - {self.display_name}"


@dataclass(frozen=True)
class Activity:
	"""One assignable unit of work."""
	activity_key: Optional[str]
	class_key: str
	title: str = ""
	description: str = ""
	deadline: Optional[datetime] = None
	posted_at: Optional[datetime] = None
	total_points: float = 0.0
	scored_points: Optional[float] = None  # only when graded

	@property
	def is_graded(self) -> bool:
		return self.scored_points is not None

	def __str__(self) -> str:
		due = self.deadline.strftime('%Y-%m-%d %H:%M') if self.deadline else "no deadline"
		return f"{self.title} ({due})"


@dataclass(frozen=True)
class Submission:
	"""A student's work against one activity."""
	activity_key: Optional[str]
	submitted_at: Optional[datetime] = None
	class_key: Optional[str] = None
	record_id: Optional[str] = None


@dataclass(frozen=True)
class ActivityItem:
	"""An activity joined with its submission, status and course metadata."""
	activity: Activity
	status: str
	submission: Optional[Submission] = None
	is_late: bool = False
	course_name: str = ""
	course_code: str = ""
	color: str = ""

	@property
	def deadline(self) -> Optional[datetime]:
		return self.activity.deadline

	@property
	def is_done(self) -> bool:
		return self.status in (STATUS_COMPLETED, STATUS_LATE)


@dataclass
class AggregatedActivities:
	"""Everything the to-do screen needs from one aggregation run."""
	activities: List[ActivityItem] = field(default_factory=list)
	total_points: float = 0.0
	earned_points: float = 0.0
	error: Optional[str] = None
	unavailable_classes: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class Notification:
	"""A server-originated event for the student."""
	id: int
	type: str
	class_key: str = ""
	title: str = ""
	message: str = ""
	post_id: Optional[int] = None
	activity_id: Optional[int] = None
	resource_id: Optional[int] = None
	subject_code: Optional[str] = None
	subject_description: Optional[str] = None
	is_read: bool = False
	created_at: Optional[datetime] = None

	def as_read(self) -> "Notification":
		"""Return the read copy of this notification (idempotent)."""
		if self.is_read:
			return self
		return replace(self, is_read=True)

	def __str__(self) -> str:
		state = "read" if self.is_read else "unread"
		return f"[{self.type}] {self.title} ({state})"


@dataclass(frozen=True)
class NotificationState:
	"""Snapshot of the notification store."""
	notifications: Tuple[Notification, ...] = ()
	unread_count: int = 0
	loading: bool = False
	refreshing: bool = False


@dataclass
class NotificationGroups:
	"""Notifications partitioned for display."""
	new: List[Notification] = field(default_factory=list)
	today: List[Notification] = field(default_factory=list)
	earlier: List[Notification] = field(default_factory=list)


@dataclass(frozen=True)
class ConversationSummary:
	"""Chat conversation as far as unread counting is concerned."""
	id: str
	participants: Tuple[str, ...] = ()
	last_message: str = ""
	last_message_time: Optional[datetime] = None
	unread_count: int = 0
