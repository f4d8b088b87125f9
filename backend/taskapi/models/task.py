from enum import Enum
from sqlalchemy import Column, Integer, String, Text, Enum as SAEnum
from taskapi.core.database import Base, UTCDateTime

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


class TaskStatus(str, Enum):
    Pending = "Pending"
    InProgress = "InProgress"
    Completed = "Completed"
    Cancelled = "Cancelled"


class TaskPriority(str, Enum):
    Low = "Low"
    Medium = "Medium"
    High = "High"
    Critical = "Critical"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SAEnum(TaskStatus, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=TaskStatus.Pending,
        index=True,
    )
    priority = Column(
        SAEnum(TaskPriority, native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=TaskPriority.Medium,
        index=True,
    )
    created_at = Column(UTCDateTime, nullable=False, index=True)
    updated_at = Column(UTCDateTime, nullable=True)
    due_date = Column(UTCDateTime, nullable=True)

    def __repr__(self):
        return f"<Task id={self.id} title={self.title!r} status={self.status}>"
