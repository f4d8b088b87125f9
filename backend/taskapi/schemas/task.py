from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional, Type, TypeVar, Union
from datetime import datetime, timezone
from enum import Enum
from taskapi.core.errors import FieldError, ValidationError
from taskapi.models.task import TaskPriority, TaskStatus
from taskapi.services.task_store import TaskFields

E = TypeVar("E", bound=Enum)

# Status/priority arrive either as the ordinal or as the member name.
EnumInput = Optional[Union[StrictInt, StrictStr]]


def _normalize(enum_cls: Type[E], value, default: E, field: str) -> E:
    if value is None:
        return default
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        raise ValidationError([FieldError(field, f"Invalid {field} value")])
    if isinstance(value, int):
        members = list(enum_cls)
        if 0 <= value < len(members):
            return members[value]
        raise ValidationError(
            [FieldError(field, f"{field.capitalize()} must be between 0 and {len(members) - 1}")]
        )
    if isinstance(value, str):
        # Unknown names fall back to the default instead of failing the request.
        return enum_cls.__members__.get(value, default)
    raise ValidationError([FieldError(field, f"Invalid {field} value")])


def normalize_status(value) -> TaskStatus:
    """Map an ordinal or a case-sensitive name to TaskStatus; unknown names -> Pending."""
    return _normalize(TaskStatus, value, TaskStatus.Pending, "status")


def normalize_priority(value) -> TaskPriority:
    """Map an ordinal or a case-sensitive name to TaskPriority; unknown names -> Medium."""
    return _normalize(TaskPriority, value, TaskPriority.Medium, "priority")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TaskWrite(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: EnumInput = None
    priority: EnumInput = None
    due_date: Optional[datetime] = None

    @field_validator("due_date", mode="before")
    @classmethod
    def blank_due_date(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def to_fields(self) -> TaskFields:
        errors: List[FieldError] = []
        status = priority = None
        try:
            status = normalize_status(self.status)
        except ValidationError as e:
            errors.extend(e.errors)
        try:
            priority = normalize_priority(self.priority)
        except ValidationError as e:
            errors.extend(e.errors)
        if errors:
            raise ValidationError(errors)
        return TaskFields(
            title=self.title,
            description=self.description,
            status=status,
            priority=priority,
            due_date=self.due_date,
        )


class CreateTaskRequest(TaskWrite):
    pass


class UpdateTaskRequest(TaskWrite):
    id: Optional[int] = None


class TaskResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    created_at: datetime
    updated_at: Optional[datetime] = None
    due_date: Optional[datetime] = None


class TaskStatsResponse(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    total: int
    by_status: Dict[str, int]
    overdue: int


class HealthResponse(BaseModel):
    status: str


class DatabaseInfo(BaseModel):
    backend: str
    database: Optional[str]
