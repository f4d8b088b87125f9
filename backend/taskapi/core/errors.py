"""
Task API error hierarchy.

    TaskApiError
    ├── ValidationError  — bad, missing or oversized field (400)
    ├── IdMismatch       — path id differs from body id (400)
    ├── NotFound         — no record for the id (404)
    └── StorageError     — backend connectivity or constraint failure (500)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


class TaskApiError(Exception):
    """Base error for all task operations."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(TaskApiError):
    status_code = 400

    def __init__(self, errors: List[FieldError], message: str = "Validation failed"):
        self.errors = list(errors)
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "errors": [e.to_dict() for e in self.errors],
        }


class IdMismatch(TaskApiError):
    status_code = 400

    def __init__(self, path_id: int, body_id: Optional[int]):
        self.path_id = path_id
        self.body_id = body_id
        super().__init__("ID mismatch")


class NotFound(TaskApiError):
    status_code = 404

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__("Task not found")


class StorageError(TaskApiError):
    """Wraps a backend failure. The cause is kept for logs, never sent to clients."""

    status_code = 500

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Storage failure during {operation}")

    def to_dict(self) -> Dict[str, Any]:
        return {"error": "Internal server error"}
