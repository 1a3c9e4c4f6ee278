from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return isinstance(value, str) and value in cls._value2member_map_


DEFAULT_DESCRIPTION = ""
DEFAULT_PRIORITY = "Normal"


# ===== REQUEST BODIES =====

class TaskCreate(BaseModel):
    # Any, so that a missing or non-string title gets the API's own 400 message;
    # description and priority are stored as given
    title: Any = None
    description: Any = DEFAULT_DESCRIPTION
    priority: Any = DEFAULT_PRIORITY

    def has_title(self) -> bool:
        return isinstance(self.title, str) and self.title.strip() != ""


class TaskUpdate(BaseModel):
    """Partial update; only fields present in the body are written"""
    title: Any = None
    description: Any = None
    status: Any = None
    priority: Any = None

    def supplied_fields(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}


class StatusUpdate(BaseModel):
    # Any, so that non-string values get the status error message
    status: Any = None


# ===== RESPONSES =====

class TaskOut(BaseModel):
    id: int
    title: Any = None
    description: Any = None
    status: Any = None
    priority: Any = None


class TaskRecord(TaskOut):
    """A stored row; extra columns pass through untouched"""
    model_config = ConfigDict(extra="allow")

    created_at: Any = None


class TaskListResponse(BaseModel):
    tasks: List[TaskRecord]


class TaskResponse(BaseModel):
    task: TaskRecord


class TaskCreatedResponse(BaseModel):
    task: TaskOut


class MessageResponse(BaseModel):
    message: str


class StatusMessageResponse(MessageResponse):
    status: TaskStatus


class ErrorResponse(BaseModel):
    error: str


class HealthCheck(BaseModel):
    status: str
    service: str
    version: str
    timestamp: float
