# src/nelproxy/api/schemas.py

"""Pydantic models for the task wire format accepted by POST /task."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import TaskValidationError
from ..tasks.task_models import Command, Task


class TagsPayload(BaseModel):
    model_config = ConfigDict(strict=True)

    name: List[str] = Field(default_factory=list)


class CommandPayload(BaseModel):
    model_config = ConfigDict(strict=True, str_strip_whitespace=True)

    playbook: str = Field(min_length=1)
    user: str = Field(min_length=1)
    su: bool = False
    tags: TagsPayload = Field(default_factory=TagsPayload)


class TaskPayload(BaseModel):
    model_config = ConfigDict(strict=True, str_strip_whitespace=True)

    # Accepted for symmetry with GET responses, never used: the store assigns ids.
    id: Optional[int] = None
    inventory: str = Field(min_length=1)
    command: CommandPayload

    def to_task(self) -> Task:
        return Task(
            id=0,
            inventory=self.inventory,
            command=Command(
                playbook=self.command.playbook,
                user=self.command.user,
                elevate=self.command.su,
                tags=tuple(t for t in (s.strip() for s in self.command.tags.name) if t),
            ),
        )


def parse_task_payload(body: bytes) -> Task:
    """
    Decode and validate a create request body; raises TaskValidationError.

    Validation runs in strict JSON mode: "su" must be a JSON boolean and tag names
    JSON strings, so values like "yes" or 1 are rejected instead of coerced.
    """
    try:
        return TaskPayload.model_validate_json(body or b"").to_task()
    except ValidationError as exc:
        raise TaskValidationError(str(exc)) from exc
