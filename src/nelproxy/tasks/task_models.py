# src/nelproxy/tasks/task_models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any


def _expect(value: Any, kind: type, name: str) -> Any:
    if not isinstance(value, kind):
        raise TypeError(f"{name} must be {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass(frozen=True, slots=True)
class Command:
    """
    Arguments for one ansible-playbook run.

    Wire names differ from attribute names:
    - elevate <-> "su"
    - tags    <-> {"tags": {"name": [...]}}
    """

    playbook: str
    user: str
    elevate: bool = False
    tags: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "playbook": self.playbook,
            "user": self.user,
            "su": self.elevate,
            "tags": {"name": list(self.tags)},
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Command:
        """Decode the wire shape; raises TypeError when a field has the wrong JSON type."""
        tags_raw = raw.get("tags") or {}
        if not isinstance(tags_raw, Mapping):
            raise TypeError("command.tags must be an object")
        names = tags_raw.get("name") or []
        if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
            raise TypeError("command.tags.name must be a list of strings")
        return cls(
            playbook=_expect(raw.get("playbook", ""), str, "command.playbook"),
            user=_expect(raw.get("user", ""), str, "command.user"),
            elevate=_expect(raw.get("su", False), bool, "command.su"),
            tags=tuple(names),
        )


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    inventory: str
    command: Command

    @property
    def dedup_key(self) -> tuple[str, str]:
        return (self.inventory, self.command.playbook)

    def with_id(self, task_id: int) -> Task:
        return replace(self, id=task_id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "inventory": self.inventory,
            "command": self.command.to_dict(),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        if not isinstance(raw, Mapping):
            raise TypeError("task must be an object")
        task_id = raw.get("id", 0)
        if isinstance(task_id, bool) or not isinstance(task_id, int):
            raise TypeError("id must be an integer")
        command = raw.get("command") or {}
        if not isinstance(command, Mapping):
            raise TypeError("command must be an object")
        return cls(
            id=task_id,
            inventory=_expect(raw.get("inventory", ""), str, "inventory"),
            command=Command.from_dict(command),
        )
