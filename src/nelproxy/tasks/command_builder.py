# src/nelproxy/tasks/command_builder.py

"""
Turn a Task into an ansible-playbook invocation.

Nothing here runs a process. The caller decides whether to print the command line
(render_command) or a JSON document (render_json).
"""

from __future__ import annotations

import json

from .task_models import Command, Task

DEFAULT_EXECUTABLE = "ansible-playbook"
DEFAULT_INVENTORY_ROOT = "inventories"
ELEVATION_FLAG = "--ask-su-pass"
TAG_SEPARATOR = ","


def build_tags(command: Command) -> str:
    """Join tags with commas; no tags gives an empty string."""
    return TAG_SEPARATOR.join(command.tags)


def hosts_path(inventory: str, inventory_root: str = DEFAULT_INVENTORY_ROOT) -> str:
    return f"{inventory_root.rstrip('/')}/{inventory}/hosts"


def build_argv(
    task: Task,
    *,
    executable: str = DEFAULT_EXECUTABLE,
    inventory_root: str = DEFAULT_INVENTORY_ROOT,
) -> list[str]:
    cmd = task.command
    argv = [executable, "-i", hosts_path(task.inventory, inventory_root), cmd.playbook]
    if cmd.elevate:
        argv.append(ELEVATION_FLAG)
    argv += ["-u", cmd.user]

    tags = build_tags(cmd)
    if tags:
        argv += ["--tags", tags]
    return argv


def render_command(
    task: Task,
    *,
    executable: str = DEFAULT_EXECUTABLE,
    inventory_root: str = DEFAULT_INVENTORY_ROOT,
) -> str:
    return " ".join(build_argv(task, executable=executable, inventory_root=inventory_root))


def render_json(
    task: Task,
    *,
    executable: str = DEFAULT_EXECUTABLE,
    inventory_root: str = DEFAULT_INVENTORY_ROOT,
) -> str:
    """Task wire JSON plus the built argument list, on a single line."""
    doc = task.to_dict()
    doc["argv"] = build_argv(task, executable=executable, inventory_root=inventory_root)
    return json.dumps(doc, ensure_ascii=False)
