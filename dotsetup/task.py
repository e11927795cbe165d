"""Parsing of task description files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import yaml

from dotsetup import tools


@dataclass
class ActionDescription:
    """A named step with its string arguments."""

    name: str
    args: list[str] = field(default_factory=list)


@dataclass
class TaskDescription:
    """One group of dependencies and install steps."""

    dependencies: list[ActionDescription] = field(default_factory=list)
    install: list[ActionDescription] = field(default_factory=list)


def _scalar(node: yaml.Node) -> str | None:
    return node.value if isinstance(node, yaml.ScalarNode) else None


def _actions(node: yaml.Node) -> list[ActionDescription]:
    if not isinstance(node, yaml.MappingNode):
        return []
    actions = []
    for key_node, value_node in node.value:
        name = _scalar(key_node) or ""
        args: list[str] = []
        if isinstance(value_node, yaml.SequenceNode):
            args = [item.value for item in value_node.value if isinstance(item, yaml.ScalarNode)]
        actions.append(ActionDescription(name, args))
    return actions


def parse_task(text: str) -> list[TaskDescription]:
    """Parse a task document; repeated top-level keys start new groups.

    Each ``install`` key closes a group, taking the most recent
    ``dependencies`` seen before it.
    """
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        tools.error(f"Couldn't read yaml file: {exc}")
        return []
    if root is None:
        return []
    if not isinstance(root, yaml.MappingNode):
        tools.error("Couldn't read yaml file: top level is not a mapping")
        return []
    tasks: list[TaskDescription] = []
    dependencies: list[ActionDescription] = []
    for key_node, value_node in root.value:
        key = _scalar(key_node)
        if key == "dependencies":
            dependencies = _actions(value_node)
        elif key == "install":
            tasks.append(TaskDescription(list(dependencies), _actions(value_node)))
    return tasks


def get_task(path: str | os.PathLike) -> list[TaskDescription]:
    """Read and parse a task file; an unreadable file yields no tasks."""
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError:
        text = ""
    return parse_task(text)