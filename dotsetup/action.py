"""Turning task descriptions into runnable actions."""

from __future__ import annotations

import os
from typing import Callable

from dotsetup import command, task, tools
from dotsetup.config import AnyConfig
from dotsetup.runner import Action
from dotsetup.task import TaskDescription

BACKUP_MARKER = "{backup}"


class TaskError(Exception):
    """A task file is missing, malformed or cannot run on this system."""


def split_arg(text: str) -> tuple[str, str]:
    """Split ``"name | argument"`` into its display name and argument.

    Without a ``|`` the name is empty and the whole text is the argument.
    """
    if "|" not in text:
        return "", text
    parts = text.split(" | ")
    if len(parts) < 2:
        raise TaskError(f"Invalid argument: {text}")
    return parts[0], parts[1]


def fill_arg(text: str, config: AnyConfig) -> str:
    """Replace the ``{user}``, ``{home}`` and ``{repo}`` placeholders."""
    return (
        text.replace("{user}", config.user)
        .replace("{home}", config.home_dir)
        .replace("{repo}", config.repo)
    )


def split_pair(arg: str, separator: str, kind: str) -> tuple[str, str]:
    """Split ``arg`` at ``separator`` into two parts or raise ``TaskError``."""
    if separator not in arg:
        raise TaskError(f"Invalid {kind} command")
    parts = arg.split(separator)
    return parts[0], parts[1]


def select_task(descriptions: list[TaskDescription], os_name: str) -> TaskDescription:
    """Pick the description meant for ``os_name``.

    A single description is used as is; among several, the last one whose
    ``os`` dependency names ``os_name`` wins, and none gives an empty task.
    """
    if len(descriptions) == 1:
        return descriptions[0]
    chosen = TaskDescription()
    for description in descriptions:
        for dep in description.dependencies:
            if dep.name == "os" and dep.args[:1] == [os_name]:
                chosen = description
    return chosen


def _dependencies_met(description: TaskDescription, file: str, config: AnyConfig) -> bool:
    met = True
    for dep in description.dependencies:
        if dep.name == "noDir":
            if any(tools.check_exist(fill_arg(arg, config)) for arg in dep.args):
                met = False
        elif dep.name == "noCommand":
            if any(tools.command_exists(arg) for arg in dep.args):
                met = False
        elif dep.name == "user":
            if dep.args[:1] == ["noroot"] and tools.get_user() == "root":
                raise TaskError(f"Can't run task {file} as root")
        elif dep.name == "os":
            if config.os != (dep.args or [""])[0]:
                raise TaskError(f"Can't run task {file} with this operating system")
    return met


def _shell_action(name: str, shell: str, debug: bool) -> Action:
    def execute() -> None:
        try:
            command.run(shell, debug=debug)
        except command.CommandFailed as exc:
            tools.command_error(shell, exc, exc.stdout, exc.stderr)
            raise

    return Action(name, execute)


def _build_pkg(name: str, arg: str, config: AnyConfig) -> Action:
    return Action(
        name or f"Installing: {arg}",
        lambda: command.pkg_install(config.installer, arg, config.debug),
    )


def _build_apt(name: str, arg: str, config: AnyConfig) -> Action:
    return _shell_action(
        name or f"Installing: {arg}",
        f"sudo apt update && sudo apt install -y {arg}",
        config.debug,
    )


def _build_pacman(name: str, arg: str, config: AnyConfig) -> Action:
    return _shell_action(
        name or f"Installing: {arg}",
        f"sudo pacman -Sy {arg} --needed --noconfirm",
        config.debug,
    )


def _build_yay(name: str, arg: str, config: AnyConfig) -> Action:
    return _shell_action(
        name or f"Installing: {arg}",
        f"yay -Sy {arg} --needed --noconfirm",
        config.debug,
    )


def _build_cmd(name: str, arg: str, config: AnyConfig) -> Action:
    return _shell_action(name or f"Command: {arg}", arg, config.debug)


def _build_mkdir(name: str, arg: str, config: AnyConfig) -> Action:
    name = name or f"Creating dir: {arg}"
    backup_existing = BACKUP_MARKER in arg
    path = arg.replace(BACKUP_MARKER, "")
    return Action(name, lambda: command.mkdir(path, backup_existing))


def _build_backup(name: str, arg: str, config: AnyConfig) -> Action:
    return Action(name or f"Backup: {arg} to ~/.old", lambda: command.backup(arg))


def _build_ln(name: str, arg: str, config: AnyConfig) -> Action:
    origin, destination = split_pair(arg, " > ", "ln")
    return Action(
        name or f"Linking {origin} to {destination}",
        lambda: command.ln(origin, destination, True),
    )


def _build_cp(name: str, arg: str, config: AnyConfig) -> Action:
    origin, destination = split_pair(arg, " > ", "cp")
    return Action(
        name or f"Copying {origin} to {destination}",
        lambda: command.cp(origin, destination, True),
    )


def _build_mv(name: str, arg: str, config: AnyConfig) -> Action:
    origin, destination = split_pair(arg, " > ", "mv")
    return Action(
        name or f"Moving {origin} to {destination}",
        lambda: command.mv(origin, destination, True),
    )


def _build_env(name: str, arg: str, config: AnyConfig) -> Action:
    variable, value = split_pair(arg, " = ", "env")

    def execute() -> None:
        os.environ[variable] = value

    return Action(name or f"Setting env {variable} to {value}", execute)


_Builder = Callable[[str, str, AnyConfig], Action]

# action type -> (builder, command that must be installed for it to apply)
_BUILDERS: dict[str, tuple[_Builder, str | None]] = {
    "pkg": (_build_pkg, None),
    "apt": (_build_apt, "apt"),
    "pacman": (_build_pacman, "pacman"),
    "yay": (_build_yay, None),
    "cmd": (_build_cmd, None),
    "mkdir": (_build_mkdir, None),
    "backup": (_build_backup, None),
    "ln": (_build_ln, None),
    "cp": (_build_cp, None),
    "mv": (_build_mv, None),
    "env": (_build_env, None),
}


def actions_for_task(description: TaskDescription, file: str, config: AnyConfig) -> list[Action]:
    """Check the task's dependencies and build its install actions.

    Returns no actions when a ``noDir`` or ``noCommand`` dependency says the
    task is already done; raises ``TaskError`` when it cannot run here.
    """
    if not _dependencies_met(description, file, config):
        return []
    actions: list[Action] = []
    for step in description.install:
        entry = _BUILDERS.get(step.name)
        if entry is None:
            tools.error(f"Error: Did not recognise Action-Type: {step.name}")
            continue
        builder, required = entry
        if required is not None and not tools.command_exists(required):
            continue
        for raw in step.args:
            name, arg = split_arg(raw)
            actions.append(builder(name, fill_arg(arg, config), config))
    return actions


def get_actions(file: str, config: AnyConfig) -> list[Action]:
    """Read the task ``file`` from the repository and build its actions."""
    descriptions = task.get_task(f"{config.repo}/.anyconfig/{file}")
    if not descriptions:
        raise TaskError(f"Error while getting task out of file: {file}")
    return actions_for_task(select_task(descriptions, config.os), file, config)