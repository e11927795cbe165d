"""Finding, ordering, selecting and creating task files in the repository."""

from __future__ import annotations

import os
import shutil

from dotsetup import command, prompts, tools
from dotsetup.config import AnyConfig
from dotsetup.task import get_task

TEMPLATE_PATH = "/opt/anyconfig/etc/template.yml"
TASK_SUFFIX = ".yml"

_SINGLE = tools.style(3, False, "Single") + " File Task"
_MULTI = tools.style(3, False, "Multi") + " File Task"
_ADD = tools.style(3, False, "Add") + " Task to existing dir"
_EXIT = tools.style(0, True, "Exit")
CREATE_OPTIONS = [_SINGLE, _MULTI, _ADD, _EXIT]


class TaskFileError(Exception):
    """The task files in the repository are missing or laid out wrongly."""


def _config_path(config: AnyConfig) -> str:
    return config.repo + "/.anyconfig/"


def names_of_files(path: str | os.PathLike, allow_dir: bool) -> list[str]:
    """Return task names in ``path``: file names without ``.yml`` and directory names."""
    try:
        entries = sorted(os.scandir(path), key=lambda entry: entry.name)
    except OSError:
        return []
    names = []
    for entry in entries:
        if entry.is_dir():
            if not allow_dir:
                raise TaskFileError("directorys are not allowed")
            names.append(entry.name)
            continue
        if TASK_SUFFIX not in entry.name:
            raise TaskFileError(f"File {entry.name} is not of type yml")
        names.append(entry.name.removesuffix(TASK_SUFFIX))
    return names


def filter_files(files: list[str], config: AnyConfig) -> list[str]:
    """Drop the template and tasks whose ``os`` dependencies exclude this system."""
    config_path = _config_path(config)
    kept = []
    for name in files:
        if name == "template":
            continue
        groups = get_task(config_path + name + TASK_SUFFIX)
        if not groups:
            groups = get_task(f"{config_path}{name}/{name}{TASK_SUFFIX}")
        os_args = [
            dep.args[:1]
            for group in groups
            for dep in group.dependencies
            if dep.name == "os"
        ]
        if not os_args or [config.os] in os_args:
            kept.append(name)
    return kept


def sort_files(files: list[str], config: AnyConfig) -> list[str]:
    """Put the tasks each file depends on before it, without duplicates."""
    config_path = _config_path(config)
    ordered: list[str] = []
    for name in files:
        groups = get_task(config_path + name)
        if not groups:
            raise TaskFileError(f"Error while getting task out of file: {name}")
        for dep in groups[0].dependencies:
            if dep.name == "task":
                ordered.extend(arg + TASK_SUFFIX for arg in dep.args)
            elif dep.name == "user":
                if dep.args[:1] == ["noroot"] and tools.get_user() == "root":
                    raise TaskFileError(f"Can't run task {name} as root")
        ordered.append(name)
    return list(dict.fromkeys(ordered))


def _select_in_directory(directory: str, config: AnyConfig) -> list[str]:
    config_path = _config_path(config)
    selected = []
    others = []
    for name in names_of_files(config_path + directory, False):
        if name == directory:
            selected.append(f"{directory}/{name}{TASK_SUFFIX}")
        else:
            others.append(f"{directory}/{name}")
    others = filter_files(others, config)
    chosen = prompts.multi_select("Select Tasks to run in subDir: " + directory, others)
    for name in chosen:
        if name == directory:
            continue
        path = name + TASK_SUFFIX
        if not tools.check_exist(config_path + path):
            raise TaskFileError("Could not open file: " + config_path + path)
        selected.append(path)
    return selected


def select_files(config: AnyConfig) -> list[str]:
    """Ask which tasks to run and return their paths relative to ``.anyconfig``."""
    config_path = _config_path(config)
    names = filter_files(names_of_files(config_path, True), config)
    is_dir = {name: tools.check_exist(config_path + name) for name in names}
    labels = {
        (tools.style(3, False, name) if is_dir[name] else name): name for name in names
    }
    selected: list[str] = []
    for label in prompts.multi_select("Select Tasks to run ", list(labels)):
        name = labels[label]
        if is_dir[name]:
            selected.extend(_select_in_directory(name, config))
        else:
            selected.append(name + TASK_SUFFIX)
    return selected


def _ask_name() -> str:
    return prompts.text_input("Name of Task:", "filename").split(".")[0]


def _copy_template(target: str) -> None:
    try:
        shutil.copyfile(TEMPLATE_PATH, target)
    except OSError as exc:
        raise TaskFileError(f"Could not copy template to {target}: {exc}") from exc


def create_file(config: AnyConfig) -> str | None:
    """Create a new task from the template and open it in ``$EDITOR``.

    Returns the path of the new file, or None when nothing was created.
    """
    if not tools.check_exist(TEMPLATE_PATH):
        raise TaskFileError("Could not find template.yml, check if installed correctly!")
    config_path = _config_path(config)
    choice = prompts.select("What kind of task do you want to create?", CREATE_OPTIONS)
    if choice == _SINGLE:
        new_file = config_path + _ask_name() + TASK_SUFFIX
        if tools.check_exist(new_file):
            tools.error("This filename is already taken")
            return None
        _copy_template(new_file)
    elif choice == _MULTI:
        name = _ask_name()
        directory = config_path + name
        if tools.check_exist(directory):
            tools.error("This name is already taken")
            return None
        try:
            os.mkdir(directory)
        except OSError as exc:
            raise TaskFileError(f"Could not create {directory}: {exc}") from exc
        new_file = f"{directory}/{name}{TASK_SUFFIX}"
        _copy_template(new_file)
    elif choice == _ADD:
        dirs = tools.get_dirs(config.repo + "/.anyconfig")
        directory = prompts.select("In what directory do you want to add your task?", dirs)
        new_file = f"{config_path}{directory}/{_ask_name()}{TASK_SUFFIX}"
        if tools.check_exist(new_file):
            tools.error("This filename is already taken")
            return None
        _copy_template(new_file)
    else:
        return None
    editor = os.environ.get("EDITOR") or "vim"
    try:
        command.run(f"{editor} {new_file}", debug=True)
    except command.CommandFailed:
        pass
    tools.info("Succesfully create task!")
    return new_file