"""Command line entry point."""

from __future__ import annotations

import argparse
import sys

from dotsetup import gh, runner, taskfiles, tools
from dotsetup.action import TaskError, get_actions
from dotsetup.config import AnyConfig, init_config

ANYCONFIG_UPDATE_FLAG = "/tmp/anyconfig_update"
REPO_UPDATE_FLAG = "/tmp/repo_update"

_INSTALL = tools.style(3, False, "Install") + " existing tasks in repo"
_CREATE = tools.style(3, False, "Create") + " new task in repo"
_UPDATE_ANYCONFIG = tools.style(2, False, "Update") + " anyconfig"
_UPDATE_REPO = tools.style(2, False, "Update") + " Repository"
_EXIT = tools.style(0, True, "Exit")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Read ``-d`` (debug), ``-s`` (silent) and ``-i`` followed by task files."""
    if argv is None:
        argv = sys.argv[1:]
    args = argparse.Namespace(debug=False, silent=False, direct_install=False, files=[])
    for arg in argv:
        if arg == "-d":
            args.debug = True
        elif arg == "-s":
            args.silent = True
        elif arg == "-i":
            args.direct_install = True
        elif args.direct_install:
            args.files.append(arg)
    return args


def _collect_actions(files: list[str], config: AnyConfig) -> list[runner.Action]:
    return [action for file in files for action in get_actions(file, config)]


def _install_files(files: list[str], config: AnyConfig, silent: bool) -> None:
    actions = _collect_actions(taskfiles.sort_files(files, config), config)
    print()
    if not silent:
        runner.run_actions(actions, config.debug)
        return
    for action in actions:
        tools.info("Running action with name: " + action.name)
        try:
            action.cmd()
        except Exception as exc:
            tools.error(f"{action.name}: {exc}")


def _install_selected(config: AnyConfig) -> None:
    files = taskfiles.select_files(config)
    if not files:
        tools.error("You must select something!")
        return
    for _ in range(4):
        files = taskfiles.sort_files(files, config)
    actions = _collect_actions(files, config)
    print()
    runner.run_actions(actions, config.debug)


def _interactive(config: AnyConfig) -> None:
    from dotsetup import prompts

    options = [_INSTALL, _CREATE]
    if tools.check_exist(ANYCONFIG_UPDATE_FLAG):
        options.append(_UPDATE_ANYCONFIG)
    if tools.check_exist(REPO_UPDATE_FLAG):
        options.append(_UPDATE_REPO)
    options.append(_EXIT)
    answer = prompts.select("What do you want to do? ", options)
    if answer == _INSTALL:
        _install_selected(config)
    elif answer == _CREATE:
        taskfiles.create_file(config)
    elif answer == _UPDATE_ANYCONFIG:
        print()
        gh.update_anyconfig()
    elif answer == _UPDATE_REPO:
        print()
        gh.update_repo(config.repo)
    else:
        print("Bye!")


def main(argv: list[str] | None = None) -> int:
    """Run the tool and return its exit status."""
    args = parse_args(argv)
    config = init_config()
    config.debug = args.debug
    try:
        if args.files:
            _install_files(args.files, config, args.silent)
        else:
            _interactive(config)
    except (TaskError, taskfiles.TaskFileError, RuntimeError) as exc:
        tools.error(exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())