"""Running actions with a spinner and progress display."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass
from typing import Callable, Iterator

from rich.console import Console
from rich.markup import escape
from rich.padding import Padding
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn

from dotsetup import command, tools

CHECK_MARK = "✓"
_NAME_STYLE = "#6CD0D4"
_CHECK_STYLE = "#4EF465"
_SPINNER_STYLE = "color(63)"


@dataclass
class Action:
    """A named unit of work; ``cmd`` raises on failure."""

    name: str
    cmd: Callable[[], object]
    interactive: bool = False


def _acquire_sudo() -> None:
    """Ask for sudo rights up front so later commands do not prompt mid-display."""
    if tools.get_user() == "root" or not tools.command_exists("sudo"):
        return
    try:
        command.run("sudo true", debug=True)
    except command.CommandFailed:
        pass


def _done_line(name: str) -> str:
    return f"[{_CHECK_STYLE}]{CHECK_MARK}[/] {escape(name)}"


@contextlib.contextmanager
def _paused(progress: Progress, pause: bool) -> Iterator[None]:
    """Hide the live display while an action needs the terminal."""
    if not pause:
        yield
        return
    progress.stop()
    try:
        yield
    finally:
        progress.start()


def run_actions(actions: list[Action], debug: bool = False) -> bool:
    """Run ``actions`` in order, stopping at the first failure.

    Returns True when every action succeeded, False when one failed.
    """
    if not actions:
        tools.info("nothing to do")
        return True
    _acquire_sudo()
    console = Console(highlight=False)
    total = len(actions)
    progress = Progress(
        SpinnerColumn("dots", style=_SPINNER_STYLE),
        TextColumn(f"[{_NAME_STYLE}]{{task.description}}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
        disable=debug,
    )
    with progress:
        task_id = progress.add_task(escape(actions[0].name), total=total)
        for action in actions:
            progress.update(task_id, description=escape(action.name))
            try:
                with _paused(progress, action.interactive and not debug):
                    action.cmd()
            except Exception:
                return False
            progress.console.print(_done_line(action.name))
            progress.advance(task_id)
    console.print(Padding(f"Done! Ran {total} actions.", (1, 2)))
    return True


def run_action(action: Action, debug: bool = False) -> bool:
    """Run a single action behind a spinner; return True on success."""
    _acquire_sudo()
    console = Console(highlight=False)
    show_spinner = not debug and not action.interactive
    status = (
        console.status(escape(action.name), spinner="dots", spinner_style=_SPINNER_STYLE)
        if show_spinner
        else contextlib.nullcontext()
    )
    try:
        with status:
            action.cmd()
    except Exception as exc:
        tools.error(f"Error running {action.name}: {exc}")
        return False
    console.print(_done_line(action.name))
    return True