"""Line-based interactive prompts: choices, free text and directory picking."""

from __future__ import annotations

import re
from pathlib import Path

from dotsetup import tools

DEFAULT_PAGE_SIZE = 7
CHAR_LIMIT = 156


def _ask(prompt: str = "> ") -> str | None:
    """Read one answer; None when input ends or is interrupted."""
    try:
        return input(prompt)
    except (EOFError, KeyboardInterrupt):
        return None


def _parse_choice(answer: str, options: list[str]) -> int | None:
    answer = answer.strip()
    if not answer:
        return 0
    if answer.isdigit():
        number = int(answer)
        return number - 1 if 1 <= number <= len(options) else None
    if answer in options:
        return options.index(answer)
    return None


def _parse_multi(answer: str, count: int) -> list[int] | None:
    chosen: set[int] = set()
    for token in filter(None, re.split(r"[,\s]+", answer.strip())):
        match = re.fullmatch(r"(\d+)(?:-(\d+))?", token)
        if match is None:
            return None
        low = int(match.group(1))
        high = int(match.group(2) or low)
        if low > high or low < 1 or high > count:
            return None
        chosen.update(range(low - 1, high))
    return sorted(chosen)


def select(message: str, options: list[str], page_size: int = DEFAULT_PAGE_SIZE) -> str:
    """Ask for one of ``options``; Enter picks the first, end of input gives ''."""
    if not options:
        return ""
    page_size = max(1, page_size)
    pages = (len(options) + page_size - 1) // page_size
    page = 0
    while True:
        print(f"{tools.style(2, True, '?')} {message}")
        start = page * page_size
        for number, option in enumerate(options[start : start + page_size], start + 1):
            print(f"  {number}) {option}")
        if pages > 1:
            print(f"  (page {page + 1}/{pages}, n/p to move)")
        answer = _ask()
        if answer is None:
            return ""
        if pages > 1 and answer.strip() in ("n", "p"):
            step = 1 if answer.strip() == "n" else -1
            page = (page + step) % pages
            continue
        index = _parse_choice(answer, options)
        if index is not None:
            return options[index]
        tools.error("Invalid choice")


def multi_select(message: str, options: list[str]) -> list[str]:
    """Ask for any number of ``options`` by number or range, e.g. ``1,3-4``."""
    if not options:
        return []
    while True:
        print(f"{tools.style(2, True, '?')} {message}")
        for number, option in enumerate(options, 1):
            print(f"  {number}) {option}")
        print("  (numbers or ranges separated by commas, Enter for none)")
        answer = _ask()
        if answer is None:
            return []
        indices = _parse_multi(answer, len(options))
        if indices is not None:
            return [options[index] for index in indices]
        tools.error("Invalid choice")


def text_input(title: str, placeholder: str) -> str:
    """Ask for a line of text, at most ``CHAR_LIMIT`` characters long."""
    print(f"{tools.style(2, True, '? ')}{tools.style(4, True, title)}")
    answer = _ask(f"({placeholder}) > ")
    value = (answer or "")[:CHAR_LIMIT]
    print(f"{tools.style(2, True, '! ')}{tools.style(4, True, 'Filename: ')}{value}")
    return value


def file_picker(message: str, start_dir: str | None = None) -> str:
    """Browse directories and return the one selected with ``q``.

    Browsing starts at ``start_dir`` or, without one, the home directory.
    Ending input aborts and gives ''.
    """
    current = Path(start_dir).expanduser() if start_dir else Path(tools.get_home_dir())
    while True:
        dirs = [name for name in tools.get_dirs(current) if not name.startswith(".")]
        print(f"\n  {message} {current}\n")
        for number, name in enumerate(dirs, 1):
            print(f"  {number}) {name}/")
        print("\n  number/name: into dir   ..: parent dir   q: select")
        answer = _ask()
        if answer is None:
            return ""
        answer = answer.strip()
        if answer == "q":
            return str(current)
        if answer in ("..", "h"):
            current = current.parent
        elif answer.isdigit() and 1 <= int(answer) <= len(dirs):
            current = current / dirs[int(answer) - 1]
        elif answer in dirs:
            current = current / answer
        elif answer:
            tools.error(f"No such directory: {answer}")