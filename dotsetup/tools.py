"""System probing helpers and terminal message output."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path

_RESET = "\033[0m"

DEBIAN_INSTALLER = "sudo apt update && sudo apt install -y "
ARCH_INSTALLER = "sudo pacman --needed --noconfirm -Sy "


def command_exists(cmd: str) -> bool:
    """Return True if ``cmd`` can be found on the PATH."""
    return shutil.which(cmd) is not None


def check_exist(path: str | os.PathLike) -> bool:
    """Return True unless ``path`` definitely does not exist."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def get_os() -> str:
    """Detect the distribution family from the available package manager."""
    if command_exists("apt"):
        return "debian"
    if command_exists("pacman"):
        return "arch"
    return "?"


def get_installer() -> str:
    """Return the install command prefix for the local package manager."""
    installer = ""
    if command_exists("apt"):
        installer = DEBIAN_INSTALLER
    if command_exists("pacman"):
        installer = ARCH_INSTALLER
    return installer


def get_user() -> str:
    """Return the name of the user running the process."""
    try:
        import pwd

        return pwd.getpwuid(os.getuid()).pw_name
    except (ImportError, KeyError, AttributeError):
        import getpass

        return getpass.getuser()


def get_home_dir() -> str:
    """Return the home directory of the current user."""
    try:
        return str(Path.home())
    except RuntimeError as exc:
        raise RuntimeError(f"Could not get HomeDir: {exc}") from exc


def get_dirs(location: str | os.PathLike) -> list[str]:
    """Return the sorted names of the directories directly inside ``location``."""
    try:
        entries = sorted(os.scandir(location), key=lambda entry: entry.name)
    except OSError:
        return []
    return [entry.name for entry in entries if entry.is_dir()]


def get_cpu() -> str:
    """Detect the CPU architecture reported by ``lscpu``."""
    if not command_exists("lscpu"):
        raise RuntimeError("Could not detect cpu architecture")
    result = subprocess.run(["lscpu"], capture_output=True, text=True, check=False)
    output = result.stdout or ""
    if "x86_64" in output:
        return "x86_64"
    if "aarch64" in output:
        return "aarch64"
    return ""


def style(color: int, bold: bool, text: str) -> str:
    """Wrap ``text`` in ANSI codes; colour 0 leaves the foreground unchanged."""
    codes = []
    if bold:
        codes.append("1")
    if 1 <= color <= 7:
        codes.append(str(30 + color))
    if not codes:
        return text
    return f"\033[{';'.join(codes)}m{text}{_RESET}"


def error_string(message: object) -> str:
    """Return ``message`` styled as an error."""
    return style(1, True, str(message))


def error(message: object) -> None:
    """Print an error message to standard error."""
    print(error_string(message), file=sys.stderr)


def info(message: object) -> None:
    """Print an informational message."""
    print(style(4, True, "> ") + str(message))


def command_error(command: str, err: object, stdout: str, stderr: str) -> None:
    """Report a failed shell command together with its captured output."""
    error(f"Error while running: {command}")
    print(f"  {err}", file=sys.stderr)
    if stdout:
        print(style(3, True, "stdout:"), file=sys.stderr)
        print(stdout.rstrip("\n"), file=sys.stderr)
    if stderr:
        print(style(3, True, "stderr:"), file=sys.stderr)
        print(stderr.rstrip("\n"), file=sys.stderr)