"""Shell command execution and file operations with backup support."""

from __future__ import annotations

import subprocess

from dotsetup import tools

IGNORE_MARKER = "{ignore}"


class CommandFailed(Exception):
    """A shell command exited unsuccessfully."""

    def __init__(self, command: str, returncode: int, stdout: str = "", stderr: str = ""):
        super().__init__(f"command {command!r} failed with exit status {returncode}")
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def join_command(command: str) -> str:
    """Turn ``a && b`` chains into ``a; b; `` so every part runs."""
    if " && " not in command:
        return command
    return "".join(part + "; " for part in command.split(" && "))


def run(command: str, ignore: bool = False, debug: bool = False) -> tuple[str, str]:
    """Run ``command`` with bash and return its captured (stdout, stderr).

    In debug mode the command uses the terminal and nothing is captured.
    With ``ignore`` (or an ``{ignore}`` marker) failures are not reported.
    """
    if IGNORE_MARKER in command:
        command = command.replace(IGNORE_MARKER, "")
        ignore = True
    argv = ["/bin/bash", "-c", join_command(command)]
    if debug:
        result = subprocess.run(argv, check=False)
        if result.returncode != 0:
            raise CommandFailed(command, result.returncode)
        return "", ""
    if ignore:
        subprocess.run(argv, capture_output=True, check=False)
        return "", ""
    result = subprocess.run(argv, capture_output=True, text=True, check=False)
    if result.returncode != 0:
        raise CommandFailed(command, result.returncode, result.stdout, result.stderr)
    return result.stdout, result.stderr


def _run_reported(command: str) -> None:
    try:
        run(command)
    except CommandFailed as exc:
        tools.command_error(command, exc, exc.stdout, exc.stderr)
        raise


def _run_with_sudo_fallback(command: str) -> None:
    try:
        run(command)
    except CommandFailed:
        _run_reported("sudo " + command)


def pkg_install(installer: str, packages: str, debug: bool = False) -> None:
    """Install ``packages`` with the configured installer command."""
    command = installer + " " + packages
    try:
        run(command, debug=debug)
    except CommandFailed as exc:
        tools.command_error(command, exc, exc.stdout, exc.stderr)
        raise


def _target(origin: str, destination: str) -> str:
    filename = origin.split("/")[-1]
    if destination.endswith("/"):
        return destination + filename
    return destination + "/" + filename


def _prepare_destination(target: str, backup_existing: bool, what: str) -> bool:
    """Return True if the operation should go ahead."""
    if not tools.check_exist(target):
        return True
    if not backup_existing:
        return False
    try:
        backup(target)
    except Exception:
        tools.error(f"Could not backup {what}")
        raise
    return True


def _transfer(verb: str, shell: str, origin: str, destination: str, backup_existing: bool, what: str) -> None:
    if not tools.check_exist(origin):
        message = f"{verb} Origin {origin} does not exist"
        tools.error(message)
        raise FileNotFoundError(message)
    if not _prepare_destination(_target(origin, destination), backup_existing, what):
        return
    _run_with_sudo_fallback(f"{shell} {origin} {destination}")


def ln(origin: str, destination: str, backup: bool = True) -> None:
    """Symlink ``origin`` into ``destination``, backing up what is in the way."""
    _transfer("Linking", "ln -s", origin, destination, backup, "directory")


def cp(origin: str, destination: str, backup: bool = True) -> None:
    """Copy ``origin`` into ``destination`` recursively."""
    _transfer("Copying", "cp -r", origin, destination, backup, "file or directory")


def mv(origin: str, destination: str, backup: bool = True) -> None:
    """Move ``origin`` into ``destination``."""
    _transfer("Moving", "mv -f", origin, destination, backup, "file or directory")


def mkdir(path: str, backup: bool = False) -> None:
    """Create a directory; an existing one is kept or backed up first."""
    if tools.check_exist(path):
        if not backup:
            return
        try:
            globals_backup = _backup
            globals_backup(path)
        except Exception:
            tools.error("Could not backup directory")
            raise
    _run_reported("mkdir " + path)


def backup(path: str) -> None:
    """Move ``path`` into ``~/.old``, replacing an earlier backup of it."""
    _backup(path)


def _backup(path: str) -> None:
    if not tools.check_exist(path):
        # a dangling link or similar leftover: remove it
        command = "sudo rm -rf " + path.removesuffix("/")
        try:
            run(command)
        except CommandFailed as exc:
            tools.command_error(command, exc, exc.stdout, exc.stderr)
        return
    old_dir = tools.get_home_dir() + "/.old/"
    if not tools.check_exist(old_dir):
        try:
            mkdir(old_dir, False)
        except Exception:
            tools.error("Could not create .old Directory")
            raise
    filename = path.split("/")[-1]
    previous = old_dir + "/" + filename
    if tools.check_exist(previous):
        _run_reported("rm -rf " + previous)
    _run_with_sudo_fallback("mv " + path + " " + old_dir)