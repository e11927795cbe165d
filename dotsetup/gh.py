"""GitHub CLI setup, repository cloning and update checks."""

from __future__ import annotations

import json
import subprocess
import sys

from dotsetup import command, prompts, runner, tools

ANYCONFIG_DIR = "/opt/anyconfig"
ANYCONFIG_UPDATE_FLAG = "/tmp/anyconfig_update"
REPO_UPDATE_FLAG = "/tmp/repo_update"
GITHUB_CLI_SCRIPT = ANYCONFIG_DIR + "/etc/github-cli.sh"


def _install_action(name: str, shell: str) -> runner.Action:
    return runner.Action(name, lambda: command.run(shell))


def configure() -> None:
    """Make sure the GitHub CLI is installed and logged in."""
    if not tools.command_exists("gh"):
        os_type = tools.get_os()
        installer = tools.get_installer()
        if os_type == "arch":
            runner.run_action(
                _install_action("Installing github-cli", installer + "github-cli git openssh"),
                False,
            )
        elif os_type == "debian":
            runner.run_actions(
                [
                    _install_action("Installing git and ssh", installer + "git openssh-client"),
                    _install_action("Installing github-cli", f"sudo bash {GITHUB_CLI_SCRIPT}"),
                ],
                False,
            )
    try:
        command.run("gh auth status")
    except command.CommandFailed:
        try:
            command.run("gh auth login", debug=True)
        except command.CommandFailed as exc:
            tools.error(exc)
            raise


def create() -> None:
    """Create a new GitHub repository interactively."""
    try:
        command.run("gh repo create", debug=True)
    except command.CommandFailed as exc:
        tools.error(exc)
        raise


def clone() -> str:
    """Let the user pick one of their repositories, clone it and return its path."""
    repos = get_repos()
    name = prompts.select("Select Repository:", repos, 10)
    path = prompts.text_input("Select Directory to clone into:", "path")
    target = f"{path}/{name}"
    try:
        command.run(f"gh repo clone {name} {target}", debug=True)
    except command.CommandFailed as exc:
        tools.error(exc)
        raise
    return target


def parse_repo_list(output: str) -> list[str]:
    """Extract repository names from ``gh repo list --json name`` output."""
    try:
        data = json.loads(output)
    except (json.JSONDecodeError, TypeError):
        return []
    if not isinstance(data, list):
        return []
    return [str(item.get("name", "")) for item in data if isinstance(item, dict)]


def get_repos() -> list[str]:
    """Return the names of the logged-in user's repositories."""
    try:
        result = subprocess.run(
            ["gh", "repo", "list", "--json", "name"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return []
    return parse_repo_list(result.stdout or "")


def _check_update(repo: str, flag: str) -> None:
    if tools.check_exist(flag):
        return
    command.run(f"git -C {repo} remote update", ignore=True)
    try:
        stdout, _ = command.run(f"cd {repo} && git status")
    except command.CommandFailed:
        return
    if "behind" not in stdout:
        return
    try:
        command.run("touch " + flag)
    except command.CommandFailed:
        tools.error("Could not create file")


def check_anyconfig_update() -> None:
    """Leave a flag file behind if the tool's own checkout is behind its remote."""
    _check_update(ANYCONFIG_DIR, ANYCONFIG_UPDATE_FLAG)


def check_repo_update(repo: str) -> None:
    """Leave a flag file behind if the dotfiles repository is behind its remote."""
    _check_update(repo, REPO_UPDATE_FLAG)


def _reported_action(name: str, shell: str) -> runner.Action:
    def execute() -> None:
        try:
            command.run(shell)
        except command.CommandFailed as exc:
            tools.command_error(shell, exc, exc.stdout, exc.stderr)
            raise

    return runner.Action(name, execute)


def _run_step(name: str, shell: str) -> None:
    if not runner.run_action(_reported_action(name, shell), False):
        raise RuntimeError(f"{name} failed")


def update_repo(repo: str) -> None:
    """Pull the latest commits of the dotfiles repository."""
    _run_step("Pulling latest commits", f"cd {repo} && git pull")
    command.run("rm -f " + REPO_UPDATE_FLAG, ignore=True)


def update_anyconfig() -> None:
    """Pull the tool's own checkout and reinstall it."""
    _run_step("Pulling latest commits", f"cd {ANYCONFIG_DIR} && git pull")
    _run_step(
        "Building anyconfig",
        f"cd {ANYCONFIG_DIR} && {sys.executable} -m pip install --quiet .",
    )
    command.run("rm -f " + ANYCONFIG_UPDATE_FLAG, ignore=True)