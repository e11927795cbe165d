"""Loading and interactive creation of the system configuration."""

from __future__ import annotations

import os
import tempfile
from dataclasses import asdict, dataclass, fields

import yaml

from dotsetup import command, gh, prompts, tools

CONFIG_DIR = "/etc/anyconfig"
CONFIG_FILE = CONFIG_DIR + "/anyconfig.yml"

_INSTALLERS = {
    "arch": ("sudo pacman --needed --noconfirm -Sy ", "sudo pacman --noconfirm -R "),
    "debian": ("sudo apt update && sudo apt install -y ", "sudo apt remove -y "),
}

_LINK_MANUAL = tools.style(3, False, "link manually") + " existing Repository"
_LINK_INTERACTIVE = tools.style(3, False, "link interactivly") + " existing Repository"
_CREATE = tools.style(3, False, "create") + " new Repository (needs github authentication)"
_CLONE = tools.style(3, False, "clone") + " existing Repository (needs github authentication)"
_EXIT = "exit"
_REPO_OPTIONS = [_LINK_MANUAL, _LINK_INTERACTIVE, _CREATE, _CLONE, _EXIT]


@dataclass
class FileConfig:
    """The settings stored in the configuration file."""

    os: str = ""
    installer: str = ""
    uninstaller: str = ""
    repo: str = ""
    cpu: str = ""


@dataclass
class AnyConfig:
    """The settings in effect for a run."""

    os: str = ""
    installer: str = ""
    uninstaller: str = ""
    repo: str = ""
    user: str = ""
    home_dir: str = ""
    debug: bool = False
    cpu: str = ""


_FILE_FIELDS = [f.name for f in fields(FileConfig)]


def installers_for(os_type: str) -> tuple[str, str]:
    """Return the (installer, uninstaller) command prefixes for ``os_type``."""
    try:
        return _INSTALLERS[os_type]
    except KeyError:
        raise ValueError("Did not detect OS") from None


def load_file_config(path: str | os.PathLike = CONFIG_FILE) -> FileConfig:
    """Read a configuration file; unreadable content yields empty settings."""
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError:
        text = ""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        tools.error(f"Error while reading config: {exc}")
        return FileConfig()
    if data is None:
        return FileConfig()
    if not isinstance(data, dict):
        tools.error("Error while reading config: top level is not a mapping")
        return FileConfig()
    values = {name: "" if data.get(name) is None else str(data[name]) for name in _FILE_FIELDS}
    return FileConfig(**values)


def dump_file_config(file_config: FileConfig) -> str:
    """Serialise ``file_config`` as YAML in field order."""
    return yaml.safe_dump(asdict(file_config), sort_keys=False, default_flow_style=False)


def from_file_config(file_config: FileConfig) -> AnyConfig:
    """Combine stored settings with the current user and home directory."""
    return AnyConfig(
        os=file_config.os,
        installer=file_config.installer,
        uninstaller=file_config.uninstaller,
        repo=file_config.repo,
        user=tools.get_user(),
        home_dir=tools.get_home_dir(),
        debug=False,
        cpu=file_config.cpu,
    )


def _choose_repo() -> str:
    answer = prompts.select("No dotfiles Repository configured, what next?", _REPO_OPTIONS)
    if answer == _EXIT:
        raise SystemExit(0)
    if answer == _LINK_MANUAL:
        return prompts.text_input("Path of Repository", "Path")
    if answer == _LINK_INTERACTIVE:
        return prompts.file_picker("Select Repository:", None)
    if answer == _CREATE:
        gh.configure()
        gh.create()
        return gh.clone()
    if answer == _CLONE:
        gh.configure()
        return gh.clone()
    return ""


def _install_config_file(file_config: FileConfig) -> None:
    try:
        fd, temp_path = tempfile.mkstemp(prefix="anyconfig", suffix=".yml")
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(dump_file_config(file_config))
        os.chmod(temp_path, 0o644)
    except OSError as exc:
        raise RuntimeError(f"Error while writing Config: {exc}") from exc
    shell = f"sudo mv {temp_path} {CONFIG_FILE}"
    try:
        command.run(shell)
    except command.CommandFailed as exc:
        tools.command_error(shell, exc, exc.stdout, exc.stderr)


def create_config() -> FileConfig:
    """Detect the system, ask for the dotfiles repository and write the config."""
    if not tools.check_exist(CONFIG_DIR):
        try:
            command.run("sudo mkdir " + CONFIG_DIR)
        except command.CommandFailed as exc:
            raise RuntimeError(f"Could not create {CONFIG_DIR}") from exc
    os_type = tools.get_os()
    cpu = tools.get_cpu()
    installer, uninstaller = installers_for(os_type)
    repo = _choose_repo()
    if not repo:
        raise RuntimeError("Error configuring Repo")
    marker = os.path.join(repo, ".anyconfig")
    if not tools.check_exist(marker):
        try:
            os.mkdir(marker)
        except OSError as exc:
            raise RuntimeError("Could not create .anyconfig directory") from exc
    file_config = FileConfig(
        os=os_type, installer=installer, uninstaller=uninstaller, repo=repo, cpu=cpu
    )
    _install_config_file(file_config)
    return file_config


def init_config() -> AnyConfig:
    """Load the configuration, offering to create it when there is none."""
    if tools.check_exist(CONFIG_FILE):
        return from_file_config(load_file_config(CONFIG_FILE))
    answer = prompts.select("No configuration found, want to create it now? ", ["Yes", "No"])
    if answer != "Yes":
        tools.error("Then go write it yourself!")
        raise SystemExit(0)
    if tools.get_user() != "root":
        try:
            command.run("sudo true", debug=True)
        except command.CommandFailed:
            pass
    return from_file_config(create_config())