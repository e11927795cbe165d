import shutil
import subprocess

import pytest

from dotsetup import config, tools


class FakeShell:
    def __init__(self):
        self.calls = []

    def __call__(self, argv, *args, **kwargs):
        cmd = argv[-1] if argv[0] == "/bin/bash" else " ".join(argv)
        self.calls.append(cmd)
        if argv[0] == "lscpu":
            return subprocess.CompletedProcess(argv, 0, "Architecture: x86_64\n", "")
        return subprocess.CompletedProcess(argv, 0, "", "")


@pytest.fixture
def debian_system(monkeypatch, tmp_path):
    found = {"apt", "lscpu", "sudo"}
    monkeypatch.setattr(shutil, "which", lambda name: "/usr/bin/" + name if name in found else None)
    shell = FakeShell()
    monkeypatch.setattr(subprocess, "run", shell)
    monkeypatch.setattr(config, "CONFIG_DIR", str(tmp_path))
    monkeypatch.setattr(config, "CONFIG_FILE", str(tmp_path / "anyconfig.yml"))
    return shell


def answer(monkeypatch, *values):
    answers = iter(values)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))


def test_installers_for_known_systems():
    assert config.installers_for("arch") == (
        "sudo pacman --needed --noconfirm -Sy ",
        "sudo pacman --noconfirm -R ",
    )
    assert config.installers_for("debian") == (
        "sudo apt update && sudo apt install -y ",
        "sudo apt remove -y ",
    )


def test_installers_for_unknown_system():
    with pytest.raises(ValueError):
        config.installers_for("?")


def test_dump_and_load_round_trip(tmp_path):
    original = config.FileConfig(
        os="debian",
        installer="sudo apt update && sudo apt install -y ",
        uninstaller="sudo apt remove -y ",
        repo="/home/user/dots",
        cpu="x86_64",
    )
    path = tmp_path / "anyconfig.yml"
    path.write_text(config.dump_file_config(original), encoding="utf-8")
    assert config.load_file_config(path) == original


def test_dump_keeps_field_order():
    text = config.dump_file_config(config.FileConfig(os="arch", repo="/r"))
    keys = [line.split(":")[0] for line in text.splitlines()]
    assert keys == ["os", "installer", "uninstaller", "repo", "cpu"]


def test_load_invalid_yaml_gives_empty(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("os: [unclosed", encoding="utf-8")
    assert config.load_file_config(path) == config.FileConfig()


def test_load_partial_and_missing(tmp_path):
    path = tmp_path / "partial.yml"
    path.write_text("os: arch\n", encoding="utf-8")
    assert config.load_file_config(path) == config.FileConfig(os="arch")
    assert config.load_file_config(tmp_path / "missing.yml") == config.FileConfig()


def test_from_file_config():
    stored = config.FileConfig(os="arch", installer="i", uninstaller="u", repo="/r", cpu="c")
    result = config.from_file_config(stored)
    assert (result.os, result.installer, result.uninstaller, result.repo, result.cpu) == (
        "arch", "i", "u", "/r", "c"
    )
    assert result.user == tools.get_user()
    assert result.home_dir == tools.get_home_dir()
    assert result.debug is False


def test_init_config_reads_existing_file(monkeypatch, tmp_path):
    path = tmp_path / "anyconfig.yml"
    stored = config.FileConfig(os="arch", repo=str(tmp_path))
    path.write_text(config.dump_file_config(stored), encoding="utf-8")
    monkeypatch.setattr(config, "CONFIG_FILE", str(path))
    result = config.init_config()
    assert result.repo == str(tmp_path)
    assert result.os == "arch"


def test_init_config_declined(monkeypatch, tmp_path):
    monkeypatch.setattr(config, "CONFIG_FILE", str(tmp_path / "none.yml"))
    answer(monkeypatch, "2")
    with pytest.raises(SystemExit) as info:
        config.init_config()
    assert info.value.code == 0


def test_create_config_exit(debian_system, monkeypatch):
    answer(monkeypatch, "5")
    with pytest.raises(SystemExit):
        config.create_config()


def test_create_config_manual_link(debian_system, monkeypatch, tmp_path):
    repo = tmp_path / "dots"
    repo.mkdir()
    answer(monkeypatch, "1", str(repo))
    result = config.create_config()
    assert result.os == "debian"
    assert result.cpu == "x86_64"
    assert result.repo == str(repo)
    assert config.installers_for("debian") == (result.installer, result.uninstaller)
    assert (repo / ".anyconfig").is_dir()
    moves = [call for call in debian_system.calls if call.startswith("sudo mv ")]
    assert len(moves) == 1
    temp_path, destination = moves[0].split()[2:]
    assert destination == str(tmp_path / "anyconfig.yml")
    try:
        assert config.load_file_config(temp_path) == result
    finally:
        shutil.os.remove(temp_path)


def test_create_config_empty_repo(debian_system, monkeypatch):
    answer(monkeypatch, "1", "")
    with pytest.raises(RuntimeError):
        config.create_config()