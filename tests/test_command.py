import os

import pytest

from dotsetup import command
from dotsetup.command import CommandFailed


def test_join_command_chain():
    assert command.join_command("a && b") == "a; b; "


def test_join_command_single():
    assert command.join_command("echo hi") == "echo hi"


def test_run_captures_output():
    assert command.run("echo hi") == ("hi\n", "")


def test_run_chain_runs_every_part():
    stdout, _ = command.run("false && echo after")
    assert stdout == "after\n"


def test_run_failure_raises_with_status():
    with pytest.raises(CommandFailed) as info:
        command.run("echo oops >&2; exit 3")
    assert info.value.returncode == 3
    assert info.value.stderr == "oops\n"


def test_run_ignore_marker_swallows_failure():
    assert command.run("{ignore}exit 3") == ("", "")


def test_run_ignore_flag_swallows_failure():
    assert command.run("exit 2", ignore=True) == ("", "")


def test_pkg_install_success(tmp_path):
    marker = tmp_path / "installed"
    command.pkg_install("touch", str(marker), False)
    assert marker.exists()


def test_pkg_install_failure_raises():
    with pytest.raises(CommandFailed):
        command.pkg_install("false", "vim", False)


def test_mkdir_creates_directory(tmp_path):
    target = tmp_path / "new"
    command.mkdir(str(target), False)
    assert target.is_dir()


def test_mkdir_existing_without_backup_keeps_content(tmp_path):
    target = tmp_path / "keep"
    target.mkdir()
    (target / "f").write_text("data")
    command.mkdir(str(target), False)
    assert (target / "f").read_text() == "data"


def test_mkdir_with_backup_moves_old_directory(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    target = tmp_path / "conf"
    target.mkdir()
    (target / "f").write_text("data")
    command.mkdir(str(target), True)
    assert target.is_dir()
    assert list(target.iterdir()) == []
    assert (home / ".old" / "conf" / "f").read_text() == "data"


def test_backup_replaces_previous_backup(tmp_path, monkeypatch):
    home = tmp_path / "home"
    (home / ".old" / "item").mkdir(parents=True)
    (home / ".old" / "item" / "stale").write_text("old")
    monkeypatch.setenv("HOME", str(home))
    item = tmp_path / "item"
    item.mkdir()
    (item / "fresh").write_text("new")
    command.backup(str(item))
    assert not item.exists()
    assert sorted(p.name for p in (home / ".old" / "item").iterdir()) == ["fresh"]


def test_cp_copies_into_destination(tmp_path):
    origin = tmp_path / "src.txt"
    origin.write_text("content")
    dest = tmp_path / "dest"
    dest.mkdir()
    command.cp(str(origin), str(dest), True)
    assert (dest / "src.txt").read_text() == "content"
    assert origin.exists()


def test_cp_missing_origin_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        command.cp(str(tmp_path / "nope"), str(tmp_path), True)


def test_cp_existing_target_without_backup_is_left_alone(tmp_path):
    origin = tmp_path / "src.txt"
    origin.write_text("new")
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "src.txt").write_text("old")
    command.cp(str(origin), str(dest) + "/", False)
    assert (dest / "src.txt").read_text() == "old"


def test_mv_moves_into_destination(tmp_path):
    origin = tmp_path / "src.txt"
    origin.write_text("content")
    dest = tmp_path / "dest"
    dest.mkdir()
    command.mv(str(origin), str(dest), True)
    assert not origin.exists()
    assert (dest / "src.txt").read_text() == "content"


def test_mv_missing_origin_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        command.mv(str(tmp_path / "nope"), str(tmp_path), True)


def test_ln_creates_symlink(tmp_path):
    origin = tmp_path / "dotfile"
    origin.write_text("x")
    dest = tmp_path / "dest"
    dest.mkdir()
    command.ln(str(origin), str(dest), True)
    link = dest / "dotfile"
    assert link.is_symlink()
    assert os.readlink(link) == str(origin)


def test_ln_backs_up_existing_target(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    origin = tmp_path / "dotfile"
    origin.write_text("repo")
    dest = tmp_path / "dest"
    dest.mkdir()
    (dest / "dotfile").write_text("local")
    command.ln(str(origin), str(dest), True)
    assert (dest / "dotfile").is_symlink()
    assert (home / ".old" / "dotfile").read_text() == "local"


def test_ln_missing_origin_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        command.ln(str(tmp_path / "nope"), str(tmp_path), True)