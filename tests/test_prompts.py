import io

import pytest

from dotsetup.prompts import CHAR_LIMIT, file_picker, multi_select, select, text_input

OPTIONS = ["alpha", "beta", "gamma", "delta", "epsilon"]


@pytest.fixture
def feed(monkeypatch):
    def _feed(text):
        monkeypatch.setattr("sys.stdin", io.StringIO(text))

    return _feed


def test_select_by_number(feed):
    feed("2\n")
    assert select("Pick", OPTIONS, 7) == "beta"


def test_select_by_text(feed):
    feed("gamma\n")
    assert select("Pick", OPTIONS, 7) == "gamma"


def test_select_enter_picks_first(feed):
    feed("\n")
    assert select("Pick", OPTIONS, 7) == OPTIONS[0]


def test_select_retries_after_invalid(feed):
    feed("99\nnope\n3\n")
    assert select("Pick", OPTIONS, 7) == "gamma"


def test_select_end_of_input_gives_empty(feed):
    feed("")
    assert select("Pick", OPTIONS, 7) == ""


def test_select_with_pages(feed, capsys):
    feed("n\n4\n")
    assert select("Pick", OPTIONS, 2) == "delta"
    out = capsys.readouterr().out
    assert "3) gamma" in out


def test_select_no_options(feed):
    feed("1\n")
    assert select("Pick", [], 7) == ""


def test_multi_select_list(feed):
    feed("1,3\n")
    assert multi_select("Pick", OPTIONS) == ["alpha", "gamma"]


def test_multi_select_keeps_option_order(feed):
    feed("5 2 2\n")
    assert multi_select("Pick", OPTIONS) == ["beta", "epsilon"]


def test_multi_select_range(feed):
    feed("2-4\n")
    assert multi_select("Pick", OPTIONS) == OPTIONS[1:4]


def test_multi_select_empty_answer(feed):
    feed("\n")
    assert multi_select("Pick", OPTIONS) == []


def test_multi_select_retries_after_invalid(feed):
    feed("9\n2\n")
    assert multi_select("Pick", OPTIONS) == ["beta"]


def test_text_input_returns_value(feed):
    feed("mytask\n")
    assert text_input("Name of Task:", "filename") == "mytask"


def test_text_input_truncates(feed):
    feed("x" * (CHAR_LIMIT + 40) + "\n")
    value = text_input("Name of Task:", "filename")
    assert value == "x" * CHAR_LIMIT


def test_text_input_end_of_input(feed):
    feed("")
    assert text_input("Name of Task:", "filename") == ""


@pytest.fixture
def tree(tmp_path):
    for name in ("alpha", "beta", ".hidden", "alpha/inner"):
        (tmp_path / name).mkdir()
    (tmp_path / "file.txt").write_text("x")
    return tmp_path


def test_file_picker_select_start(feed, tree):
    feed("q\n")
    assert file_picker("Select Repository:", str(tree)) == str(tree)


def test_file_picker_enter_by_name(feed, tree):
    feed("alpha\ninner\nq\n")
    assert file_picker("Select Repository:", str(tree)) == str(tree / "alpha" / "inner")


def test_file_picker_enter_by_number_skips_hidden(feed, tree):
    feed("2\nq\n")
    assert file_picker("Select Repository:", str(tree)) == str(tree / "beta")


def test_file_picker_parent(feed, tree):
    feed("alpha\n..\nq\n")
    assert file_picker("Select Repository:", str(tree)) == str(tree)


def test_file_picker_ignores_unknown(feed, tree):
    feed("file.txt\nq\n")
    assert file_picker("Select Repository:", str(tree)) == str(tree)


def test_file_picker_abort(feed, tree):
    feed("alpha\n")
    assert file_picker("Select Repository:", str(tree)) == ""