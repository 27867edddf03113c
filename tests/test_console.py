import pytest

from stackmerge.console import (
    print_error,
    print_error_to_std_error,
    print_error_to_std_error_and_exit,
    print_error_verbose,
    print_info,
    print_info_verbose,
    print_message,
    print_message_verbose,
)


def test_error_to_stderr(capsys):
    print_error_to_std_error(ValueError("boom"))
    captured = capsys.readouterr()
    assert "boom" in captured.err
    assert captured.out == ""


def test_none_error_prints_nothing(capsys):
    print_error_to_std_error(None)
    print_error(None)
    captured = capsys.readouterr()
    assert captured.out == "" and captured.err == ""


def test_error_and_exit(capsys):
    with pytest.raises(SystemExit) as exc:
        print_error_to_std_error_and_exit(RuntimeError("fatal"))
    assert exc.value.code == 1
    assert "fatal" in capsys.readouterr().err


def test_error_and_exit_none_does_not_exit(capsys):
    print_error_to_std_error_and_exit(None)
    assert capsys.readouterr().err == ""


def test_print_error_stdout(capsys):
    print_error(ValueError("bad"))
    assert "bad" in capsys.readouterr().out


def test_verbose_switches(capsys):
    print_error_verbose(False, ValueError("hidden"))
    print_info_verbose(False, "hidden")
    print_message_verbose(False, "hidden")
    assert capsys.readouterr().out == ""
    print_error_verbose(True, ValueError("e1"))
    print_info_verbose(True, "i1")
    print_message_verbose(True, "m1")
    out = capsys.readouterr().out
    assert "e1" in out and "i1" in out and "m1" in out


def test_info_and_message(capsys):
    print_info("info text")
    print_message("plain text")
    out = capsys.readouterr().out
    assert "info text" in out
    assert out.endswith("plain text\n")