import io
from unittest import mock

from haclog.stacktrace import debug_break, print_stacktrace


def _inner_caller(stream):
    print_stacktrace(stream)


def test_print_stacktrace_innermost_first():
    direct = io.StringIO()
    print_stacktrace(direct)
    direct_lines = direct.getvalue().splitlines()
    assert direct_lines[0].startswith("#0 ")
    assert "test_print_stacktrace_innermost_first" in direct_lines[0]

    nested = io.StringIO()
    _inner_caller(nested)
    lines = nested.getvalue().splitlines()
    assert lines[0].startswith("#0 ")
    assert "_inner_caller" in lines[0]
    assert "test_print_stacktrace_innermost_first" in lines[1]


def test_print_stacktrace_numbers_are_sequential():
    buf = io.StringIO()
    print_stacktrace(buf)
    lines = buf.getvalue().splitlines()
    assert lines
    assert [line.split(" ", 1)[0] for line in lines] == [
        f"#{i}" for i in range(len(lines))
    ]


def test_print_stacktrace_defaults_to_stdout(capsys):
    print_stacktrace()
    out = capsys.readouterr().out
    assert out.startswith("#0 ")
    assert "test_print_stacktrace_defaults_to_stdout" in out


@mock.patch("os.abort")
def test_debug_break_prints_and_aborts(abort, capsys):
    debug_break()
    assert abort.call_count == 1
    out = capsys.readouterr().out
    assert "test_debug_break_prints_and_aborts" in out