import os

from doot.changes import SHOW_LIMIT, format_changes, order_and_limit

HOME = os.path.join(os.sep, "home", "user")


def _home(name):
    return os.path.join(HOME, name)


def test_no_changes():
    assert format_changes([], [], HOME, False) == ["No changes made"]


def test_order_and_limit_sorts_and_truncates():
    paths = ["c", "a", "d", "b"]
    result = order_and_limit(paths, 2)
    assert result == sorted(paths)[:2]
    assert order_and_limit(paths, 10) == sorted(paths)


def test_added_lines_strip_home_and_sorted():
    lines = format_changes([_home("b"), _home("a")], [], HOME, False)
    assert lines == ["+ a", "+ b"]


def test_removed_lines_follow_added():
    lines = format_changes([_home("new")], [_home("old")], HOME, False)
    assert lines == ["+ new", "- old"]


def test_path_outside_home_kept_whole():
    outside = os.path.join(os.sep, "etc", "conf")
    assert format_changes([], [outside], HOME, False) == ["- " + outside]


def test_overflow_summary_line():
    names = [f"f{n}" for n in range(SHOW_LIMIT + 2)]
    lines = format_changes([_home(n) for n in names], [], HOME, False)
    assert len(lines) == SHOW_LIMIT + 1
    assert lines[:SHOW_LIMIT] == ["+ " + n for n in sorted(names)[:SHOW_LIMIT]]
    assert lines[-1] == "+ 2 more"


def test_color_wraps_lines():
    plain = format_changes([_home("a")], [_home("b")], HOME, False)
    colored = format_changes([_home("a")], [_home("b")], HOME, True)
    assert colored[0].startswith("\x1b[32m")
    assert all(p in c and c.endswith("\x1b[0m") for p, c in zip(plain, colored))