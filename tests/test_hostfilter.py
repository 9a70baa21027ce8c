import os
from unittest import mock

from doot.hostfilter import HostnameFilter, get_hostname, get_hostname_filter


def _sep(*parts):
    return os.sep.join(parts)


HOSTS = {"other_host1": "OTHER", "me": "HOST", "other_host2": "OTHER2"}


def test_other_hosts_and_doot_dir_are_ignored():
    hf = get_hostname_filter(HOSTS, "me")
    assert hf.is_ignored(_sep("OTHER", "file1"))
    assert hf.is_ignored(_sep("OTHER2", "other-ignored-file"))
    assert hf.is_ignored(_sep("doot", "config.toml"))


def test_own_host_and_regular_files_are_not_ignored():
    hf = get_hostname_filter(HOSTS, "me")
    assert not hf.is_ignored(_sep("HOST", "file1"))
    assert not hf.is_ignored("file1")
    assert not hf.is_ignored(_sep("somedir", "doot", "this_is_not_the_doot_dir"))


def test_host_specific_prefix_length():
    hf = get_hostname_filter(HOSTS, "me")
    prefix = "HOST" + os.sep
    assert hf.host_specific_prefix_len(prefix + "file1") == len(prefix)
    assert hf.host_specific_prefix_len("file1") is None
    assert hf.host_specific_prefix_len(_sep("OTHER", "file1")) is None


def test_unknown_host_has_no_specific_dir():
    hf = get_hostname_filter(HOSTS, "nobody")
    assert hf.host_specific_prefix is None
    assert hf.host_specific_prefix_len(_sep("HOST", "file1")) is None
    assert hf.is_ignored(_sep("HOST", "file1"))


def test_nested_host_dirs():
    hf = get_hostname_filter({"me": _sep("hosts", "host"), "x": _sep("hosts", "ignore")}, "me")
    path = _sep("hosts", "host", "file1")
    assert hf.host_specific_prefix_len(path) == len(_sep("hosts", "host") + os.sep)
    assert hf.is_ignored(_sep("hosts", "ignore", "ignore_me"))
    assert not hf.is_ignored(path)


def test_empty_filter_ignores_nothing():
    hf = HostnameFilter()
    assert not hf.is_ignored(_sep("doot", "x"))
    assert hf.host_specific_prefix_len("x") is None


def test_get_hostname_failure_returns_empty():
    with mock.patch("doot.hostfilter.socket.gethostname", side_effect=OSError("boom")):
        assert get_hostname() == ""


def test_filter_defaults_to_current_host():
    with mock.patch("doot.hostfilter.socket.gethostname", return_value="box"):
        hf = get_hostname_filter({"box": "BOXDIR"})
    assert hf.host_specific_prefix == "BOXDIR" + os.sep