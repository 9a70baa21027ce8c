import json

from doot.symlinks import SymlinkCollection, format_installed


def test_empty_collection():
    sc = SymlinkCollection()
    assert len(sc) == 0
    assert sc.items() == []
    assert sc.print_list() == ""
    assert sc.to_json() == "{}"
    assert sc.get("/some/path") is None


def test_collection_with_entries():
    sc = SymlinkCollection()
    sc.add("/some/path", "/some/target")
    sc.add("/another/path", "/another/target")
    assert len(sc) == 2
    assert dict(sc.items()) == {
        "/some/path": "/some/target",
        "/another/path": "/another/target",
    }
    assert sc.get("/some/path") == "/some/target"
    assert sc.print_list() == "/another/path -> /another/target\n/some/path -> /some/target\n"
    assert sc.to_json() == '{"/another/path":"/another/target","/some/path":"/some/target"}'


def test_iteration_is_sorted_and_remove_works():
    sc = SymlinkCollection({"/b": "/tb", "/a": "/ta"})
    assert list(sc) == ["/a", "/b"]
    sc.remove("/a")
    assert list(sc) == ["/b"]
    assert "/a" not in sc
    sc.remove("/missing")
    assert len(sc) == 1


def test_json_round_trip():
    sc = SymlinkCollection({"/x": "/dots/x", "/y": "/dots/y"})
    assert SymlinkCollection(json.loads(sc.to_json())) == sc


def test_format_installed_selects_format():
    sc = SymlinkCollection({"/some/path": "/some/target"})
    assert format_installed(sc, True) == sc.to_json()
    assert format_installed(sc, False) == "/some/path -> /some/target\n"