import os
from types import SimpleNamespace

import pytest

from followtail.status import Status, classify, identity_of, probe


def _st(ino=1, dev=7, size=0, mtime_ns=1_000):
    return SimpleNamespace(st_ino=ino, st_dev=dev, st_size=size, st_mtime_ns=mtime_ns)


def test_missing_path_is_moved():
    status, mtime = classify(_st(), None, 0, 1_000)
    assert status is Status.MOVED
    assert mtime == 1_000


def test_different_identity_is_moved_even_with_same_size():
    opened = _st(ino=1, size=10)
    current = _st(ino=2, size=10)
    assert classify(opened, current, 10, 1_000).status is Status.MOVED
    # same inode on another device is another file too
    assert classify(opened, _st(ino=1, dev=8, size=10), 10, 1_000).status is Status.MOVED


def test_no_change():
    res = classify(_st(size=5), _st(size=5, mtime_ns=1_000), 5, 1_000)
    assert res.status is Status.NO_CHANGE
    assert res.mtime_ns == 1_000


def test_older_mtime_is_no_change():
    res = classify(_st(size=5), _st(size=5, mtime_ns=900), 5, 1_000)
    assert res.status is Status.NO_CHANGE
    assert res.mtime_ns == 1_000


def test_appended_updates_mtime():
    res = classify(_st(size=5), _st(size=9, mtime_ns=2_000), 5, 1_000)
    assert res.status is Status.APPENDED
    assert res.mtime_ns == 2_000


def test_same_size_rewritten_is_truncated():
    res = classify(_st(size=5), _st(size=5, mtime_ns=2_000), 5, 1_000)
    assert res.status is Status.TRUNCATED
    assert res.mtime_ns == 2_000


def test_shrunk_is_truncated():
    res = classify(_st(size=5), _st(size=2, mtime_ns=1_500), 5, 1_000)
    assert res.status is Status.TRUNCATED
    assert res.mtime_ns == 1_500


def test_probe(tmp_path):
    p = tmp_path / "a.log"
    assert probe(str(p)) is None
    p.write_bytes(b"abc")
    st = probe(str(p))
    assert st is not None and st.st_size == 3
    assert identity_of(st) == (st.st_dev, st.st_ino)


@pytest.mark.skipif(os.name == "nt", reason="POSIX error semantics")
def test_probe_surfaces_other_errors(tmp_path):
    f = tmp_path / "plain"
    f.write_bytes(b"")
    # a path "through" a regular file is not a missing file
    with pytest.raises(NotADirectoryError):
        probe(str(f / "child.log"))
