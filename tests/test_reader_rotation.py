import os
import threading
import time
from pathlib import Path

import pytest

from followtail import EventKind, TailConfig, TailReader
from followtail.sinks import RecentEventsSink

pytestmark = pytest.mark.skipif(os.name == "nt", reason="open files cannot be unlinked/renamed on Windows")


def _kinds(sink: RecentEventsSink):
    return [e.kind for e in sink.snapshot()]


def test_delete_and_recreate_within_budget(tmp_path):
    p = tmp_path / "app.log"
    p.write_bytes(b"old\n")
    sink = RecentEventsSink()
    with TailReader(str(p), TailConfig(poll=0.01, eof_wait=2.0, timeout=3.0), sink=sink) as r:
        assert r.read(100) == b"old\n"
        old_identity = r.identity

        p.unlink()
        p.write_bytes(b"fresh content\n")

        assert r.read(100) == b"fresh content\n"
        assert r.offset == len(b"fresh content\n")
        assert r.identity != old_identity
        assert not r.missing
        assert r.rotations == 1 and r.reopens == 1
    kinds = _kinds(sink)
    assert kinds.index(EventKind.MOVED) < kinds.index(EventKind.REOPENED)


def test_recreated_while_reader_waits(tmp_path):
    p = tmp_path / "app.log"
    p.write_bytes(b"")

    def rotate():
        p.unlink()
        time.sleep(0.1)
        p.write_bytes(b"second file\n")

    with TailReader(str(p), TailConfig(poll=0.01, eof_wait=2.0, timeout=3.0)) as r:
        t = threading.Timer(0.05, rotate)
        t.start()
        assert r.read(100) == b"second file\n"
        assert r.offset == len(b"second file\n")
        t.join()


def test_missing_beyond_budget_ends_stream(tmp_path):
    p = tmp_path / "app.log"
    p.write_bytes(b"data")
    sink = RecentEventsSink()
    with TailReader(str(p), TailConfig(poll=0.02, eof_wait=0.2), sink=sink) as r:
        assert r.read(100) == b"data"
        p.unlink()
        start = time.monotonic()
        assert r.read(100) == b""
        assert time.monotonic() - start >= 0.2
        assert r.missing
    assert _kinds(sink).count(EventKind.EOF_TIMEOUT) == 1


def test_rotation_drains_old_file_first(tmp_path):
    p = tmp_path / "app.log"
    rotated = tmp_path / "app.log.1"
    p.write_bytes(b"a\n")
    with TailReader(str(p), TailConfig(poll=0.01, eof_wait=2.0, timeout=3.0)) as r:
        assert r.read(100) == b"a\n"
        with p.open("ab") as h:
            h.write(b"b\n")
        os.replace(p, rotated)
        p.write_bytes(b"c\n")

        assert r.read(100) == b"b\n"
        assert r.read(100) == b"c\n"
        assert r.offset == 2


def test_rename_without_replacement_ends_stream(tmp_path):
    p = tmp_path / "app.log"
    p.write_bytes(b"x")
    with TailReader(str(p), TailConfig(poll=0.01, eof_wait=0.1)) as r:
        assert r.read(10) == b"x"
        os.replace(p, Path(tmp_path) / "moved.log")
        assert r.read(10) == b""
        # budget already spent: a later call ends the stream again without error
        assert r.read(10) == b""


def test_directory_at_path_is_fatal(tmp_path):
    p = tmp_path / "app.log"
    p.write_bytes(b"x")
    with TailReader(str(p), TailConfig(poll=0.01, eof_wait=2.0, timeout=2.0)) as r:
        assert r.read(10) == b"x"
        p.unlink()
        p.mkdir()
        with pytest.raises(IsADirectoryError):
            r.read(10)
        assert r.missing


def test_move_is_applied_before_sink_sees_it(tmp_path):
    class RaisingSink:
        def emit(self, event):
            if event.kind is EventKind.MOVED:
                raise RuntimeError("sink down")

        def close(self):
            pass

    p = tmp_path / "app.log"
    p.write_bytes(b"x")
    with TailReader(str(p), TailConfig(poll=0.01, eof_wait=2.0, timeout=2.0), sink=RaisingSink()) as r:
        assert r.read(10) == b"x"
        p.unlink()
        with pytest.raises(RuntimeError):
            r.read(10)
        assert r.missing
        assert r.rotations == 1
        p.write_bytes(b"next")
        assert r.read(10) == b"next"
