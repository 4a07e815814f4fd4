import argparse
import logging
import sys
import threading
from typing import TYPE_CHECKING, List, Optional

from . import __version__
from .config import TailConfig
from .errors import TailTimeout
from .events import EventKind, TailEvent
from .logutil import set_verbosity
from .reader import TailReader
from .sinks import EventSink, JsonlSink, LoggingSink, MultiSink, RecentEventsSink

if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console as _Console
    from rich.text import Text as _Text
else:  # runtime optional import
    try:  # noqa: SIM105
        from rich.console import Console as _Console  # type: ignore
        from rich.text import Text as _Text  # type: ignore
    except Exception:  # noqa: BLE001
        _Console = None  # type: ignore
        _Text = None  # type: ignore

ConsoleType = Optional["_Console"]

COPY_BUFSIZE = 64 * 1024

_EVENT_COLORS = {
    EventKind.REOPENED: "green",
    EventKind.TRUNCATED: "yellow",
    EventKind.MOVED: "orange1",
    EventKind.EOF_TIMEOUT: "red",
    EventKind.TIMEOUT: "red",
}


class ConsoleSink:
    """Print transition diagnostics to stderr, colored when rich is available."""

    def __init__(self, console: ConsoleType = None) -> None:
        self.console = console

    def emit(self, event: TailEvent) -> None:
        if event.kind is EventKind.OPENED:
            return
        if self.console is not None:
            color = _EVENT_COLORS.get(event.kind, "white")
            self.console.print(_Text.assemble((event.kind.value, color), f": {event.path}"))
        else:
            print(f"[followtail] {event.kind.value}: {event.path}", file=sys.stderr, flush=True)

    def close(self) -> None:  # pragma: no cover - nothing to release
        pass


def _maybe_console(args: argparse.Namespace) -> ConsoleType:
    if getattr(args, "no_color", False):
        return None
    if _Console is None:
        return None
    return _Console(stderr=True)


def _positive_float(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if f <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value!r}")
    return f


def _non_negative_float(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if f < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {value!r}")
    return f


def build_sink(args: argparse.Namespace, recent: Optional[RecentEventsSink] = None) -> MultiSink:
    sinks: List[EventSink] = []
    if not getattr(args, "quiet", False):
        sinks.append(ConsoleSink(_maybe_console(args)))
    if getattr(args, "verbose", False):
        sinks.append(LoggingSink())
    if getattr(args, "jsonl", None):
        sinks.append(JsonlSink(args.jsonl))
    if recent is not None:
        sinks.append(recent)
    return MultiSink(sinks)


def _start_service(reader: TailReader, recent: RecentEventsSink, host: str, port: int) -> bool:  # pragma: no cover - integration feature
    try:
        import uvicorn
        from .service import build_app
    except Exception:  # noqa: BLE001
        print("--serve-port requires fastapi and uvicorn. Install with `pip install followtail[server]`.", file=sys.stderr)
        return False
    app = build_app(reader, recent)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level="warning"))
    t = threading.Thread(target=server.run, name="followtail-service", daemon=True)
    t.start()
    return True


def copy_stream(reader: TailReader, out) -> int:
    """Copy the reader to ``out`` until end of stream, flushing every chunk."""
    total = 0
    while True:
        chunk = reader.read(COPY_BUFSIZE)
        if not chunk:
            return total
        out.write(chunk)
        out.flush()
        total += len(chunk)


def cmd_follow(args: argparse.Namespace) -> int:
    if getattr(args, "verbose", False):
        set_verbosity(logging.INFO)
    cfg = TailConfig(poll=args.poll, eof_wait=args.eof_wait, timeout=args.timeout, from_end=args.from_end)
    recent = RecentEventsSink() if args.serve_port else None
    try:
        sink = build_sink(args, recent)
    except OSError as exc:
        print(f"[followtail] cannot open --jsonl file: {exc}", file=sys.stderr)
        return 1
    try:
        reader = TailReader(args.file, cfg, sink=sink)
    except OSError as exc:
        print(f"[followtail] {exc}", file=sys.stderr)
        sink.close()
        return 1

    if args.serve_port and not _start_service(reader, recent, args.host, args.serve_port):
        reader.close()
        sink.close()
        return 2

    try:
        with reader:
            copy_stream(reader, sys.stdout.buffer)
    except TailTimeout as exc:
        # the console sink has already reported it unless --quiet
        if getattr(args, "quiet", False):
            print(f"[followtail] {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:  # pragma: no cover - interactive
        return 130
    except OSError as exc:
        print(f"[followtail] read failed: {exc}", file=sys.stderr)
        return 1
    finally:
        sink.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="followtail",
        description="Print a file's growth to stdout, following truncation and rotation.",
    )
    parser.add_argument("--version", action="version", version=f"followtail {__version__}")
    parser.add_argument("file", help="Path of the file to follow")
    parser.add_argument(
        "--poll",
        type=_positive_float,
        default=TailConfig.poll,
        help=f"Seconds between change polls (default: {TailConfig.poll})",
    )
    parser.add_argument(
        "--eof-wait",
        type=_non_negative_float,
        default=TailConfig.eof_wait,
        help=f"Seconds to wait for a moved/deleted file to reappear before exiting (default: {TailConfig.eof_wait})",
    )
    parser.add_argument("--timeout", type=_positive_float, help="Give up (exit 1) after waiting this many seconds for new data")
    parser.add_argument("--from-end", action="store_true", help="Start at the end of the file instead of the beginning")
    parser.add_argument("--jsonl", help="Append transition events as JSON lines to this file")
    parser.add_argument("--no-color", action="store_true", help="Disable colorized diagnostics even if rich present")
    parser.add_argument("--quiet", action="store_true", help="Do not print transition diagnostics to stderr")
    parser.add_argument("--verbose", action="store_true", help="Also log transitions through the followtail logger")
    parser.add_argument("--serve-port", type=int, help="Serve reader status over HTTP on this port (requires followtail[server])")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --serve-port")
    parser.set_defaults(func=cmd_follow)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
