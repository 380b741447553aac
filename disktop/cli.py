"""
Console front end.

One-shot::

    disktop --path ~/Downloads --mode dirs --count 15 --older-than 2024-01-01

Interactive (asks for path, mode, count and cutoff, then offers another scan
with the same mode preselected)::

    disktop --interactive
"""
from __future__ import annotations
import argparse
import logging
import os
import sys
import time
from typing import Callable, List, Optional, TextIO, Tuple

from . import __version__
from .models import ScanMode, ScanRequest, ScanResult
from .report import export, summary_lines
from .scanner import InvalidRootError, ProgressCb, scan, validate_root
from .utils import format_size, parse_timestamp, reveal_in_file_manager

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 20
SECONDS_PER_DAY = 86400

Ask = Callable[[str], str]
Say = Callable[[str], None]


def setup_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> None:
    root = logging.getLogger("disktop")
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _positive_int(text: str) -> int:
    try:
        n = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def _date(text: str) -> float:
    try:
        return parse_timestamp(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="disktop",
        description="Report the largest files or the largest non-nested folders under a directory.",
        epilog="Examples:\n"
               "  disktop --path ~/Downloads --count 50\n"
               "  disktop --path /data --mode dirs --older-than 2024-01-01 --output reports\n"
               "  disktop --interactive",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument("--path", "-p", type=str, default=".",
                        help="Directory to scan (default: current directory).")
    parser.add_argument("--mode", "-m", choices=[m.value for m in ScanMode], default=ScanMode.FILES.value,
                        help="'files' for largest files, 'dirs' for largest folders (default: files).")
    parser.add_argument("--count", "-n", type=_positive_int, default=DEFAULT_COUNT,
                        help=f"Number of results (default: {DEFAULT_COUNT}).")
    age = parser.add_mutually_exclusive_group()
    age.add_argument("--older-than", type=_date, default=None, metavar="DATE",
                     help="Only entries last modified on or before DATE (YYYY-MM-DD[ HH:MM:SS]).")
    age.add_argument("--days", type=_positive_int, default=None,
                     help="Only entries not modified during the last N days.")
    parser.add_argument("--output", "-o", type=str, default=".",
                        help="Folder for the CSV report and access-denied log (default: current directory).")
    parser.add_argument("--no-export", action="store_true",
                        help="Print the results only, write no files.")
    parser.add_argument("--open", action="store_true",
                        help="Open the report folder in the file manager afterwards.")
    parser.add_argument("--follow-symlinks", action="store_true",
                        help="Descend into symbolic links.")
    parser.add_argument("--interactive", "-i", action="store_true",
                        help="Ask for the scan parameters, and offer to scan again.")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log every skipped path.")
    parser.add_argument("--version", action="version", version=f"disktop {__version__}")
    return parser


def console_progress(stream: TextIO) -> Optional[ProgressCb]:
    if not stream.isatty():
        return None

    def prog(cur: str, files: int, dirs: int, bytes_scanned: int):
        cur_show = cur if len(cur) <= 60 else "..." + cur[-57:]
        stream.write(f"\r{files} files | {dirs} folders | {format_size(bytes_scanned)} | {cur_show:<60}")
        stream.flush()

    return prog


def run_scan(request: ScanRequest,
             out_dir: Optional[str],
             say: Say = print,
             progress: Optional[ProgressCb] = None) -> Tuple[ScanResult, Optional[Tuple[str, str]]]:
    result = scan(request, progress=progress)
    if progress:
        sys.stderr.write("\n")
    for line in summary_lines(result):
        say(line)
    written = None
    if out_dir is not None:
        written = export(result, out_dir)
        say(f"Report: {written[0]}")
        say(f"Access log: {written[1]}")
    return result, written


def _yes(answer: str) -> bool:
    return answer.strip().lower() in ("y", "yes")


def _ask_root(ask: Ask, say: Say) -> Optional[str]:
    while True:
        text = ask("Directory to scan (empty to quit): ").strip()
        if not text:
            return None
        try:
            return validate_root(text)
        except InvalidRootError as e:
            say(str(e))


def _ask_mode(ask: Ask, say: Say, current: ScanMode) -> ScanMode:
    while True:
        text = ask(f"Scan [f]iles or [d]irectories? [{current.value}]: ").strip().lower()
        if not text:
            return current
        if text in ("f", "file", "files"):
            return ScanMode.FILES
        if text in ("d", "dir", "dirs", "directories"):
            return ScanMode.DIRECTORIES
        say("Please answer 'f' or 'd'.")


def _ask_count(ask: Ask, say: Say, current: int) -> int:
    while True:
        text = ask(f"How many results? [{current}]: ").strip()
        if not text:
            return current
        try:
            return _positive_int(text)
        except argparse.ArgumentTypeError as e:
            say(str(e))


def _ask_threshold(ask: Ask, say: Say) -> Optional[float]:
    while True:
        text = ask("Only modified on or before (YYYY-MM-DD, empty for no filter): ").strip()
        if not text:
            return None
        try:
            return parse_timestamp(text)
        except ValueError as e:
            say(str(e))


def interactive(out_dir: Optional[str],
                ask: Ask = input,
                say: Say = print,
                mode: ScanMode = ScanMode.FILES,
                count: int = DEFAULT_COUNT,
                follow_symlinks: bool = False,
                progress: Optional[ProgressCb] = None) -> int:
    try:
        while True:
            root = _ask_root(ask, say)
            if root is None:
                return 0
            mode = _ask_mode(ask, say, mode)
            count = _ask_count(ask, say, count)
            threshold = _ask_threshold(ask, say)

            request = ScanRequest(root=root, mode=mode, count=count,
                                  threshold=threshold, follow_symlinks=follow_symlinks)
            try:
                _, written = run_scan(request, out_dir, say=say, progress=progress)
            except InvalidRootError as e:
                # root vanished between the prompt and the scan
                say(str(e))
                continue

            if written and _yes(ask("Open the report folder? [y/N]: ")):
                if not reveal_in_file_manager(written[0]):
                    say("Could not open the file manager.")
            if not _yes(ask("Scan again? [y/N]: ")):
                return 0
    except EOFError:
        say("")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    logger.debug("Arguments: %s", vars(args))

    out_dir = None if args.no_export else os.path.abspath(os.path.expanduser(args.output))
    progress = console_progress(sys.stderr)

    if args.interactive:
        return interactive(out_dir, mode=ScanMode(args.mode), count=args.count,
                           follow_symlinks=args.follow_symlinks, progress=progress)

    threshold = args.older_than
    if args.days is not None:
        threshold = time.time() - args.days * SECONDS_PER_DAY

    request = ScanRequest(root=args.path, mode=ScanMode(args.mode), count=args.count,
                          threshold=threshold, follow_symlinks=args.follow_symlinks)
    try:
        _, written = run_scan(request, out_dir, progress=progress)
    except InvalidRootError as e:
        print(f"[!] {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("\n[!] Cancelled", file=sys.stderr)
        return 130

    if args.open and written:
        reveal_in_file_manager(written[0])
    return 0


if __name__ == "__main__":
    sys.exit(main())
