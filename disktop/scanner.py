from __future__ import annotations
import logging
import os
import time
import stat as statmod
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Set, Tuple

from .models import (
    DirectoryAggregate, Entry, ReportRow, ScanIssue, ScanMode, ScanRequest, ScanResult
)
from .topk import TopFiles, passes_age, select_disjoint

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 0.10

# bytes_scanned can exceed 2GB: do not route it through an int32 Qt signal.
ProgressCb = Callable[[str, int, int, int], None]  # (current_path, files, dirs, bytes_scanned)
CancelCb = Callable[[], bool]


class InvalidRootError(ValueError):
    """Scan root is missing or is not a directory."""


class CancelFlag:
    def __init__(self):
        self._cancel = False

    def cancel(self):
        self._cancel = True

    def __call__(self):
        return self._cancel


@dataclass
class ScanCounter:
    visited: int = 0
    files: int = 0
    dirs: int = 0
    bytes: int = 0
    cancelled: bool = False

    def add(self, entry: Entry):
        self.visited += 1
        if entry.is_dir:
            self.dirs += 1
        else:
            self.files += 1
            self.bytes += entry.size


def validate_root(root: str) -> str:
    if not root:
        raise InvalidRootError("No scan root given")
    path = os.path.abspath(os.path.expanduser(root))
    if not os.path.exists(path):
        raise InvalidRootError(f"Path does not exist: {path}")
    if not os.path.isdir(path):
        raise InvalidRootError(f"Not a directory: {path}")
    return path


def _make_entry(path: str, is_dir: bool, st: os.stat_result) -> Entry:
    return Entry(
        path=path,
        is_dir=is_dir,
        size=0 if is_dir else int(getattr(st, "st_size", 0) or 0),
        created_at=float(getattr(st, "st_birthtime", st.st_ctime)),
        accessed_at=float(st.st_atime),
        modified_at=float(st.st_mtime),
    )


def _is_within(path: str, root: str) -> bool:
    return path == root or path.startswith(root.rstrip(os.sep) + os.sep)


def iter_entries(root: str,
                 access_denied: Set[str],
                 issues: List[ScanIssue],
                 counter: Optional[ScanCounter] = None,
                 cancel_flag: Optional[CancelCb] = None,
                 follow_symlinks: bool = False,
                 progress: Optional[ProgressCb] = None) -> Iterator[Entry]:
    """Yield every file and directory below root (not root itself).

    Directories are expanded depth-first, siblings in name order. Permission
    failures go into ``access_denied``, other OS errors into ``issues``; in
    both cases the walk carries on with the rest of the tree.
    """
    if counter is None:
        counter = ScanCounter()

    def denied(path: str):
        if path not in access_denied:
            access_denied.add(path)
            logger.info("Access denied: %s", path)

    def failed(path: str, exc: OSError):
        issues.append(ScanIssue(path=path, cause=str(exc)))
        logger.warning("Skipping %s: %s", path, exc)

    last_emit = 0.0

    def emit(cur: str):
        nonlocal last_emit
        if not progress:
            return
        now = time.time()
        if now - last_emit >= PROGRESS_INTERVAL:
            last_emit = now
            progress(cur, counter.files, counter.dirs, counter.bytes)

    try:
        st = os.stat(root)
    except PermissionError:
        denied(root)
        return
    except OSError as e:
        failed(root, e)
        return

    # only real directories are registered, so a link sorting before its
    # target cannot hide the target
    seen: Set[Tuple[int, int]] = {(st.st_dev, st.st_ino)}
    root_real = os.path.realpath(root)

    stack = [root]
    while stack:
        if cancel_flag and cancel_flag():
            counter.cancelled = True
            return
        dir_path = stack.pop()

        try:
            with os.scandir(dir_path) as it:
                children = sorted(it, key=lambda de: de.name)
        except PermissionError:
            denied(dir_path)
            continue
        except OSError as e:
            failed(dir_path, e)
            continue

        subdirs: List[str] = []
        for de in children:
            if cancel_flag and cancel_flag():
                counter.cancelled = True
                return
            try:
                is_link = de.is_symlink()
                if is_link and not follow_symlinks:
                    continue
                st = de.stat(follow_symlinks=follow_symlinks)
            except PermissionError:
                denied(de.path)
                continue
            except OSError as e:
                failed(de.path, e)
                continue

            is_dir = statmod.S_ISDIR(st.st_mode)
            if is_dir and follow_symlinks:
                key = (st.st_dev, st.st_ino)
                if is_link and _is_within(os.path.realpath(de.path), root_real):
                    logger.debug("Link into the scanned tree, not descending: %s", de.path)
                    continue
                if key in seen:
                    logger.debug("Already visited, not descending: %s", de.path)
                    continue
                seen.add(key)

            entry = _make_entry(de.path, is_dir, st)
            counter.add(entry)
            yield entry
            if is_dir:
                subdirs.append(de.path)
            emit(dir_path)

        stack.extend(reversed(subdirs))


class _DirNode:
    __slots__ = ("agg", "parent")

    def __init__(self, agg: DirectoryAggregate, parent: Optional["_DirNode"]):
        self.agg = agg
        self.parent = parent


class SizeAggregator:
    """Per-directory subtree totals, built in one pass.

    Each directory must be added before anything inside it. A file's size is
    added once to every ancestor node, from its parent up to the outermost
    directory added.
    """

    def __init__(self):
        self._nodes: Dict[str, _DirNode] = {}

    def add(self, entry: Entry):
        if entry.is_dir:
            self.add_directory(entry)
        else:
            self.add_file(entry)

    def add_directory(self, entry: Entry):
        parent = self._nodes.get(os.path.dirname(entry.path))
        agg = DirectoryAggregate(
            path=entry.path,
            size=0,
            created_at=entry.created_at,
            accessed_at=entry.accessed_at,
            modified_at=entry.modified_at,
        )
        self._nodes[entry.path] = _DirNode(agg, parent)

    def add_file(self, entry: Entry):
        node = self._nodes.get(os.path.dirname(entry.path))
        while node is not None:
            node.agg.size += entry.size
            node = node.parent

    def size_of(self, path: str) -> int:
        node = self._nodes.get(path)
        return node.agg.size if node else 0

    def aggregates(self) -> List[DirectoryAggregate]:
        return [n.agg for n in self._nodes.values()]

    def __len__(self):
        return len(self._nodes)


def _file_row(e: Entry) -> ReportRow:
    return ReportRow(path=e.path, size=e.size, created_at=e.created_at,
                     accessed_at=e.accessed_at, modified_at=e.modified_at, is_dir=False)


def _dir_row(d: DirectoryAggregate) -> ReportRow:
    return ReportRow(path=d.path, size=d.size, created_at=d.created_at,
                     accessed_at=d.accessed_at, modified_at=d.modified_at, is_dir=True)


def scan(request: ScanRequest,
         progress: Optional[ProgressCb] = None,
         cancel_flag: Optional[CancelCb] = None) -> ScanResult:
    """Run one scan and assemble its result.

    Raises InvalidRootError before touching the tree if the root is unusable.
    Everything after that is best effort.
    """
    t0 = time.time()
    if request.count < 1:
        raise ValueError(f"Result count must be a positive integer, got {request.count}")
    root = validate_root(request.root)
    mode = ScanMode(request.mode)
    threshold = request.threshold

    access_denied: Set[str] = set()
    issues: List[ScanIssue] = []
    counter = ScanCounter()
    top = TopFiles(request.count)
    aggregator = SizeAggregator()

    logger.debug("Scanning %s (mode=%s, count=%d, threshold=%s)", root, mode.value, request.count, threshold)

    for entry in iter_entries(root, access_denied, issues, counter=counter,
                              cancel_flag=cancel_flag,
                              follow_symlinks=request.follow_symlinks,
                              progress=progress):
        if mode is ScanMode.FILES:
            if not entry.is_dir and passes_age(entry.modified_at, threshold):
                top.offer(entry)
        else:
            # every file counts toward its ancestors, whatever its age
            aggregator.add(entry)

    if mode is ScanMode.FILES:
        items = [_file_row(e) for e in top.result()]
    else:
        eligible = [d for d in aggregator.aggregates() if passes_age(d.modified_at, threshold)]
        items = [_dir_row(d) for d in select_disjoint(eligible, request.count)]

    # a cancel that arrives after the walk finished leaves the result complete
    cancelled = counter.cancelled
    elapsed = time.time() - t0
    logger.info("Scanned %d entries under %s in %.1fs (%d denied, %d errors%s)",
                counter.visited, root, elapsed, len(access_denied), len(issues),
                ", cancelled" if cancelled else "")

    return ScanResult(
        root=root,
        mode=mode,
        count=request.count,
        threshold=threshold,
        items=items,
        total_scanned=counter.visited,
        access_denied=access_denied,
        issues=issues,
        files=counter.files,
        dirs=counter.dirs,
        bytes_scanned=counter.bytes,
        elapsed_sec=elapsed,
        cancelled=cancelled,
    )
