"""
Age filter, path relation test and the two top-K selectors.
"""
from __future__ import annotations
import heapq
import os
from typing import Iterable, List, Optional, Tuple, TypeVar

from .models import DirectoryAggregate, Entry

T = TypeVar("T")


def passes_age(modified_at: float, threshold: Optional[float]) -> bool:
    # "older than or at" the cutoff
    if threshold is None:
        return True
    return modified_at <= threshold


def _norm(path: str) -> str:
    p = os.path.normpath(path)
    if os.altsep:
        p = p.replace(os.altsep, os.sep)
    if not p.endswith(os.sep):
        p += os.sep
    return p.casefold()


def is_ancestor(a: str, b: str) -> bool:
    """True if ``a`` is a strict ancestor of ``b``.

    Comparison works on separator-bounded segments, so ``/x/Data`` is not an
    ancestor of ``/x/DataArchive``. Case-insensitive.
    """
    na, nb = _norm(a), _norm(b)
    return na != nb and nb.startswith(na)


def overlaps(a: str, b: str) -> bool:
    return is_ancestor(a, b) or is_ancestor(b, a)


def _push_top(heap: List[Tuple[int, int, T]], item: Tuple[int, int, T], limit: int):
    if limit <= 0:
        return
    if len(heap) < limit:
        heapq.heappush(heap, item)
    else:
        if item[:2] > heap[0][:2]:
            heapq.heapreplace(heap, item)


class TopFiles:
    """Bounded heap of the largest files seen so far.

    Ties on size keep the earlier-offered file.
    """

    def __init__(self, limit: int):
        self.limit = limit
        self._heap: List[Tuple[int, int, Entry]] = []
        self._seq = 0

    def offer(self, entry: Entry):
        # -seq so that on equal size the earlier entry ranks higher
        _push_top(self._heap, (entry.size, -self._seq, entry), self.limit)
        self._seq += 1

    def result(self) -> List[Entry]:
        ordered = sorted(self._heap, key=lambda x: (x[0], x[1]), reverse=True)
        return [e for _, _, e in ordered]


def select_top(entries: Iterable[Entry], count: int) -> List[Entry]:
    top = TopFiles(count)
    for e in entries:
        top.offer(e)
    return top.result()


def select_disjoint(candidates: Iterable[DirectoryAggregate], count: int) -> List[DirectoryAggregate]:
    """Pick up to ``count`` largest directories, none nested in another.

    The whole sorted candidate list is walked; a candidate is accepted only
    when it neither contains nor is contained by an accepted directory.
    """
    if count <= 0:
        return []
    ordered = sorted(candidates, key=lambda d: d.size, reverse=True)  # stable
    accepted: List[DirectoryAggregate] = []
    for cand in ordered:
        if any(overlaps(cand.path, a.path) for a in accepted):
            continue
        accepted.append(cand)
        if len(accepted) >= count:
            break
    return accepted
