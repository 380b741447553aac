from __future__ import annotations
import os
from dataclasses import dataclass
from typing import List

import psutil


@dataclass(frozen=True)
class Drive:
    mountpoint: str
    fstype: str
    total: int
    used: int
    free: int


def list_drives() -> List[Drive]:
    """Mounted volumes that can be used as a scan root."""
    out: List[Drive] = []
    seen = set()
    for part in psutil.disk_partitions(all=False):
        if not part.mountpoint:
            continue
        mp = os.path.abspath(part.mountpoint)
        if mp in seen or not os.path.isdir(mp):
            continue
        seen.add(mp)
        try:
            usage = psutil.disk_usage(mp)
        except OSError:
            # cdrom without media, stale mounts
            continue
        out.append(Drive(mp, part.fstype, int(usage.total), int(usage.used), int(usage.free)))
    out.sort(key=lambda d: d.mountpoint.lower())
    return out


def estimate_scan_bytes(root: str) -> int:
    # Used space of the volume holding root: exact for a drive root,
    # an upper bound for a folder. 0 if unknown.
    try:
        return int(psutil.disk_usage(root).used)
    except OSError:
        return 0
