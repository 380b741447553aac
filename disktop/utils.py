from __future__ import annotations
import os
import sys
import subprocess
from datetime import datetime
from typing import Optional

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_size(num: int) -> str:
    if num < 0:
        return str(num)
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    x = float(num)
    for u in units:
        if x < 1024.0 or u == units[-1]:
            return f"{x:.2f} {u}"
        x /= 1024.0
    return f"{x:.2f} TB"


def format_timestamp(ts: Optional[float]) -> str:
    """Local time, ``yyyy-MM-dd HH:mm:ss``."""
    if ts is None:
        return ""
    try:
        return datetime.fromtimestamp(ts).strftime(TIMESTAMP_FORMAT)
    except (OverflowError, OSError, ValueError):
        return ""


def parse_timestamp(text: str) -> float:
    """Parse ``yyyy-MM-dd`` or ``yyyy-MM-dd HH:mm:ss`` (local time) to POSIX time."""
    text = text.strip()
    for fmt in (TIMESTAMP_FORMAT, "%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).timestamp()
        except ValueError:
            continue
    raise ValueError(f"Invalid date: '{text}'. Use YYYY-MM-DD or 'YYYY-MM-DD HH:MM:SS'.")


def clamp(v, lo, hi):
    return lo if v < lo else hi if v > hi else v


def reveal_in_file_manager(path: str) -> bool:
    """Open the system file manager and reveal the given path.

    Works on Windows/macOS/Linux. Returns True if an attempt was made.
    """
    if not path:
        return False
    try:
        ap = os.path.abspath(path)
        if sys.platform.startswith('win'):
            # explorer can reveal files; for folders just open
            if os.path.isdir(ap):
                os.startfile(ap)
            else:
                subprocess.Popen(['explorer', '/select,', ap])
            return True
        if sys.platform == 'darwin':
            subprocess.Popen(['open', '-R', ap])
            return True
        # linux & others
        folder = ap if os.path.isdir(ap) else os.path.dirname(ap)
        subprocess.Popen(['xdg-open', folder])
        return True
    except OSError:
        return False
