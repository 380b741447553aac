"""
CSV report and access-denied log for a finished scan.
"""
from __future__ import annotations
import csv
import os
import time
from datetime import datetime
from typing import List, Optional, Tuple

from .models import ScanMode, ScanResult
from .utils import format_size, format_timestamp

CSV_HEADER = ["Path", "Size", "Created", "Accessed", "Modified"]
FILES_PREFIX = "LargestFiles"
DIRS_PREFIX = "LargestDirectories"
DENIED_PREFIX = "AccessDenied"


def report_paths(out_dir: str, mode: ScanMode, now: Optional[datetime] = None) -> Tuple[str, str]:
    now = now or datetime.now()
    stamp = now.strftime("%Y%m%d_%H%M%S")
    prefix = FILES_PREFIX if ScanMode(mode) is ScanMode.FILES else DIRS_PREFIX
    csv_path = os.path.join(out_dir, f"{prefix}_{stamp}.csv")
    log_path = os.path.join(out_dir, f"{DENIED_PREFIX}_{stamp}.log")
    return csv_path, log_path


def report_rows(result: ScanResult) -> List[List[str]]:
    return [
        [row.path,
         format_size(row.size),
         format_timestamp(row.created_at),
         format_timestamp(row.accessed_at),
         format_timestamp(row.modified_at)]
        for row in result.items
    ]


def write_csv(result: ScanResult, path: str) -> str:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        writer.writerows(report_rows(result))
    return path


def write_denied_log(result: ScanResult, path: str) -> str:
    with open(path, "w", encoding="utf-8") as f:
        f.write(f"Root: {result.root}\n")
        f.write(f"Written: {format_timestamp(time.time())}\n")
        f.write(f"Access denied: {len(result.access_denied)}\n\n")
        for p in sorted(result.access_denied):
            f.write(p + "\n")
        if result.issues:
            f.write(f"\nOther errors: {len(result.issues)}\n\n")
            for issue in result.issues:
                f.write(f"{issue.path}: {issue.cause}\n")
    return path


def export(result: ScanResult, out_dir: str, now: Optional[datetime] = None) -> Tuple[str, str]:
    os.makedirs(out_dir, exist_ok=True)
    csv_path, log_path = report_paths(out_dir, result.mode, now)
    write_csv(result, csv_path)
    write_denied_log(result, log_path)
    return csv_path, log_path


def summary_lines(result: ScanResult) -> List[str]:
    what = "files" if result.mode is ScanMode.FILES else "directories"
    lines = [f"Top {len(result.items)} {what} under {result.root}"]
    if result.threshold is not None:
        lines.append(f"Modified on or before {format_timestamp(result.threshold)}")
    width = max((len(format_size(r.size)) for r in result.items), default=0)
    for r in result.items:
        lines.append(f"{format_size(r.size):>{width}}  {r.path}")
    lines.append("")
    lines.append(f"Scanned: {result.total_scanned} entries "
                 f"({result.files} files, {result.dirs} folders, {format_size(result.bytes_scanned)}) "
                 f"in {result.elapsed_sec:.1f} s")
    if result.access_denied:
        lines.append(f"Access denied: {len(result.access_denied)} paths")
    if result.issues:
        lines.append(f"Other errors: {len(result.issues)} paths")
    if result.cancelled:
        lines.append("Scan was cancelled, results are partial.")
    return lines
