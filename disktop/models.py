from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set


class ScanMode(str, Enum):
    FILES = "files"
    DIRECTORIES = "dirs"


@dataclass(frozen=True)
class Entry:
    path: str
    is_dir: bool
    size: int = 0            # own length, files only
    created_at: float = 0.0
    accessed_at: float = 0.0
    modified_at: float = 0.0


@dataclass
class DirectoryAggregate:
    path: str
    size: int = 0            # bytes of every file in the subtree
    created_at: float = 0.0
    accessed_at: float = 0.0
    modified_at: float = 0.0


@dataclass(frozen=True)
class ReportRow:
    path: str
    size: int
    created_at: float
    accessed_at: float
    modified_at: float
    is_dir: bool = False


@dataclass(frozen=True)
class ScanIssue:
    path: str
    cause: str


@dataclass
class ScanRequest:
    root: str
    mode: ScanMode = ScanMode.FILES
    count: int = 20
    threshold: Optional[float] = None  # POSIX time; None = no age filter
    follow_symlinks: bool = False


@dataclass
class ScanResult:
    root: str
    mode: ScanMode
    count: int
    threshold: Optional[float]
    items: List[ReportRow]                  # descending by size
    total_scanned: int
    access_denied: Set[str] = field(default_factory=set)
    issues: List[ScanIssue] = field(default_factory=list)
    files: int = 0
    dirs: int = 0
    bytes_scanned: int = 0
    elapsed_sec: float = 0.0
    cancelled: bool = False
