import os

import pytest

KB = 1024
OLD = 1_000_000_000.0  # 2001-09-09


def make_file(path, size, mtime=None):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        f.write(b"\0" * size)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def set_mtime(path, mtime):
    os.utime(path, (mtime, mtime))


@pytest.fixture
def example_tree(tmp_path):
    """root/a/file1 (10 KB), root/a/file2 (5 KB), root/b/file3 (1 KB)."""
    root = tmp_path / "root"
    make_file(root / "a" / "file1", 10 * KB)
    make_file(root / "a" / "file2", 5 * KB)
    make_file(root / "b" / "file3", 1 * KB)
    return root
