"""
Tests for the age filter, path relation test and top-K selectors.
"""
import os

import pytest

from disktop.models import DirectoryAggregate, Entry
from disktop.topk import TopFiles, is_ancestor, overlaps, passes_age, select_disjoint, select_top


def d(path, size):
    return DirectoryAggregate(path=path, size=size)


def f(path, size):
    return Entry(path=path, is_dir=False, size=size)


class TestAgeFilter:

    def test_no_threshold_passes(self):
        assert passes_age(2_000_000_000.0, None)

    def test_at_threshold_passes(self):
        assert passes_age(100.0, 100.0)

    def test_older_passes_newer_fails(self):
        assert passes_age(99.0, 100.0)
        assert not passes_age(100.5, 100.0)


class TestPathRelation:

    def test_parent_is_ancestor(self):
        base = os.path.join(os.sep, "data")
        assert is_ancestor(base, os.path.join(base, "x"))
        assert is_ancestor(base, os.path.join(base, "x", "y", "z"))

    def test_not_reflexive(self):
        p = os.path.join(os.sep, "data", "x")
        assert not is_ancestor(p, p)
        assert not is_ancestor(p, p + os.sep)

    def test_child_is_not_ancestor_of_parent(self):
        base = os.path.join(os.sep, "data")
        assert not is_ancestor(os.path.join(base, "x"), base)

    def test_textual_prefix_sibling_is_not_ancestor(self):
        parent = os.path.join(os.sep, "srv")
        assert not is_ancestor(os.path.join(parent, "Data"), os.path.join(parent, "DataArchive"))
        assert not is_ancestor(os.path.join(parent, "Data"), os.path.join(parent, "DataArchive", "x"))

    def test_case_insensitive(self):
        assert is_ancestor(os.path.join(os.sep, "Data"), os.path.join(os.sep, "data", "sub"))

    def test_trailing_separator_ignored(self):
        base = os.path.join(os.sep, "data")
        assert is_ancestor(base + os.sep, os.path.join(base, "x"))

    def test_filesystem_root(self):
        assert is_ancestor(os.sep, os.path.join(os.sep, "data"))

    def test_overlaps_both_directions(self):
        a = os.path.join(os.sep, "a")
        b = os.path.join(a, "b")
        assert overlaps(a, b)
        assert overlaps(b, a)
        assert not overlaps(b, os.path.join(a, "c"))


class TestFlatSelector:

    def test_largest_file(self):
        files = [f("/r/x", 10), f("/r/y", 5), f("/r/z", 1)]
        assert [e.path for e in select_top(files, 1)] == ["/r/x"]

    def test_descending_and_bounded(self):
        files = [f(f"/r/{i}", s) for i, s in enumerate([3, 9, 1, 7, 5])]
        out = select_top(files, 3)
        assert [e.size for e in out] == [9, 7, 5]

    def test_count_larger_than_input(self):
        files = [f("/r/a", 1), f("/r/b", 2)]
        assert len(select_top(files, 10)) == 2

    def test_ties_keep_first_seen(self):
        files = [f("/r/a", 5), f("/r/b", 5), f("/r/c", 5), f("/r/d", 1)]
        out = select_top(files, 2)
        assert [e.path for e in out] == ["/r/a", "/r/b"]

    def test_ties_resolved_when_heap_is_full(self):
        top = TopFiles(2)
        for e in [f("/r/small", 1), f("/r/a", 5), f("/r/b", 5), f("/r/c", 5)]:
            top.offer(e)
        assert [e.path for e in top.result()] == ["/r/a", "/r/b"]

    def test_zero_count(self):
        assert select_top([f("/r/a", 1)], 0) == []


class TestDisjointSelector:

    def test_parent_excludes_child(self):
        cands = [d("/root", 16), d("/root/a", 15), d("/root/b", 1)]
        out = select_disjoint(cands, 2)
        assert [(x.path, x.size) for x in out] == [("/root", 16)]

    def test_siblings_selected(self):
        cands = [d("/root/a", 15), d("/root/b", 1), d("/root/a/x", 14)]
        out = select_disjoint(cands, 2)
        assert [x.path for x in out] == ["/root/a", "/root/b"]

    def test_scans_whole_candidate_list(self):
        # a long nested chain outranks every disjoint candidate
        chain = [d("/r" + "/n" * i, 1000 - i) for i in range(1, 30)]
        leaves = [d("/s/one", 3), d("/s/two", 2), d("/s/three", 1)]
        out = select_disjoint(chain + leaves, 3)
        assert [x.path for x in out] == ["/r/n", "/s/one", "/s/two"]

    def test_no_pair_overlaps(self):
        cands = [
            d("/x", 100), d("/x/a", 60), d("/x/a/b", 50), d("/y", 40),
            d("/y/c", 30), d("/z", 20), d("/xa", 10),
        ]
        out = select_disjoint(cands, 10)
        paths = [x.path for x in out]
        assert paths == ["/x", "/y", "/z", "/xa"]
        for i, p in enumerate(paths):
            for q in paths[i + 1:]:
                assert not overlaps(p, q)

    def test_ties_keep_input_order(self):
        cands = [d("/p/b", 5), d("/p/a", 5), d("/p/c", 5)]
        assert [x.path for x in select_disjoint(cands, 2)] == ["/p/b", "/p/a"]

    @pytest.mark.parametrize("count", [0, -1])
    def test_non_positive_count(self, count):
        assert select_disjoint([d("/a", 1)], count) == []
