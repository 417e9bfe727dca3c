"""Tests for single-source sync composites."""

from __future__ import annotations

import operator
from collections.abc import Iterator

import pytest

from lazyseq import sync as it


def exploding() -> Iterator[int]:
    """A source that fails if anything pulls from it."""
    raise AssertionError("upstream was pulled")
    yield 0  # pragma: no cover


def counting(items: list[int], pulled: list[int]) -> Iterator[int]:
    for item in items:
        pulled.append(item)
        yield item


class TestSlicing:
    def test_take(self) -> None:
        assert it.to_list(it.take(2, [1, 2, 3])) == [1, 2]
        assert it.to_list(it.take(5, [1, 2])) == [1, 2]

    def test_take_non_positive_never_touches_upstream(self) -> None:
        assert it.to_list(it.take(0, exploding())) == []
        assert it.to_list(it.take(-1, exploding())) == []

    def test_take_pulls_no_more_than_n(self) -> None:
        pulled: list[int] = []
        assert it.to_list(it.take(2, counting([1, 2, 3, 4], pulled))) == [1, 2]
        assert pulled == [1, 2]

    def test_drop(self) -> None:
        assert it.to_list(it.drop(2, [1, 2, 3, 4])) == [3, 4]
        assert it.to_list(it.drop(10, [1])) == []
        assert it.to_list(it.drop(0, [1])) == [1]

    def test_slice(self) -> None:
        assert it.to_list(it.slice(1, 3, "abcde")) == ["b", "c"]
        assert it.to_list(it.slice(3, 3, exploding())) == []

    def test_tail(self) -> None:
        assert it.to_list(it.tail([1, 2, 3])) == [2, 3]
        assert it.to_list(it.tail([])) == []

    def test_take_while(self) -> None:
        assert it.to_list(it.take_while(lambda x: x < 3, [1, 2, 3, 1])) == [1, 2]

    def test_drop_while_keeps_boundary_item(self) -> None:
        assert it.to_list(it.drop_while(lambda x: x < 3, [1, 2, 3, 1, 2])) == [3, 1, 2]

    def test_drop_while_all_pass(self) -> None:
        assert it.to_list(it.drop_while(lambda x: x < 9, [1, 2])) == []

    def test_concat_prepend_append(self) -> None:
        assert it.to_list(it.concat([1], [2, 3])) == [1, 2, 3]
        assert it.to_list(it.prepend(0, [1])) == [0, 1]
        assert it.to_list(it.append(2, [1])) == [1, 2]

    def test_times(self) -> None:
        assert it.to_list(it.times(3, "x")) == ["x", "x", "x"]
        assert it.to_list(it.times(0, "x")) == []


class TestWindows:
    def test_frame(self) -> None:
        windows = it.to_list(it.frame(3, [1, 2, 3, 4, 5]))
        assert windows == [[1, 2, 3], [2, 3, 4], [3, 4, 5], [4, 5]]

    def test_frame_shorter_than_size(self) -> None:
        assert it.to_list(it.frame(3, [1, 2])) == [[1, 2]]
        assert it.to_list(it.frame(3, [])) == []

    def test_frame_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            it.to_list(it.frame(0, [1, 2]))

    def test_drop_last(self) -> None:
        assert it.to_list(it.drop_last(2, [1, 2, 3, 4])) == [1, 2]
        assert it.to_list(it.drop_last(0, [1, 2])) == [1, 2]
        assert it.to_list(it.drop_last(5, [1, 2])) == []

    def test_init(self) -> None:
        assert it.to_list(it.init([1, 2, 3])) == [1, 2]
        assert it.to_list(it.init([])) == []

    def test_init_keeps_none_items(self) -> None:
        assert it.to_list(it.init([None, None])) == [None]

    def test_group_with(self) -> None:
        assert it.to_list(it.group_with(operator.eq, [1, 1, 2, 2, 1])) == [[1, 1], [2, 2], [1]]

    def test_group_with_custom_predicate(self) -> None:
        ascending = it.group_with(lambda prev, item: item > prev, [1, 2, 3, 2, 5, 1])
        assert it.to_list(ascending) == [[1, 2, 3], [2, 5], [1]]

    def test_group(self) -> None:
        assert it.to_list(it.group("aab")) == [["a", "a"], ["b"]]
        assert it.to_list(it.group([])) == []

    def test_split_every(self) -> None:
        assert it.to_list(it.split_every(2, [1, 2, 3, 4, 5])) == [[1, 2], [3, 4], [5]]


class TestDeduplication:
    def test_unique(self) -> None:
        assert it.to_list(it.unique([1, 2, 1, 3, 2])) == [1, 2, 3]

    def test_unique_unhashable(self) -> None:
        assert it.to_list(it.unique([[1], [1], 2, [2], 2])) == [[1], 2, [2]]

    def test_unique_with(self) -> None:
        same_mod3 = it.unique_with(lambda a, b: a % 3 == b % 3)
        assert it.to_list(same_mod3([1, 2, 4, 3, 5])) == [1, 2, 3]


class TestFlatten:
    def test_flatten_n_one_level(self) -> None:
        assert it.to_list(it.flatten_n(1, [[1, 2], [3, [4]]])) == [1, 2, 3, [4]]

    def test_flatten_all_levels(self) -> None:
        assert it.to_list(it.flatten([[1, 2], [3, [4]]])) == [1, 2, 3, 4]

    def test_flatten_passes_scalars_through(self) -> None:
        assert it.to_list(it.flatten([1, [2, [[3]]], 4])) == [1, 2, 3, 4]

    def test_strings_and_mappings_are_atoms(self) -> None:
        assert it.to_list(it.flatten(["ab", ["cd", {"k": 1}]])) == ["ab", "cd", {"k": 1}]

    def test_unnest(self) -> None:
        assert it.to_list(it.unnest([[1], [[2]]])) == [1, [2]]

    def test_flatten_inlines_generators(self) -> None:
        assert it.to_list(it.flatten([it.range(2), [it.of(5)]])) == [0, 1, 5]


class TestRepetition:
    def test_cycle_n(self) -> None:
        assert it.to_list(it.cycle_n(3, [1, 2])) == [1, 2, 1, 2, 1, 2]
        assert it.to_list(it.cycle_n(0, [1])) == []

    def test_cycle_buffers_one_pass(self) -> None:
        pulled: list[int] = []
        assert it.to_list(it.take(5, it.cycle(counting([1, 2], pulled)))) == [1, 2, 1, 2, 1]
        assert pulled == [1, 2]

    def test_cycle_empty_terminates(self) -> None:
        assert it.to_list(it.cycle([])) == []

    def test_pad_to(self) -> None:
        assert it.to_list(it.pad_to(4, 0, [1, 2])) == [1, 2, 0, 0]
        assert it.to_list(it.pad_to(1, 0, [1, 2])) == [1, 2]

    def test_pad(self) -> None:
        assert it.to_list(it.take(4, it.pad(0, [1]))) == [1, 0, 0, 0]


class TestJoining:
    def test_intersperse(self) -> None:
        assert it.to_list(it.intersperse(0, [1, 2, 3])) == [1, 0, 2, 0, 3]
        assert it.to_list(it.intersperse(0, [])) == []

    def test_join_with(self) -> None:
        assert it.join_with(", ", [1, 2, 3]) == "1, 2, 3"

    def test_join(self) -> None:
        assert it.join("abc") == "abc"
        assert it.join([]) == ""

    def test_reverse_is_lazy(self) -> None:
        reversed_seq = it.reverse(exploding())
        with pytest.raises(AssertionError):
            it.next(reversed_seq)
        assert it.to_list(it.reverse([1, 2, 3])) == [3, 2, 1]

    def test_sort(self) -> None:
        assert it.to_list(it.sort(None, [3, 1, 2])) == [1, 2, 3]
        assert it.to_list(it.sort(len, ["ccc", "a", "bb"])) == ["a", "bb", "ccc"]
