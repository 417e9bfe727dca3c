"""Synchronous engine: lazy combinators over iterables.

Example:
    >>> from lazyseq import sync as it
    >>> pipeline = it.filter(lambda x: x % 2) >> it.map(lambda x: x * x) >> it.take(3) >> it.to_list
    >>> pipeline(it.range(100))
    [1, 9, 25]
"""

from __future__ import annotations

from .base import (
    accumulate,
    count,
    every,
    exhaust,
    filter,
    find,
    find_index,
    flat_map,
    for_each,
    from_,
    includes,
    index_of,
    is_empty,
    iterate,
    last,
    length,
    map,
    max,
    max_by,
    min,
    min_by,
    next,
    next_or,
    none,
    nth,
    of,
    range,
    range_step,
    reduce,
    reject,
    repeat,
    scan,
    some,
    sum,
    sum_by,
    to_list,
    unfold,
)
from .compose import (
    append,
    concat,
    cycle,
    cycle_n,
    drop,
    drop_last,
    drop_while,
    flatten,
    flatten_n,
    frame,
    group,
    group_with,
    init,
    intersperse,
    join,
    join_with,
    pad,
    pad_to,
    prepend,
    reverse,
    slice,
    sort,
    split_every,
    tail,
    take,
    take_while,
    times,
    unique,
    unique_with,
    unnest,
)
from .drive import yield_with
from .fanout import (
    corresponds,
    corresponds_with,
    enumerate,
    indices,
    partition,
    split_at,
    tee,
    unzip,
    unzip_n,
    zip,
    zip_all,
    zip_all_with,
    zip_with,
    zip_with_n,
)

__all__ = [
    # Producers
    "from_", "of", "range_step", "range", "unfold", "iterate", "repeat", "times",
    # Transformers
    "map", "flat_map", "filter", "reject", "scan", "accumulate", "for_each",
    # Consumers
    "next", "next_or", "last", "reduce", "length", "to_list", "exhaust",
    "some", "every", "none", "find", "find_index", "nth", "count",
    "sum_by", "min_by", "max_by", "sum", "min", "max", "includes", "index_of", "is_empty",
    # Single-source composites
    "slice", "take", "drop", "tail", "take_while", "drop_while", "concat", "prepend", "append",
    "frame", "drop_last", "init", "group_with", "group", "split_every", "unique", "unique_with",
    "flatten_n", "flatten", "unnest", "cycle_n", "cycle", "pad_to", "pad",
    "intersperse", "join_with", "join", "reverse", "sort",
    # Multi-source composites
    "zip_all_with", "zip_all", "zip_with_n", "zip_with", "zip", "enumerate", "indices",
    "tee", "split_at", "partition", "unzip_n", "unzip", "corresponds_with", "corresponds",
    # Coroutine driver
    "yield_with",
]
