#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdfdelta/diff/sequence.py
"""Longest-common-subsequence alignment of two sequences.

This is the shared core of the text diff engine (aligning word, line or
sentence units) and the token alignment engine (aligning positioned tokens
by their text). It implements Myers' greedy O(ND) shortest edit script
search, so the resulting partition has minimal edit distance.

Tie-breaking follows conventional LCS diff behaviour:

- the common prefix is consumed before any edit, so the first unchanged run
  is as long as possible;
- during the search an insertion is taken only when it reaches strictly
  further along the old sequence than the competing deletion;
- inside a change region every deletion is reported before the insertions.

The result is deterministic for identical inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterator, Literal, Optional, Sequence, TypeVar

T = TypeVar("T")

OpTag = Literal["equal", "delete", "insert"]


@dataclass(slots=True)
class DiffOp:
    """One run of an edit script between two sequences.

    Ranges are half-open index ranges into the old and new sequences. An
    ``equal`` op spans the same length on both sides, a ``delete`` op has an
    empty new range and an ``insert`` op an empty old range.
    """

    tag: OpTag
    old_range: tuple[int, int]
    new_range: tuple[int, int]

    @property
    def old_length(self) -> int:
        return self.old_range[1] - self.old_range[0]

    @property
    def new_length(self) -> int:
        return self.new_range[1] - self.new_range[0]


class _Run:
    """Immutable node of a singly linked edit path.

    Paths branch while the search explores diagonals, so nodes are never
    mutated; extending a path creates a new head that shares the tail.
    """

    __slots__ = ("tag", "count", "previous")

    def __init__(self, tag: OpTag, count: int, previous: Optional[_Run]):
        self.tag = tag
        self.count = count
        self.previous = previous


def _extend(run: Optional[_Run], tag: OpTag, count: int = 1) -> _Run:
    if run is not None and run.tag == tag:
        return _Run(tag, run.count + count, run.previous)
    return _Run(tag, count, run)


def _follow_snake(a: Sequence[Hashable], b: Sequence[Hashable], x: int, y: int, run: Optional[_Run]):
    start = x
    n, m = len(a), len(b)
    while x < n and y < m and a[x] == b[y]:
        x += 1
        y += 1
    if x > start:
        run = _extend(run, "equal", x - start)
    return x, run


def _unwind(run: Optional[_Run]) -> list[tuple[OpTag, int]]:
    runs: list[tuple[OpTag, int]] = []
    while run is not None:
        runs.append((run.tag, run.count))
        run = run.previous
    runs.reverse()
    return runs


def _shortest_edit(a: Sequence[Hashable], b: Sequence[Hashable]) -> list[tuple[OpTag, int]]:
    """Return the edit script of ``a`` into ``b`` as ``(tag, count)`` runs."""
    n, m = len(a), len(b)
    if n == 0 and m == 0:
        return []
    if n == 0:
        return [("insert", m)]
    if m == 0:
        return [("delete", n)]

    x, run = _follow_snake(a, b, 0, 0, None)
    if x >= n and x >= m:
        return _unwind(run)

    # diagonal k = x - y  ->  (furthest x reached, path head)
    frontier: dict[int, tuple[int, Optional[_Run]]] = {0: (x, run)}
    for d in range(1, n + m + 1):
        next_frontier: dict[int, tuple[int, Optional[_Run]]] = {}
        for k in range(-d, d + 1, 2):
            down = frontier.get(k + 1)
            right = frontier.get(k - 1)
            if down is not None and down[0] - (k + 1) >= m:
                down = None
            if right is not None and right[0] >= n:
                right = None
            if down is None and right is None:
                continue

            if right is None or (down is not None and right[0] < down[0]):
                x, run = down[0], _extend(down[1], "insert")  # type: ignore[index]
            else:
                x, run = right[0] + 1, _extend(right[1], "delete")

            x, run = _follow_snake(a, b, x, x - k, run)
            if x >= n and x - k >= m:
                return _unwind(run)
            next_frontier[k] = (x, run)
        frontier = next_frontier

    raise AssertionError("edit script search did not terminate")  # pragma: no cover


def _group_changes(runs: list[tuple[OpTag, int]]) -> Iterator[tuple[OpTag, int]]:
    """Merge interleaved edits between two equal runs into delete-then-insert."""
    deleted = inserted = 0
    for tag, count in runs:
        if tag == "equal":
            if deleted:
                yield "delete", deleted
            if inserted:
                yield "insert", inserted
            deleted = inserted = 0
            yield tag, count
        elif tag == "delete":
            deleted += count
        else:
            inserted += count
    if deleted:
        yield "delete", deleted
    if inserted:
        yield "insert", inserted


def align(
    old: Sequence[T],
    new: Sequence[T],
    key: Callable[[T], Any] | None = None,
) -> list[DiffOp]:
    """Align two sequences and return their minimal edit script.

    Parameters
    ----------
    old : Sequence
        Baseline sequence
    new : Sequence
        Revised sequence
    key : callable, optional
        Function mapping an item to the hashable value used for equality.
        Items are compared directly when omitted.

    Returns
    -------
    list of DiffOp
        Ops in order, covering every index of both sequences exactly once.

    Examples
    --------
    >>> [op.tag for op in align("abc", "abxc")]
    ['equal', 'insert', 'equal']

    """
    old_keys = [key(item) for item in old] if key else list(old)
    new_keys = [key(item) for item in new] if key else list(new)
    n, m = len(old_keys), len(new_keys)

    limit = min(n, m)
    prefix = 0
    while prefix < limit and old_keys[prefix] == new_keys[prefix]:
        prefix += 1
    suffix = 0
    while suffix < limit - prefix and old_keys[n - 1 - suffix] == new_keys[m - 1 - suffix]:
        suffix += 1

    runs: list[tuple[OpTag, int]] = []
    if prefix:
        runs.append(("equal", prefix))
    runs.extend(_shortest_edit(old_keys[prefix : n - suffix], new_keys[prefix : m - suffix]))
    if suffix:
        runs.append(("equal", suffix))

    ops: list[DiffOp] = []
    old_pos = new_pos = 0
    for tag, count in _group_changes(runs):
        if tag == "equal":
            ops.append(DiffOp(tag, (old_pos, old_pos + count), (new_pos, new_pos + count)))
            old_pos += count
            new_pos += count
        elif tag == "delete":
            ops.append(DiffOp(tag, (old_pos, old_pos + count), (new_pos, new_pos)))
            old_pos += count
        else:
            ops.append(DiffOp(tag, (old_pos, old_pos), (new_pos, new_pos + count)))
            new_pos += count

    return ops
