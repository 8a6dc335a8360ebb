# backend/crewtrack/apps/compliance/hierarchy.py
"""
Generic n-level group-by / rollup builder.

A grouping view is a list of GroupLevel definitions. Every record descends
through the levels once; each level contributes one raw key to the node
path. Leaves hold the records, branches hold children, and every node
carries rollup counts:

- leaf counts are computed from its own items
- branch counts are the sum of its children's counts

Node keys are the raw level keys joined by KEY_SEP, so a key is stable for
as long as the underlying ids are, and all keys below a node share the
prefix `node.key + KEY_SEP`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import reduce
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from ...utils.strings import base_key
from .schemas import GroupNode, StatusCounts, TrainingRecord
from .status import compute_counts

logger = logging.getLogger(__name__)

# Never present in ids, names or department codes.
KEY_SEP = "§"


def make_key(*parts: object) -> str:
    return KEY_SEP.join(str(p) for p in parts)


@dataclass(frozen=True)
class GroupLevel:
    """
    One grouping dimension.

    key_of:       record -> raw key of the node the record belongs to
    title_of:     record -> display title of that node
    fallback_key: raw key of this level's catch-all bucket ("Ungrouped",
                  "No Department", ...); that node always sorts last
    """

    key_of: Callable[[TrainingRecord], str]
    title_of: Callable[[TrainingRecord], str]
    fallback_key: Optional[str] = None


@dataclass
class _Bucket:
    raw_key: str
    key: str
    title: str
    is_fallback: bool
    children: Dict[str, "_Bucket"] = field(default_factory=dict)
    items: List[TrainingRecord] = field(default_factory=list)


def _materialize(bucket: _Bucket, leaf_tie_break_field: str) -> Tuple[GroupNode, int]:
    """
    Build the public node for a bucket.

    Returns (node, leaf_item_total). The total is scratch for the caller's
    bookkeeping and is not part of the public tree.
    """
    if not bucket.children:
        items = sorted(
            bucket.items,
            key=lambda r: base_key(getattr(r, leaf_tie_break_field, None)),
        )
        node = GroupNode(
            key=bucket.key,
            title=bucket.title,
            counts=compute_counts(items),
            children=None,
            items=items,
        )
        return node, len(items)

    children, leaf_total = _build_siblings(bucket.children.values(), leaf_tie_break_field)
    counts = reduce(lambda acc, child: acc + child.counts, children, StatusCounts())

    node = GroupNode(
        key=bucket.key,
        title=bucket.title,
        counts=counts,
        children=children,
        items=None,
    )
    return node, leaf_total


def _build_siblings(
    buckets: Iterable[_Bucket], leaf_tie_break_field: str
) -> Tuple[List[GroupNode], int]:
    entries = []
    leaf_total = 0
    for bucket in buckets:
        node, total = _materialize(bucket, leaf_tie_break_field)
        entries.append((bucket.is_fallback, base_key(node.title), node))
        leaf_total += total

    # Fallback buckets last, then by title. sort() is stable for equal titles.
    entries.sort(key=lambda entry: (entry[0], entry[1]))
    return [node for _, _, node in entries], leaf_total


def build_hierarchy(
    records: Sequence[TrainingRecord],
    levels: Sequence[GroupLevel],
    leaf_tie_break_field: str,
) -> List[GroupNode]:
    """
    Group `records` through `levels` and return the sorted forest.

    Siblings sort by title (case/accent-insensitive); a level's fallback
    bucket sorts after every named sibling. Leaf items sort by
    `leaf_tie_break_field`. Every input record lands in exactly one leaf.
    """
    if not levels:
        raise ValueError("build_hierarchy needs at least one level")

    root: Dict[str, _Bucket] = {}
    last = len(levels) - 1

    for record in records:
        cursor = root
        raw_path: List[str] = []

        for depth, level in enumerate(levels):
            raw_key = str(level.key_of(record))
            raw_path.append(raw_key)

            bucket = cursor.get(raw_key)
            if bucket is None:
                bucket = _Bucket(
                    raw_key=raw_key,
                    key=make_key(*raw_path),
                    title=str(level.title_of(record)),
                    is_fallback=level.fallback_key is not None and raw_key == level.fallback_key,
                )
                cursor[raw_key] = bucket

            if depth == last:
                bucket.items.append(record)
            cursor = bucket.children

    nodes, leaf_total = _build_siblings(root.values(), leaf_tie_break_field)
    if leaf_total != len(records):
        logger.warning(
            "Grouping lost or duplicated records",
            extra={"records": len(records), "leaf_items": leaf_total},
        )
    return nodes
