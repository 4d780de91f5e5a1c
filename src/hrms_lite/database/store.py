"""Generic document persistence.

Services never talk to a concrete database; they depend on the
``DocumentStore`` protocol below. Documents are plain dicts with camelCase
keys, the store owns ``id``, ``createdAt`` and ``updatedAt``.

Filters use a small document-store dialect:

- ``{"field": value}`` equality
- ``{"field": {"$gte": a, "$lte": b, "$in": [..]}}`` comparisons
- ``{"$or": [filter, ...]}`` alternatives

Pipelines accept ``$match`` followed by ``$group`` with ``$sum``
accumulators (``{"$sum": 1}`` counts, ``{"$sum": "$field"}`` totals).
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, Sequence

from ..core.enums import EntityKind

SortSpec = Sequence[tuple[str, int]]

# Unique indexes per entity kind; each tuple is one compound key.
UNIQUE_INDEXES: dict[EntityKind, tuple[tuple[str, ...], ...]] = {
    EntityKind.ATTENDANCE: (("employeeId", "date"),),
    EntityKind.EMPLOYEE: (("employeeId",), ("email",)),
}


class DuplicateKeyError(Exception):
    """A write violated one of the unique indexes."""

    def __init__(self, kind: EntityKind, keys: Sequence[str]):
        super().__init__(f"Duplicate key on {kind.value} ({', '.join(keys)})")
        self.kind = kind
        self.keys = tuple(keys)


class DocumentStore(Protocol):
    def find(self, kind: EntityKind, filter: dict, *, sort: Optional[SortSpec] = None) -> list[dict]:
        raise NotImplementedError

    def find_one(self, kind: EntityKind, filter: dict) -> Optional[dict]:
        raise NotImplementedError

    def find_by_id(self, kind: EntityKind, doc_id: str) -> Optional[dict]:
        raise NotImplementedError

    def create(self, kind: EntityKind, data: dict) -> dict:
        raise NotImplementedError

    def update_by_id(self, kind: EntityKind, doc_id: str, patch: dict) -> Optional[dict]:
        raise NotImplementedError

    def delete_by_id(self, kind: EntityKind, doc_id: str) -> bool:
        raise NotImplementedError

    def count(self, kind: EntityKind, filter: dict) -> int:
        raise NotImplementedError

    def aggregate(self, kind: EntityKind, pipeline: Sequence[dict]) -> list[dict]:
        raise NotImplementedError


_OPERATORS = {
    "$gte": lambda a, b: a is not None and a >= b,
    "$lte": lambda a, b: a is not None and a <= b,
    "$gt": lambda a, b: a is not None and a > b,
    "$lt": lambda a, b: a is not None and a < b,
    "$ne": lambda a, b: a != b,
    "$in": lambda a, b: a in b,
}


def check_filter(filter: dict) -> None:
    """Reject operators the store does not support, whether or not any document is scanned."""
    for key, expected in filter.items():
        if key == "$or":
            for sub in expected:
                check_filter(sub)
        elif isinstance(expected, dict):
            for op in expected:
                if op not in _OPERATORS:
                    raise ValueError(f"Unsupported filter operator: {op}")


def matches(doc: dict, filter: dict) -> bool:
    """Evaluate a filter against one document (in-process backends)."""
    for key, expected in filter.items():
        if key == "$or":
            if not any(matches(doc, sub) for sub in expected):
                return False
            continue

        actual = doc.get(key)
        if isinstance(expected, dict):
            for op, operand in expected.items():
                check = _OPERATORS.get(op)
                if check is None:
                    raise ValueError(f"Unsupported filter operator: {op}")
                if not check(actual, operand):
                    return False
        elif actual != expected:
            return False
    return True


def sort_documents(docs: Iterable[tuple[int, dict]], sort: Optional[SortSpec]) -> list[dict]:
    """Sort ``(insertion_seq, doc)`` pairs; ties fall back to insertion order in the primary direction."""
    items = list(docs)
    if sort:
        # Stable multi-key sort: apply keys from least to most significant.
        primary_direction = sort[0][1]
        items.sort(key=lambda p: p[0], reverse=primary_direction < 0)
        for field, direction in reversed(sort):
            items.sort(key=lambda p: _sort_key(p[1].get(field)), reverse=direction < 0)
    else:
        items.sort(key=lambda p: p[0])
    return [doc for _, doc in items]


def _sort_key(value: Any):
    return (value is not None, value if value is not None else 0)


def parse_pipeline(pipeline: Sequence[dict]) -> tuple[dict, Optional[dict]]:
    """Split a pipeline into its ``$match`` filter and ``$group`` spec."""
    match: dict = {}
    group: Optional[dict] = None
    for stage in pipeline:
        if "$match" in stage:
            if group is not None:
                raise ValueError("$match after $group is not supported")
            match.update(stage["$match"])
        elif "$group" in stage:
            if group is not None:
                raise ValueError("Only one $group stage is supported")
            group = stage["$group"]
        else:
            raise ValueError(f"Unsupported pipeline stage: {list(stage)}")
    return match, group


def group_documents(docs: Iterable[dict], group: dict) -> list[dict]:
    """Apply a ``$group`` stage in-process, keeping first-seen group order."""
    key_expr = group.get("_id")
    accumulators = {name: spec for name, spec in group.items() if name != "_id"}

    buckets: dict[Any, dict] = {}
    for doc in docs:
        key = _resolve(doc, key_expr)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = {"_id": key}
            for name in accumulators:
                bucket[name] = 0
            buckets[key] = bucket
        for name, spec in accumulators.items():
            bucket[name] += _resolve(doc, _sum_operand(spec)) or 0
    return list(buckets.values())


def _sum_operand(spec: Any) -> Any:
    if not isinstance(spec, dict) or set(spec) != {"$sum"}:
        raise ValueError(f"Unsupported accumulator: {spec!r}")
    return spec["$sum"]


def _resolve(doc: dict, expr: Any) -> Any:
    if isinstance(expr, str) and expr.startswith("$"):
        return doc.get(expr[1:])
    return expr
