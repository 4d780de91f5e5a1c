from __future__ import annotations

import copy
import uuid
from typing import Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import EntityKind
from .store import (
    UNIQUE_INDEXES,
    DocumentStore,
    DuplicateKeyError,
    SortSpec,
    check_filter,
    group_documents,
    matches,
    parse_pipeline,
    sort_documents,
)


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store with the same unique-index behaviour as the MySQL one.

    Used by the testing settings and by the test-suite. Returned documents
    are copies, so callers cannot mutate stored state by accident.
    """

    def __init__(self):
        self._collections: dict[EntityKind, dict[str, dict]] = {kind: {} for kind in EntityKind}
        self._seq: dict[str, int] = {}
        self._next_seq = 0

    def _docs(self, kind: EntityKind) -> dict[str, dict]:
        return self._collections[EntityKind(kind)]

    def _check_unique(self, kind: EntityKind, candidate: dict, *, exclude_id: Optional[str] = None) -> None:
        for keys in UNIQUE_INDEXES.get(EntityKind(kind), ()):
            values = tuple(candidate.get(k) for k in keys)
            if any(v is None for v in values):
                continue
            for doc_id, doc in self._docs(kind).items():
                if doc_id == exclude_id:
                    continue
                if tuple(doc.get(k) for k in keys) == values:
                    raise DuplicateKeyError(EntityKind(kind), keys)

    def find(self, kind: EntityKind, filter: dict, *, sort: Optional[SortSpec] = None) -> list[dict]:
        check_filter(filter)
        hits = [(self._seq[doc_id], doc) for doc_id, doc in self._docs(kind).items() if matches(doc, filter)]
        return [copy.deepcopy(d) for d in sort_documents(hits, sort)]

    def find_one(self, kind: EntityKind, filter: dict) -> Optional[dict]:
        found = self.find(kind, filter)
        return found[0] if found else None

    def find_by_id(self, kind: EntityKind, doc_id: str) -> Optional[dict]:
        doc = self._docs(kind).get(str(doc_id))
        return copy.deepcopy(doc) if doc else None

    def create(self, kind: EntityKind, data: dict) -> dict:
        self._check_unique(kind, data)

        now = now_utc().isoformat()
        doc = copy.deepcopy(data)
        doc["id"] = uuid.uuid4().hex
        doc["createdAt"] = now
        doc["updatedAt"] = now

        self._docs(kind)[doc["id"]] = doc
        self._next_seq += 1
        self._seq[doc["id"]] = self._next_seq
        return copy.deepcopy(doc)

    def update_by_id(self, kind: EntityKind, doc_id: str, patch: dict) -> Optional[dict]:
        current = self._docs(kind).get(str(doc_id))
        if current is None:
            return None

        merged = {**current, **copy.deepcopy(patch)}
        merged["id"] = current["id"]
        merged["createdAt"] = current["createdAt"]
        merged["updatedAt"] = now_utc().isoformat()
        self._check_unique(kind, merged, exclude_id=current["id"])

        self._docs(kind)[current["id"]] = merged
        return copy.deepcopy(merged)

    def delete_by_id(self, kind: EntityKind, doc_id: str) -> bool:
        removed = self._docs(kind).pop(str(doc_id), None)
        if removed is None:
            return False
        self._seq.pop(removed["id"], None)
        return True

    def count(self, kind: EntityKind, filter: dict) -> int:
        check_filter(filter)
        return sum(1 for doc in self._docs(kind).values() if matches(doc, filter))

    def aggregate(self, kind: EntityKind, pipeline: Sequence[dict]) -> list[dict]:
        match, group = parse_pipeline(pipeline)
        docs = self.find(kind, match)
        if group is None:
            return docs
        return group_documents(docs, group)
