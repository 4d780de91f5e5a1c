from __future__ import annotations

import json
import logging
import re
import uuid
from decimal import Decimal
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.enums import EntityKind
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .store import UNIQUE_INDEXES, DocumentStore, DuplicateKeyError, SortSpec, parse_pipeline

logger = logging.getLogger(__name__)

_FIELD_RE = re.compile(r"^\w+$")
_DUP_KEY_RE = re.compile(r"for key '(?:[\w]+\.)?(\w+)'")

_COMPARATORS = {"$gte": ">=", "$lte": "<=", "$gt": ">", "$lt": "<", "$ne": "<>"}


def index_name(kind: EntityKind, keys: Sequence[str]) -> str:
    return "uq_{}_{}".format(kind.value, "_".join(k.lower() for k in keys))


def _path(field: str) -> str:
    if not _FIELD_RE.match(field):
        raise ValueError(f"Invalid field name: {field!r}")
    return f"$.{field}"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _column(field: str, params: list, operand: Any) -> str:
    params.append(_path(field))
    if _is_number(operand):
        return "CAST(JSON_EXTRACT(doc, %s) AS DOUBLE)"
    return "JSON_UNQUOTE(JSON_EXTRACT(doc, %s))"


def compile_filter(filter: dict, params: list) -> str:
    """Translate a store filter into a SQL boolean expression over the ``doc`` JSON column."""
    clauses: list[str] = []
    for key, expected in filter.items():
        if key == "$or":
            parts = [compile_filter(sub, params) for sub in expected]
            clauses.append("(" + " OR ".join(parts or ["FALSE"]) + ")")
            continue

        if isinstance(expected, dict):
            for op, operand in expected.items():
                if op == "$in":
                    values = list(operand)
                    if not values:
                        clauses.append("FALSE")
                        continue
                    col = _column(key, params, values[0])
                    clauses.append(f"{col} IN ({', '.join(['%s'] * len(values))})")
                    params.extend(values)
                elif op in _COMPARATORS:
                    col = _column(key, params, operand)
                    clauses.append(f"{col} {_COMPARATORS[op]} %s")
                    params.append(operand)
                else:
                    raise ValueError(f"Unsupported filter operator: {op}")
        elif expected is None:
            params.extend([_path(key), _path(key)])
            clauses.append("(JSON_EXTRACT(doc, %s) IS NULL OR JSON_TYPE(JSON_EXTRACT(doc, %s)) = 'NULL')")
        else:
            col = _column(key, params, expected)
            clauses.append(f"{col} = %s")
            params.append(expected)

    return " AND ".join(clauses) if clauses else "TRUE"


def _plain(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


class MySQLDocumentStore(DocumentStore):
    """Document store on MySQL 8: one table per entity kind, JSON ``doc`` column.

    Unique indexes live on generated columns (see ``schema.sql``), so the
    database rejects duplicates even when two requests race past the
    service-level checks.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _table(kind: EntityKind) -> str:
        return EntityKind(kind).value

    @staticmethod
    def _load(row: dict) -> dict:
        doc = row["doc"]
        if isinstance(doc, (bytes, bytearray)):
            doc = doc.decode("utf-8")
        return json.loads(doc) if isinstance(doc, str) else dict(doc)

    def _raise_duplicate(self, kind: EntityKind, exc: Exception) -> None:
        logger.debug("Unique index rejected write on %s: %s", EntityKind(kind).value, exc)
        match = _DUP_KEY_RE.search(str(exc))
        for keys in UNIQUE_INDEXES.get(EntityKind(kind), ()):
            if match and match.group(1) == index_name(EntityKind(kind), keys):
                raise DuplicateKeyError(EntityKind(kind), keys) from exc
        raise DuplicateKeyError(EntityKind(kind), ()) from exc

    def find(self, kind: EntityKind, filter: dict, *, sort: Optional[SortSpec] = None) -> list[dict]:
        params: list = []
        where = compile_filter(filter, params)

        order = []
        for field, direction in sort or ():
            params.append(_path(field))
            order.append(f"JSON_UNQUOTE(JSON_EXTRACT(doc, %s)) {'DESC' if direction < 0 else 'ASC'}")
        primary_desc = bool(sort) and sort[0][1] < 0
        order.append("seq DESC" if primary_desc else "seq ASC")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT doc FROM `{self._table(kind)}` WHERE {where} ORDER BY {', '.join(order)}",
                tuple(params),
            )
            return [self._load(r) for r in fetchall(cur)]

    def find_one(self, kind: EntityKind, filter: dict) -> Optional[dict]:
        params: list = []
        where = compile_filter(filter, params)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT doc FROM `{self._table(kind)}` WHERE {where} ORDER BY seq ASC LIMIT 1",
                tuple(params),
            )
            row = fetchone(cur)
            return self._load(row) if row else None

    def find_by_id(self, kind: EntityKind, doc_id: str) -> Optional[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT doc FROM `{self._table(kind)}` WHERE id=%s", (str(doc_id),))
            row = fetchone(cur)
            return self._load(row) if row else None

    def create(self, kind: EntityKind, data: dict) -> dict:
        now = now_utc().isoformat()
        doc = dict(data)
        doc["id"] = uuid.uuid4().hex
        doc["createdAt"] = now
        doc["updatedAt"] = now

        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO `{self._table(kind)}`(id, doc) VALUES(%s, %s)",
                    (doc["id"], json.dumps(doc)),
                )
        except Exception as exc:
            if is_duplicate_key(exc):
                self._raise_duplicate(kind, exc)
            raise
        return doc

    def update_by_id(self, kind: EntityKind, doc_id: str, patch: dict) -> Optional[dict]:
        table = self._table(kind)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"SELECT doc FROM `{table}` WHERE id=%s FOR UPDATE", (str(doc_id),))
                row = fetchone(cur)
                if not row:
                    return None
                current = self._load(row)
                merged = {**current, **patch}
                merged["id"] = current["id"]
                merged["createdAt"] = current.get("createdAt")
                merged["updatedAt"] = now_utc().isoformat()
                cur.execute(f"UPDATE `{table}` SET doc=%s WHERE id=%s", (json.dumps(merged), current["id"]))
        except Exception as exc:
            if is_duplicate_key(exc):
                self._raise_duplicate(kind, exc)
            raise
        return merged

    def delete_by_id(self, kind: EntityKind, doc_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM `{self._table(kind)}` WHERE id=%s", (str(doc_id),))
            return cur.rowcount > 0

    def count(self, kind: EntityKind, filter: dict) -> int:
        params: list = []
        where = compile_filter(filter, params)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM `{self._table(kind)}` WHERE {where}", tuple(params))
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def aggregate(self, kind: EntityKind, pipeline: Sequence[dict]) -> list[dict]:
        match, group = parse_pipeline(pipeline)
        if group is None:
            return self.find(kind, match)

        select_params: list = []
        key_expr = group.get("_id")
        if isinstance(key_expr, str) and key_expr.startswith("$"):
            select_params.append(_path(key_expr[1:]))
            key_sql = "JSON_UNQUOTE(JSON_EXTRACT(doc, %s))"
        else:
            select_params.append(key_expr)
            key_sql = "%s"

        columns = [f"{key_sql} AS `_id`"]
        for name, spec in group.items():
            if name == "_id":
                continue
            if not _FIELD_RE.match(name) or not isinstance(spec, dict) or set(spec) != {"$sum"}:
                raise ValueError(f"Unsupported accumulator: {name}={spec!r}")
            operand = spec["$sum"]
            if isinstance(operand, str) and operand.startswith("$"):
                select_params.append(_path(operand[1:]))
                columns.append(f"COALESCE(SUM(CAST(JSON_EXTRACT(doc, %s) AS DOUBLE)), 0) AS `{name}`")
            else:
                select_params.append(operand)
                columns.append(f"SUM(%s) AS `{name}`")

        where_params: list = []
        where = compile_filter(match, where_params)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {', '.join(columns)} FROM `{self._table(kind)}` WHERE {where} GROUP BY `_id`",
                tuple(select_params + where_params),
            )
            return [{k: _plain(v) for k, v in r.items()} for r in fetchall(cur)]
