"""Concurrent, independent reads against the analytics sources."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Sequence

from sqlalchemy import or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from core.logging import get_logger
from services.keyword_extractor import without_terms
from services.query_sources import QuerySource

logger = get_logger(__name__)

SessionFactory = Callable[[], Session]
Row = Dict[str, Any]


class SourceQueryError(RuntimeError):
    """A single source query failed."""

    def __init__(self, source_name: str, cause: BaseException) -> None:
        super().__init__(f"{source_name} query failed: {cause}")
        self.source_name = source_name
        self.cause = cause


def filter_terms(source: QuerySource, keywords: Sequence[str]) -> List[str]:
    """Distinct keywords, first-seen order, that this source actually filters on."""
    return list(dict.fromkeys(without_terms(keywords, source.keyword_exclusions)))


def build_source_query(source: QuerySource, keywords: Sequence[str]) -> Select:
    """OR of ``column ILIKE %keyword%`` for every keyword x column, newest first.

    With no usable keywords the predicate is dropped and the smaller default
    limit applies.
    """

    table = source.table
    statement = select(table)
    terms = filter_terms(source, keywords)
    if terms:
        predicates = [
            table.c[column].ilike(f"%{term}%")
            for term in terms
            for column in source.filter_columns
        ]
        statement = statement.where(or_(*predicates))
        limit = source.limit
    else:
        limit = source.default_limit
    if source.order_column is not None:
        statement = statement.order_by(table.c[source.order_column].desc())
    return statement.limit(limit)


def fetch_source_rows(session_factory: SessionFactory, source: QuerySource, keywords: Sequence[str]) -> List[Row]:
    statement = build_source_query(source, keywords)
    session = session_factory()
    try:
        result = session.execute(statement)
        rows = [dict(row) for row in result.mappings().all()]
    finally:
        session.close()
    logger.debug("Source %s returned %d rows.", source.name, len(rows))
    return rows


async def fetch_context(
    keywords: Sequence[str],
    sources: Sequence[QuerySource],
    *,
    session_factory: SessionFactory,
    tolerate_failures: bool = False,
) -> Dict[str, List[Row]]:
    """Query every source concurrently and wait for all of them.

    Each source gets its own session. By default the first failure aborts the
    whole fan-out; with ``tolerate_failures`` a failing source yields no rows.
    """

    async def _run(source: QuerySource) -> List[Row]:
        try:
            return await asyncio.to_thread(fetch_source_rows, session_factory, source, keywords)
        except Exception as exc:
            if not tolerate_failures:
                raise SourceQueryError(source.name, exc) from exc
            logger.warning("Source %s failed; continuing without it: %s", source.name, exc, exc_info=True)
            return []

    results = await asyncio.gather(*(_run(source) for source in sources))
    return {source.name: rows for source, rows in zip(sources, results)}


__all__ = [
    "SourceQueryError",
    "build_source_query",
    "fetch_context",
    "fetch_source_rows",
    "filter_terms",
]
