"""Render analytics rows into the line-oriented blocks embedded in the prompt."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Mapping, Sequence

from pydantic import ValidationError

from core.logging import get_logger
from schemas.supply_context import SourceRow
from services.query_sources import QuerySource

logger = get_logger(__name__)

MISSING_VALUE = "N/A"


def render_value(value: Any) -> str:
    if value is None:
        return MISSING_VALUE
    if isinstance(value, Decimal):
        if not value.is_finite():
            return str(value)
        if value == value.to_integral_value():
            return str(value.quantize(Decimal(1)))
        return format(value.normalize(), "f")
    return str(value)


def _coerce_row(source: QuerySource, row: Mapping[str, Any]) -> SourceRow:
    try:
        return source.row_model.model_validate(dict(row))
    except ValidationError as exc:
        invalid = {error["loc"][0] for error in exc.errors() if error.get("loc")}
        logger.warning("Dropping invalid %s fields %s: %s", source.name, sorted(map(str, invalid)), exc)
        cleaned = {key: value for key, value in row.items() if key not in invalid}
        return source.row_model.model_validate(cleaned)


def format_row(source: QuerySource, row: Mapping[str, Any]) -> str:
    record = _coerce_row(source, row)
    values = {name: render_value(getattr(record, name)) for name in type(record).model_fields}
    for name, width in source.truncate.items():
        if values.get(name, MISSING_VALUE) != MISSING_VALUE:
            values[name] = values[name][:width]
    return source.line_template.format(**values)


def format_source(source: QuerySource, rows: Sequence[Mapping[str, Any]]) -> str:
    """One line per row, newline-joined, no trailing newline. Empty rows give ``""``."""
    return "\n".join(format_row(source, row) for row in rows)


def format_context(
    sources: Sequence[QuerySource],
    rows_by_source: Mapping[str, Sequence[Mapping[str, Any]]],
) -> Dict[str, str]:
    return {source.name: format_source(source, rows_by_source.get(source.name, ())) for source in sources}


__all__ = ["MISSING_VALUE", "format_context", "format_row", "format_source", "render_value"]
