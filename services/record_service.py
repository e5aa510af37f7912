"""Data-entry operations for suppliers, components, quotes, purchase orders and costs."""

from __future__ import annotations

from typing import Iterable, List, Optional, Type

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.logging import get_logger
from database import Base
from models.supply_chain import (
    Company,
    Component,
    POCost,
    PriceQuote,
    PriceQuoteLineItem,
    Purchase,
    PurchaseLineItem,
    Supplier,
)
from schemas.api.records import (
    ComponentCreate,
    POCostCreate,
    PurchaseCreate,
    QuoteCreate,
    RecordCreated,
    SupplierCreate,
)
from services.analytics_refresh import refresh_component_stats

logger = get_logger(__name__)


class RecordNotFoundError(LookupError):
    def __init__(self, entity: str, record_id: int) -> None:
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id


class RecordInsertError(RuntimeError):
    """A write failed and the transaction was rolled back."""

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"{step}: {message}")
        self.step = step


def _require(db: Session, model: Type[Base], record_id: Optional[int], entity: str) -> None:
    if record_id is None:
        return
    if db.get(model, record_id) is None:
        raise RecordNotFoundError(entity, record_id)


def _require_components(db: Session, component_ids: Iterable[int]) -> None:
    for component_id in dict.fromkeys(component_ids):
        _require(db, Component, component_id, "component")


def _commit(db: Session, step: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Insert failed at %s", step)
        raise RecordInsertError(step, str(exc)) from exc


def create_supplier(db: Session, payload: SupplierCreate) -> RecordCreated:
    supplier = Supplier(**payload.model_dump())
    db.add(supplier)
    _commit(db, "supplier")
    logger.info("Created supplier %s (%s).", supplier.supplier_id, supplier.supplier_name)
    return RecordCreated(id=supplier.supplier_id, table=Supplier.__tablename__)


def search_suppliers(db: Session, search: Optional[str] = None, *, limit: int = 20) -> List[Supplier]:
    statement = select(Supplier).order_by(Supplier.supplier_name).limit(limit)
    term = (search or "").strip()
    if term:
        statement = statement.where(Supplier.supplier_name.ilike(f"%{term}%"))
    return list(db.scalars(statement))


def create_component(db: Session, payload: ComponentCreate) -> RecordCreated:
    component = Component(**payload.model_dump())
    db.add(component)
    _commit(db, "component")
    return RecordCreated(id=component.component_id, table=Component.__tablename__)


def create_quote(db: Session, payload: QuoteCreate) -> RecordCreated:
    _require(db, Supplier, payload.supplier_id, "supplier")
    _require(db, Company, payload.company_id, "company")
    _require_components(db, (item.component_id for item in payload.line_items))

    total_value = payload.total_value
    if total_value is None:
        total_value = sum(item.quantity * item.unit_price for item in payload.line_items)
    quote = PriceQuote(
        **payload.model_dump(exclude={"line_items", "total_value"}),
        total_value=total_value,
    )
    db.add(quote)
    try:
        db.flush()
    except SQLAlchemyError as exc:
        db.rollback()
        raise RecordInsertError("quote", str(exc)) from exc

    db.add_all(
        PriceQuoteLineItem(
            quote_id=quote.quote_id,
            currency=payload.currency,
            **item.model_dump(),
        )
        for item in payload.line_items
    )
    _commit(db, "quote_line_items")
    logger.info("Created quote %s with %d line items.", quote.quote_id, len(payload.line_items))
    return RecordCreated(id=quote.quote_id, table=PriceQuote.__tablename__, line_items=len(payload.line_items))


def create_purchase(db: Session, payload: PurchaseCreate) -> RecordCreated:
    _require(db, PriceQuote, payload.quote_id, "quote")
    _require_components(db, (item.component_id for item in payload.line_items))

    total_value = payload.total_value
    if total_value is None:
        total_value = sum(item.quantity * item.unit_cost for item in payload.line_items)
    purchase = Purchase(
        **payload.model_dump(exclude={"line_items", "total_value"}),
        total_value=total_value,
    )
    db.add(purchase)
    try:
        db.flush()
    except SQLAlchemyError as exc:
        db.rollback()
        raise RecordInsertError("purchase", str(exc)) from exc

    db.add_all(
        PurchaseLineItem(
            po_id=purchase.po_id,
            currency=payload.currency,
            **item.model_dump(),
        )
        for item in payload.line_items
    )
    _commit(db, "purchase_line_items")
    refresh_component_stats(db)
    logger.info("Created PO %s (%s) with %d line items.", purchase.po_id, purchase.po_number, len(payload.line_items))
    return RecordCreated(id=purchase.po_id, table=Purchase.__tablename__, line_items=len(payload.line_items))


def add_po_cost(db: Session, po_id: int, payload: POCostCreate) -> RecordCreated:
    _require(db, Purchase, po_id, "purchase")
    cost = POCost(po_id=po_id, **payload.model_dump())
    db.add(cost)
    _commit(db, "po_cost")
    refresh_component_stats(db)
    return RecordCreated(id=cost.cost_id, table=POCost.__tablename__)


__all__ = [
    "RecordInsertError",
    "RecordNotFoundError",
    "add_po_cost",
    "create_component",
    "create_purchase",
    "create_quote",
    "create_supplier",
    "search_suppliers",
]
