"""Persist an extracted quote / proforma invoice / purchase order document.

Two write paths:

* ``history``: flat one-row-per-line records in ``purchase_history`` or
  ``quote_history``.
* ``formal``: supplier -> components -> price quote -> quote line items ->
  proforma invoice.

Either path runs inside a single transaction. Only the proforma invoice step
is allowed to fail on its own (inside a savepoint); any other failure rolls
back every earlier insert.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.logging import get_logger
from models.supply_chain import (
    Company,
    Component,
    PriceQuote,
    PriceQuoteLineItem,
    ProformaInvoice,
    PurchaseHistory,
    QuoteHistory,
    Supplier,
)
from schemas.api.documents import DocumentInsertResponse, ExtractedDocument, ExtractedLineItem, InsertMode
from services.analytics_refresh import refresh_component_stats
from services.record_service import RecordInsertError

logger = get_logger(__name__)

DEFAULT_COMPANY_ID = 1
FORMAL_QUOTE_STATUS = "Accepted"
PROFORMA_STATUS = "Open"


def find_or_create_supplier(db: Session, supplier_name: str) -> int:
    """Fuzzy (case-insensitive substring) match on name, else create."""

    name = (supplier_name or "").strip()
    if not name:
        raise ValueError("supplier_name must not be blank")
    existing = db.scalars(
        select(Supplier.supplier_id)
        .where(Supplier.supplier_name.ilike(f"%{name}%"))
        .order_by(Supplier.supplier_id)
        .limit(1)
    ).first()
    if existing is not None:
        return existing
    supplier = Supplier(supplier_name=name)
    db.add(supplier)
    db.flush()
    logger.info("Created supplier %s for '%s'.", supplier.supplier_id, name)
    return supplier.supplier_id


def find_or_create_component(db: Session, item: ExtractedLineItem) -> int:
    """Exact match on model SKU, else create."""

    existing = db.scalars(
        select(Component.component_id)
        .where(Component.supplier_model == item.model_sku)
        .order_by(Component.component_id)
        .limit(1)
    ).first()
    if existing is not None:
        return existing
    component = Component(
        supplier_model=item.model_sku,
        internal_description=item.description,
        brand=item.brand,
    )
    db.add(component)
    db.flush()
    return component.component_id


def resolve_company_id(db: Session, requested: Optional[int]) -> int:
    if requested:
        return requested
    first = db.scalars(select(Company.company_id).order_by(Company.company_id).limit(1)).first()
    return first if first is not None else DEFAULT_COMPANY_ID


def insert_history(db: Session, document: ExtractedDocument) -> DocumentInsertResponse:
    step = "supplier"
    try:
        supplier_id = find_or_create_supplier(db, document.supplier_name)

        if document.document_type == "purchase_order":
            model = PurchaseHistory
            records = [
                PurchaseHistory(
                    supplier_id=supplier_id,
                    brand=item.brand,
                    description=item.description,
                    quantity=item.quantity,
                    unit_cost=item.unit_price,
                    currency=document.currency,
                    po_date=document.po_date,
                    po_number=document.po_number,
                )
                for item in document.line_items
            ]
        else:
            model = QuoteHistory
            records = [
                QuoteHistory(
                    supplier_id=supplier_id,
                    brand=item.brand,
                    description=item.description,
                    quantity=item.quantity,
                    unit_cost=item.unit_price,
                    currency=document.currency,
                    quote_date=document.quote_date or document.pi_date,
                    quote_number=document.quote_number or document.pi_number,
                )
                for item in document.line_items
            ]
        step = model.__tablename__
        db.add_all(records)
        db.flush()
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("History insert failed at %s", step)
        raise RecordInsertError(step, str(exc)) from exc

    logger.info("Inserted %d rows into %s.", len(records), model.__tablename__)
    if model is PurchaseHistory:
        refresh_component_stats(db)
    return DocumentInsertResponse(
        mode="history",
        supplier_id=supplier_id,
        table=model.__tablename__,
        records_inserted=len(records),
    )


def _insert_proforma(db: Session, document: ExtractedDocument, quote_id: int) -> Optional[int]:
    if document.document_type != "proforma_invoice" or not document.pi_number:
        return None
    try:
        with db.begin_nested():
            invoice = ProformaInvoice(
                quote_id=quote_id,
                pi_number=document.pi_number,
                pi_date=document.pi_date or date.today(),
                status=PROFORMA_STATUS,
            )
            db.add(invoice)
            db.flush()
    except SQLAlchemyError as exc:
        logger.warning("Failed to insert proforma invoice %s: %s", document.pi_number, exc)
        return None
    return invoice.pi_id


def insert_formal(db: Session, document: ExtractedDocument) -> DocumentInsertResponse:
    step = "supplier"
    try:
        supplier_id = find_or_create_supplier(db, document.supplier_name)

        step = "company"
        company_id = resolve_company_id(db, document.company_id)

        step = "components"
        component_ids = [find_or_create_component(db, item) for item in document.line_items]

        step = "price_quote"
        quote = PriceQuote(
            supplier_id=supplier_id,
            company_id=company_id,
            quote_date=document.quote_date or document.pi_date or date.today(),
            pi_number=document.pi_number or document.quote_number,
            currency=document.currency,
            total_value=document.computed_total(),
            status=FORMAL_QUOTE_STATUS,
            estimated_lead_time_days=document.lead_time_days,
        )
        db.add(quote)
        db.flush()

        step = "quote_line_items"
        line_items = [
            PriceQuoteLineItem(
                quote_id=quote.quote_id,
                component_id=component_id,
                supplier_description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                currency=document.currency,
            )
            for item, component_id in zip(document.line_items, component_ids)
        ]
        db.add_all(line_items)
        db.flush()

        step = "proforma_invoice"
        pi_id = _insert_proforma(db, document, quote.quote_id)

        step = "commit"
        quote_id = quote.quote_id
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Formal insert failed at %s", step)
        raise RecordInsertError(step, str(exc)) from exc

    logger.info("Inserted quote %s with %d line items (pi_id=%s).", quote_id, len(line_items), pi_id)
    return DocumentInsertResponse(
        mode="formal",
        supplier_id=supplier_id,
        quote_id=quote_id,
        pi_id=pi_id,
        line_items_count=len(line_items),
    )


def insert_document(db: Session, document: ExtractedDocument, mode: InsertMode = "formal") -> DocumentInsertResponse:
    if mode == "history":
        return insert_history(db, document)
    return insert_formal(db, document)


__all__ = [
    "find_or_create_component",
    "find_or_create_supplier",
    "insert_document",
    "insert_formal",
    "insert_history",
    "resolve_company_id",
]
