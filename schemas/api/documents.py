"""Schemas for inserting already-extracted quote / PI / PO documents."""

from __future__ import annotations

from datetime import date
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from schemas.api.records import Currency

DocumentType = Literal["quote", "proforma_invoice", "purchase_order"]
InsertMode = Literal["formal", "history"]


class ExtractedLineItem(BaseModel):
    model_sku: str = Field(..., min_length=1)
    description: Optional[str] = None
    brand: Optional[str] = None
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)


class ExtractedDocument(BaseModel):
    """Structured record produced by the document-extraction service."""

    document_type: DocumentType
    supplier_name: str = Field(..., min_length=1)
    company_id: Optional[int] = None
    quote_number: Optional[str] = None
    quote_date: Optional[date] = None
    pi_number: Optional[str] = None
    pi_date: Optional[date] = None
    po_number: Optional[str] = None
    po_date: Optional[date] = None
    currency: Currency
    total_value: Optional[float] = Field(default=None, ge=0)
    payment_terms: Optional[str] = None
    lead_time_days: Optional[int] = Field(default=None, ge=0)
    line_items: List[ExtractedLineItem] = Field(..., min_length=1)

    @field_validator("supplier_name", mode="before")
    def _normalize_supplier_name(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("supplier_name must be a non-empty string")
        return value.strip()

    def computed_total(self) -> float:
        if self.total_value is not None:
            return self.total_value
        return sum(item.quantity * item.unit_price for item in self.line_items)


class DocumentInsertRequest(BaseModel):
    data: ExtractedDocument
    mode: InsertMode = "formal"


class DocumentInsertResponse(BaseModel):
    success: bool = True
    mode: InsertMode
    supplier_id: int
    table: Optional[str] = None
    records_inserted: Optional[int] = None
    quote_id: Optional[int] = None
    pi_id: Optional[int] = None
    line_items_count: Optional[int] = None


__all__ = [
    "DocumentInsertRequest",
    "DocumentInsertResponse",
    "ExtractedDocument",
    "ExtractedLineItem",
]
