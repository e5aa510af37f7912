"""Pydantic schemas for the data-entry endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Currency = Literal["USD", "RMB", "IDR"]

ProductCategory = Literal[
    "accessories",
    "batteries",
    "box_bsp",
    "inverter_charger",
    "mounting",
    "non_stock",
    "on_grid_inverter",
    "portable_power",
    "power_inverter",
    "pv_cable",
    "pv_module",
    "solar_charge_controller",
    "solar_pump_inverter",
    "standing_cabinet",
    "wallmount_cabinet",
]

QuoteStatus = Literal["Open", "Accepted", "Replaced", "Rejected", "Expired"]

PurchaseStatus = Literal[
    "Draft",
    "Sent",
    "Confirmed",
    "Replaced",
    "Partially Received",
    "Fully Received",
    "Cancelled",
]

MethodOfShipment = Literal["Sea", "Air", "Local Delivery"]

PAYMENT_CATEGORIES = (
    "down_payment",
    "balance_payment",
    "additional_balance_payment",
    "overpayment_credit",
)
BANK_FEE_CATEGORIES = (
    "full_amount_bank_fee",
    "telex_bank_fee",
    "value_today_bank_fee",
    "admin_bank_fee",
    "inter_bank_transfer_fee",
)
LANDED_COST_CATEGORIES = (
    "local_import_duty",
    "local_vat",
    "local_income_tax",
    "local_delivery",
    "demurrage_fee",
    "penalty_fee",
    "dhl_advance_payment_fee",
    "local_import_tax",
)
PO_COST_CATEGORIES = PAYMENT_CATEGORIES + BANK_FEE_CATEGORIES + LANDED_COST_CATEGORIES


def _strip_required(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{field_name} must be a non-empty string")
    return value.strip()


class SupplierCreate(BaseModel):
    supplier_name: str = Field(..., max_length=255)
    supplier_code: Optional[str] = Field(default=None, max_length=64)
    location: Optional[str] = None
    primary_contact_email: Optional[str] = None
    payment_terms_default: Optional[str] = None
    supplier_bank_details: Optional[str] = None

    @field_validator("supplier_name", mode="before")
    def _normalize_name(cls, value: Any) -> str:
        return _strip_required(value, "supplier_name")


class SupplierSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    supplier_id: int
    supplier_name: str
    location: Optional[str] = None
    payment_terms_default: Optional[str] = None


class ComponentCreate(BaseModel):
    supplier_model: str = Field(..., max_length=255, description="Supplier model number or SKU.")
    internal_description: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[ProductCategory] = None
    specifications: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("supplier_model", mode="before")
    def _normalize_model(cls, value: Any) -> str:
        return _strip_required(value, "supplier_model")


class QuoteLineItemInput(BaseModel):
    component_id: int
    supplier_description: Optional[str] = None
    quantity: float = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)


class QuoteCreate(BaseModel):
    supplier_id: int
    company_id: int
    quote_date: date
    pi_number: Optional[str] = None
    currency: Currency
    total_value: Optional[float] = Field(default=None, ge=0, description="Defaults to the sum of line totals.")
    status: QuoteStatus = "Open"
    estimated_lead_time_days: Optional[int] = Field(default=None, ge=0)
    line_items: List[QuoteLineItemInput] = Field(default_factory=list)


class PurchaseLineItemInput(BaseModel):
    component_id: int
    supplier_description: Optional[str] = None
    quantity: float = Field(..., gt=0)
    unit_cost: float = Field(..., ge=0)


class PurchaseCreate(BaseModel):
    po_number: str = Field(..., max_length=64)
    po_date: date
    quote_id: Optional[int] = None
    incoterms: Optional[str] = None
    method_of_shipment: Optional[MethodOfShipment] = None
    currency: Currency
    exchange_rate: Optional[float] = Field(default=None, gt=0)
    total_value: Optional[float] = Field(default=None, ge=0, description="Defaults to the sum of line totals.")
    payment_terms: Optional[str] = None
    freight_charges_intl: Optional[float] = Field(default=None, ge=0)
    estimated_delivery_date: Optional[date] = None
    status: PurchaseStatus = "Draft"
    line_items: List[PurchaseLineItemInput] = Field(default_factory=list)

    @field_validator("po_number", mode="before")
    def _normalize_po_number(cls, value: Any) -> str:
        return _strip_required(value, "po_number")


class POCostCreate(BaseModel):
    cost_category: str
    amount: float
    currency: Currency
    payment_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("cost_category")
    def _known_category(cls, value: str) -> str:
        if value not in PO_COST_CATEGORIES:
            raise ValueError(f"cost_category must be one of: {', '.join(PO_COST_CATEGORIES)}")
        return value


class RecordCreated(BaseModel):
    id: int
    table: str
    line_items: int = 0


__all__ = [
    "ComponentCreate",
    "Currency",
    "POCostCreate",
    "PO_COST_CATEGORIES",
    "PurchaseCreate",
    "PurchaseLineItemInput",
    "QuoteCreate",
    "QuoteLineItemInput",
    "RecordCreated",
    "SupplierCreate",
    "SupplierSummary",
]
