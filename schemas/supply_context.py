"""Row schemas for the analytics sources that feed the ask prompt.

Every field is optional: the views are maintained outside this service and a
missing or NULL column must still render as a defined placeholder.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SourceRow(BaseModel):
    """Base class for a single row projected from an analytics view."""

    model_config = ConfigDict(extra="ignore", frozen=True)


class PurchaseOrderRow(SourceRow):
    po_date: Optional[date] = None
    po_number: Optional[str] = None
    supplier_name: Optional[str] = None
    model_sku: Optional[str] = None
    component_name: Optional[str] = None
    quantity: Optional[Decimal] = None
    true_unit_cost_idr: Optional[Decimal] = None


class QuoteRow(SourceRow):
    quote_date: Optional[date] = None
    supplier_quote_ref: Optional[str] = None
    supplier_name: Optional[str] = None
    model_sku: Optional[str] = None
    unit_price: Optional[Decimal] = None
    currency: Optional[str] = None
    status: Optional[str] = None


class ComponentStatsRow(SourceRow):
    description: Optional[str] = None
    average_true_unit_cost: Optional[Decimal] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    number_of_po: Optional[int] = None
    number_of_po_isl: Optional[int] = None
    number_of_po_mbs: Optional[int] = None
    number_of_po_icl: Optional[int] = None


class SupplierPerformanceRow(SourceRow):
    supplier_name: Optional[str] = None
    total_pos: Optional[int] = None
    total_spend_idr: Optional[Decimal] = None
    avg_lead_time_days: Optional[Decimal] = None
    on_time_rate: Optional[Decimal] = None
    last_po_date: Optional[date] = None


class ComponentDemandRow(SourceRow):
    model_sku: Optional[str] = None
    component_name: Optional[str] = None
    brand: Optional[str] = None
    total_quantity: Optional[Decimal] = None
    order_count: Optional[int] = None
    last_po_date: Optional[date] = None


class PaymentTrackingRow(SourceRow):
    po_number: Optional[str] = None
    po_date: Optional[date] = None
    supplier_name: Optional[str] = None
    total_value: Optional[Decimal] = None
    currency: Optional[str] = None
    total_paid: Optional[Decimal] = None
    outstanding_balance: Optional[Decimal] = None
    payment_status: Optional[str] = None


class LandedCostRow(SourceRow):
    po_number: Optional[str] = None
    po_date: Optional[date] = None
    supplier_name: Optional[str] = None
    po_value: Optional[Decimal] = None
    currency: Optional[str] = None
    total_landed_costs: Optional[Decimal] = None
    true_total_cost: Optional[Decimal] = None


__all__ = [
    "ComponentDemandRow",
    "ComponentStatsRow",
    "LandedCostRow",
    "PaymentTrackingRow",
    "PurchaseOrderRow",
    "QuoteRow",
    "SourceRow",
    "SupplierPerformanceRow",
]
