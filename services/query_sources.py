"""Catalogue of analytics sources consulted by the ask pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Mapping, Optional, Tuple, Type

from sqlalchemy import Table

from models.analytics_views import (
    component_demand_view,
    component_stats_view,
    landed_cost_view,
    payment_tracking_view,
    purchase_orders_view,
    quotes_view,
    supplier_performance_view,
)
from schemas.supply_context import (
    ComponentDemandRow,
    ComponentStatsRow,
    LandedCostRow,
    PaymentTrackingRow,
    PurchaseOrderRow,
    QuoteRow,
    SourceRow,
    SupplierPerformanceRow,
)

DEFAULT_PROFILE = "results"


@dataclass(frozen=True, eq=False)
class QuerySource:
    """How one view is filtered, ordered, capped and rendered into the prompt."""

    name: str
    table: Table
    filter_columns: Tuple[str, ...]
    order_column: Optional[str]
    limit: int
    default_limit: int
    tag: str
    heading: str
    note: str
    placeholder: str
    line_template: str
    row_model: Type[SourceRow]
    truncate: Mapping[str, int] = field(default_factory=dict)
    keyword_exclusions: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        if self.default_limit < 1 or self.limit <= self.default_limit:
            raise ValueError(
                f"{self.name}: filtered limit ({self.limit}) must exceed default limit ({self.default_limit})"
            )
        if not self.filter_columns:
            raise ValueError(f"{self.name}: at least one filter column is required")
        known = set(self.table.c.keys())
        missing = [col for col in self.filter_columns if col not in known]
        if self.order_column is not None and self.order_column not in known:
            missing.append(self.order_column)
        if missing:
            raise ValueError(f"{self.name}: unknown columns on {self.table.name}: {', '.join(missing)}")


PURCHASE_ORDERS = QuerySource(
    name="purchase_orders",
    table=purchase_orders_view,
    filter_columns=("supplier_name", "model_sku", "component_name"),
    order_column="po_date",
    limit=10,
    default_limit=5,
    tag="PO",
    heading="PURCHASE ORDERS (Actual Committed Spend)",
    note="'True Cost' includes landed costs. Use this for \"Last Price Paid\".",
    placeholder="(No matching POs found)",
    line_template=(
        "[PO] Date: {po_date}, Supplier: {supplier_name}, SKU: {model_sku}, Item: {component_name}, "
        "Qty: {quantity}, True Cost: {true_unit_cost_idr} IDR"
    ),
    row_model=PurchaseOrderRow,
    truncate={"component_name": 30},
)

PRICE_QUOTES = QuerySource(
    name="price_quotes",
    table=quotes_view,
    filter_columns=("supplier_name", "model_sku", "component_name"),
    order_column="quote_date",
    limit=10,
    default_limit=5,
    tag="QUOTE",
    heading="PRICE QUOTES (Supplier Offers)",
    note="Recent offers. Compare these against POs to see if prices are improving.",
    placeholder="(No matching Quotes found)",
    line_template=(
        "[QUOTE] Date: {quote_date}, Ref: {supplier_quote_ref}, Supplier: {supplier_name}, SKU: {model_sku}, "
        "Price: {unit_price} {currency}, Status: {status}"
    ),
    row_model=QuoteRow,
)

HISTORICAL_STATS = QuerySource(
    name="historical_stats",
    table=component_stats_view,
    filter_columns=("model_sku", "description"),
    order_column=None,
    limit=5,
    default_limit=3,
    tag="STATS",
    heading="HISTORICAL STATISTICS (Long-term)",
    note="Use for Averages, Min/Max records, and Company Volume (ICL/ISL/MBS).",
    placeholder="(No statistics found)",
    line_template=(
        "[STATS] Item: {description}, Avg True Cost: {average_true_unit_cost} IDR, Min: {min_price}, "
        "Max: {max_price}, Total Orders: {number_of_po} "
        "(ISL={number_of_po_isl}, MBS={number_of_po_mbs}, ICL={number_of_po_icl})"
    ),
    row_model=ComponentStatsRow,
)

SUPPLIER_PERFORMANCE = QuerySource(
    name="supplier_performance",
    table=supplier_performance_view,
    filter_columns=("supplier_name",),
    order_column="last_po_date",
    limit=5,
    default_limit=3,
    tag="SUPPLIER",
    heading="SUPPLIER PERFORMANCE",
    note="Spend, order count and delivery reliability per supplier.",
    placeholder="(No supplier performance data found)",
    line_template=(
        "[SUPPLIER] Supplier: {supplier_name}, POs: {total_pos}, Total Spend: {total_spend_idr} IDR, "
        "Avg Lead Time: {avg_lead_time_days} days, On-Time Rate: {on_time_rate}, Last PO: {last_po_date}"
    ),
    row_model=SupplierPerformanceRow,
    # Analytical words match far too many supplier names as substrings.
    keyword_exclusions=frozenset(
        {"total", "spend", "best", "top", "supplier", "suppliers", "performance", "lead", "time"}
    ),
)

COMPONENT_DEMAND = QuerySource(
    name="component_demand",
    table=component_demand_view,
    filter_columns=("model_sku", "component_name", "brand"),
    order_column="last_po_date",
    limit=5,
    default_limit=3,
    tag="DEMAND",
    heading="COMPONENT DEMAND",
    note="Total ordered quantity per component. Use for volume and reorder questions.",
    placeholder="(No component demand data found)",
    line_template=(
        "[DEMAND] SKU: {model_sku}, Item: {component_name}, Brand: {brand}, Total Qty: {total_quantity}, "
        "Orders: {order_count}, Last PO: {last_po_date}"
    ),
    row_model=ComponentDemandRow,
    truncate={"component_name": 30},
)

PAYMENT_TRACKING = QuerySource(
    name="payment_tracking",
    table=payment_tracking_view,
    filter_columns=("supplier_name", "po_number"),
    order_column="po_date",
    limit=5,
    default_limit=3,
    tag="PAYMENT",
    heading="PAYMENT TRACKING",
    note="Amounts paid and outstanding per PO.",
    placeholder="(No payment records found)",
    line_template=(
        "[PAYMENT] PO: {po_number}, Date: {po_date}, Supplier: {supplier_name}, Value: {total_value} {currency}, "
        "Paid: {total_paid}, Outstanding: {outstanding_balance}, Status: {payment_status}"
    ),
    row_model=PaymentTrackingRow,
)

LANDED_COSTS = QuerySource(
    name="landed_costs",
    table=landed_cost_view,
    filter_columns=("supplier_name", "po_number"),
    order_column="po_date",
    limit=5,
    default_limit=3,
    tag="LANDED",
    heading="LANDED COSTS (Duties, Taxes, Delivery)",
    note="True total cost = PO value + all landed costs.",
    placeholder="(No landed cost data found)",
    line_template=(
        "[LANDED] PO: {po_number}, Date: {po_date}, Supplier: {supplier_name}, PO Value: {po_value} {currency}, "
        "Landed Costs: {total_landed_costs}, True Total: {true_total_cost}"
    ),
    row_model=LandedCostRow,
)

SOURCE_PROFILES: Dict[str, Tuple[QuerySource, ...]] = {
    "results": (PURCHASE_ORDERS, PRICE_QUOTES, HISTORICAL_STATS),
    "extended": (
        PURCHASE_ORDERS,
        PRICE_QUOTES,
        HISTORICAL_STATS,
        SUPPLIER_PERFORMANCE,
        COMPONENT_DEMAND,
        PAYMENT_TRACKING,
        LANDED_COSTS,
    ),
}


def get_profile(name: str) -> Tuple[QuerySource, ...]:
    try:
        return SOURCE_PROFILES[name]
    except KeyError as exc:
        raise ValueError(f"unknown source profile: {name}") from exc


__all__ = [
    "COMPONENT_DEMAND",
    "DEFAULT_PROFILE",
    "HISTORICAL_STATS",
    "LANDED_COSTS",
    "PAYMENT_TRACKING",
    "PRICE_QUOTES",
    "PURCHASE_ORDERS",
    "QuerySource",
    "SOURCE_PROFILES",
    "SUPPLIER_PERFORMANCE",
    "get_profile",
]
