"""Read-only projections of the analytics views queried by the ask pipeline.

The views themselves are maintained in the database. These ``Table`` objects
live on their own ``MetaData`` so ``Base.metadata.create_all`` never tries to
create them; the test suite creates them as plain tables.
"""

from sqlalchemy import Column, Date, Float, Integer, MetaData, String, Table

analytics_metadata = MetaData()

purchase_orders_view = Table(
    "v_analytics_master",
    analytics_metadata,
    Column("po_item_id", Integer, primary_key=True),
    Column("po_number", String),
    Column("po_date", Date),
    Column("supplier_name", String),
    Column("model_sku", String),
    Column("component_name", String),
    Column("quantity", Float),
    Column("unit_cost", Float),
    Column("currency", String),
    Column("true_unit_cost_idr", Float),
)

quotes_view = Table(
    "v_quotes_analytics",
    analytics_metadata,
    Column("quote_line_id", Integer, primary_key=True),
    Column("quote_date", Date),
    Column("supplier_quote_ref", String),
    Column("supplier_name", String),
    Column("model_sku", String),
    Column("component_name", String),
    Column("unit_price", Float),
    Column("currency", String),
    Column("status", String),
)

component_stats_view = Table(
    "mv_component_analytics",
    analytics_metadata,
    Column("component_id", Integer, primary_key=True),
    Column("model_sku", String),
    Column("description", String),
    Column("average_true_unit_cost", Float),
    Column("min_price", Float),
    Column("max_price", Float),
    Column("number_of_po", Integer),
    Column("number_of_po_isl", Integer),
    Column("number_of_po_mbs", Integer),
    Column("number_of_po_icl", Integer),
)

supplier_performance_view = Table(
    "v_supplier_performance",
    analytics_metadata,
    Column("supplier_id", Integer, primary_key=True),
    Column("supplier_name", String),
    Column("total_pos", Integer),
    Column("total_spend_idr", Float),
    Column("avg_lead_time_days", Float),
    Column("on_time_rate", Float),
    Column("last_po_date", Date),
)

component_demand_view = Table(
    "v_component_demand",
    analytics_metadata,
    Column("component_id", Integer, primary_key=True),
    Column("model_sku", String),
    Column("component_name", String),
    Column("brand", String),
    Column("total_quantity", Float),
    Column("order_count", Integer),
    Column("last_po_date", Date),
)

payment_tracking_view = Table(
    "v_payment_tracking",
    analytics_metadata,
    Column("po_id", Integer, primary_key=True),
    Column("po_number", String),
    Column("po_date", Date),
    Column("supplier_name", String),
    Column("total_value", Float),
    Column("currency", String),
    Column("total_paid", Float),
    Column("outstanding_balance", Float),
    Column("payment_status", String),
)

landed_cost_view = Table(
    "v_landed_cost_summary",
    analytics_metadata,
    Column("po_id", Integer, primary_key=True),
    Column("po_number", String),
    Column("po_date", Date),
    Column("supplier_name", String),
    Column("po_value", Float),
    Column("currency", String),
    Column("import_duty", Float),
    Column("vat", Float),
    Column("income_tax", Float),
    Column("delivery_cost", Float),
    Column("other_fees", Float),
    Column("total_landed_costs", Float),
    Column("true_total_cost", Float),
)

__all__ = [
    "analytics_metadata",
    "component_demand_view",
    "component_stats_view",
    "landed_cost_view",
    "payment_tracking_view",
    "purchase_orders_view",
    "quotes_view",
    "supplier_performance_view",
]
