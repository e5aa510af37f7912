from __future__ import annotations

import asyncio
import threading
from datetime import date, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from models.analytics_views import purchase_orders_view, quotes_view, supplier_performance_view
from services import context_fanout
from services.context_fanout import SourceQueryError, build_source_query, fetch_context, filter_terms
from services.query_sources import (
    HISTORICAL_STATS,
    PRICE_QUOTES,
    PURCHASE_ORDERS,
    SUPPLIER_PERFORMANCE,
    get_profile,
)


def _seed_purchase_orders(session_factory, count: int, supplier: str = "Growatt", start: date = date(2025, 1, 1)):
    rows = [
        {
            "po_item_id": index + 1,
            "po_number": f"PO-ISL-{index:03d}",
            "po_date": start + timedelta(days=index),
            "supplier_name": supplier,
            "model_sku": f"SKU-{index}",
            "component_name": "Inverter 5kW",
            "quantity": 10.0,
            "unit_cost": 500.0,
            "currency": "USD",
            "true_unit_cost_idr": 8_000_000.0,
        }
        for index in range(count)
    ]
    with session_factory() as session:
        session.execute(purchase_orders_view.insert(), rows)
        session.commit()


def _run(keywords, sources, session_factory, **kwargs):
    return asyncio.run(fetch_context(keywords, sources, session_factory=session_factory, **kwargs))


def test_keywords_filter_with_or_across_columns(session_factory):
    _seed_purchase_orders(session_factory, 3, supplier="Schneider Electric")
    with session_factory() as session:
        session.execute(
            purchase_orders_view.insert(),
            [
                {"po_item_id": 100, "po_date": date(2025, 3, 1), "supplier_name": "Sako", "model_sku": "MCB-10A",
                 "component_name": "Breaker"},
                {"po_item_id": 101, "po_date": date(2025, 3, 2), "supplier_name": "Sako", "model_sku": "X1",
                 "component_name": "Cable"},
            ],
        )
        session.commit()

    rows = _run(["schneider", "mcb-10a"], (PURCHASE_ORDERS,), session_factory)["purchase_orders"]

    assert {row["supplier_name"] for row in rows} == {"Schneider Electric", "Sako"}
    assert len(rows) == 4
    assert all(row["model_sku"] != "X1" for row in rows)


def test_match_is_case_insensitive_substring(session_factory):
    _seed_purchase_orders(session_factory, 1, supplier="PT SCHNEIDER Indonesia")
    rows = _run(["schneider"], (PURCHASE_ORDERS,), session_factory)["purchase_orders"]
    assert len(rows) == 1


def test_filtered_results_are_newest_first_and_capped(session_factory):
    _seed_purchase_orders(session_factory, 15)
    rows = _run(["growatt"], (PURCHASE_ORDERS,), session_factory)["purchase_orders"]

    assert len(rows) == PURCHASE_ORDERS.limit
    dates = [row["po_date"] for row in rows]
    assert dates == sorted(dates, reverse=True)
    assert dates[0] == date(2025, 1, 15)


def test_no_keywords_returns_most_recent_default_rows(session_factory):
    _seed_purchase_orders(session_factory, 15)
    rows = _run([], (PURCHASE_ORDERS,), session_factory)["purchase_orders"]

    assert len(rows) == PURCHASE_ORDERS.default_limit
    assert rows[0]["po_date"] == date(2025, 1, 15)


def test_sources_without_rows_map_to_empty_lists(session_factory):
    result = _run(["xyz123nonexistent"], get_profile("results"), session_factory)
    assert result == {"purchase_orders": [], "price_quotes": [], "historical_stats": []}


def test_sources_are_queried_independently(session_factory):
    _seed_purchase_orders(session_factory, 2)
    with session_factory() as session:
        session.execute(
            quotes_view.insert(),
            [{"quote_line_id": 1, "quote_date": date(2025, 2, 1), "supplier_name": "Growatt", "model_sku": "SKU-9",
              "unit_price": 480.0, "currency": "USD", "status": "Open"}],
        )
        session.commit()

    result = _run(["growatt"], (PURCHASE_ORDERS, PRICE_QUOTES, HISTORICAL_STATS), session_factory)
    assert len(result["purchase_orders"]) == 2
    assert len(result["price_quotes"]) == 1
    assert result["historical_stats"] == []


def test_supplier_performance_ignores_analytical_terms(session_factory):
    with session_factory() as session:
        session.execute(
            supplier_performance_view.insert(),
            [
                {"supplier_id": 1, "supplier_name": "Total Solar Supply", "total_pos": 3},
                {"supplier_id": 2, "supplier_name": "Growatt", "total_pos": 5},
            ],
        )
        session.commit()

    assert filter_terms(SUPPLIER_PERFORMANCE, ["total", "spend", "growatt"]) == ["growatt"]
    rows = _run(["total", "spend", "growatt"], (SUPPLIER_PERFORMANCE,), session_factory)["supplier_performance"]
    assert [row["supplier_name"] for row in rows] == ["Growatt"]


def _compiled(statement) -> str:
    return str(statement.compile(compile_kwargs={"literal_binds": True}))


def test_only_excluded_terms_fall_back_to_default_limit():
    statement = build_source_query(SUPPLIER_PERFORMANCE, ["total", "best"])
    assert statement.whereclause is None
    assert _compiled(statement).endswith(f"LIMIT {SUPPLIER_PERFORMANCE.default_limit}")


def test_filtered_query_uses_filtered_limit():
    statement = build_source_query(PURCHASE_ORDERS, ["growatt"])
    assert statement.whereclause is not None
    assert _compiled(statement).endswith(f"LIMIT {PURCHASE_ORDERS.limit}")


def test_one_failing_source_aborts_the_fanout(session_factory, monkeypatch: pytest.MonkeyPatch):
    original = context_fanout.fetch_source_rows

    def flaky(factory, source, keywords):
        if source is PRICE_QUOTES:
            raise OperationalError("SELECT", {}, Exception("relation does not exist"))
        return original(factory, source, keywords)

    monkeypatch.setattr(context_fanout, "fetch_source_rows", flaky)

    with pytest.raises(SourceQueryError) as excinfo:
        _run(["growatt"], get_profile("results"), session_factory)
    assert excinfo.value.source_name == "price_quotes"


def test_failing_source_can_be_tolerated(session_factory, monkeypatch: pytest.MonkeyPatch):
    _seed_purchase_orders(session_factory, 2)
    original = context_fanout.fetch_source_rows

    def flaky(factory, source, keywords):
        if source is PRICE_QUOTES:
            raise OperationalError("SELECT", {}, Exception("relation does not exist"))
        return original(factory, source, keywords)

    monkeypatch.setattr(context_fanout, "fetch_source_rows", flaky)

    result = _run(["growatt"], get_profile("results"), session_factory, tolerate_failures=True)
    assert result["price_quotes"] == []
    assert len(result["purchase_orders"]) == 2


def test_sources_are_queried_concurrently(session_factory, monkeypatch: pytest.MonkeyPatch):
    sources = get_profile("results")
    # Every source blocks until all of them are in flight; a one-at-a-time
    # fan-out breaks the barrier instead.
    barrier = threading.Barrier(len(sources), timeout=2)
    seen = []

    def wait_for_all(factory, source, keywords):
        barrier.wait()
        seen.append(source.name)
        return [{"source": source.name}]

    monkeypatch.setattr(context_fanout, "fetch_source_rows", wait_for_all)

    result = _run(["growatt"], sources, session_factory)

    assert sorted(seen) == sorted(source.name for source in sources)
    assert list(result) == [source.name for source in sources]
    assert all(rows == [{"source": name}] for name, rows in result.items())


def test_repeated_keywords_filter_once():
    assert filter_terms(PURCHASE_ORDERS, ["mcb", "growatt", "mcb", "mcb"]) == ["mcb", "growatt"]
