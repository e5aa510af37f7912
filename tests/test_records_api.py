from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import func, select

from models.supply_chain import Company, POCost, PriceQuote, PriceQuoteLineItem, Purchase, PurchaseLineItem, Supplier
from services import record_service
from web.routers import records as records_router


@pytest.fixture()
def records_client(session_factory):
    app = FastAPI()
    app.include_router(records_router.router, prefix="/api/v1")
    return TestClient(app)


@pytest.fixture()
def company_id(db_session) -> int:
    company = Company(legal_name="PT Indo Solar Lestari")
    db_session.add(company)
    db_session.commit()
    return company.company_id


def _create_supplier(client: TestClient, name: str = "Growatt New Energy") -> int:
    response = client.post("/api/v1/records/suppliers", json={"supplier_name": f"  {name} ", "location": "Shenzhen"})
    assert response.status_code == 201
    return response.json()["id"]


def _create_component(client: TestClient, sku: str = "MIN-5000TL-X") -> int:
    response = client.post(
        "/api/v1/records/components",
        json={"supplier_model": sku, "brand": "Growatt", "category": "on_grid_inverter"},
    )
    assert response.status_code == 201
    return response.json()["id"]


def test_supplier_is_created_and_searchable(records_client, db_session):
    supplier_id = _create_supplier(records_client)
    _create_supplier(records_client, "Schneider Electric")

    stored = db_session.get(Supplier, supplier_id)
    assert stored.supplier_name == "Growatt New Energy"

    response = records_client.get("/api/v1/records/suppliers", params={"search": "growatt"})
    assert response.status_code == 200
    assert [row["supplier_name"] for row in response.json()] == ["Growatt New Energy"]


def test_blank_supplier_name_is_rejected(records_client):
    response = records_client.post("/api/v1/records/suppliers", json={"supplier_name": "  "})
    assert response.status_code == 422


def test_quote_total_defaults_to_sum_of_lines(records_client, db_session, company_id):
    supplier_id = _create_supplier(records_client)
    component_id = _create_component(records_client)

    response = records_client.post(
        "/api/v1/records/quotes",
        json={
            "supplier_id": supplier_id,
            "company_id": company_id,
            "quote_date": "2025-12-01",
            "currency": "USD",
            "line_items": [
                {"component_id": component_id, "quantity": 10, "unit_price": 480},
                {"component_id": component_id, "quantity": 2, "unit_price": 500},
            ],
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["table"] == "4.0_price_quotes"
    assert body["line_items"] == 2
    quote = db_session.get(PriceQuote, body["id"])
    assert quote.total_value == 5800
    assert quote.status == "Open"
    lines = db_session.scalars(select(PriceQuoteLineItem).where(PriceQuoteLineItem.quote_id == quote.quote_id)).all()
    assert {line.currency for line in lines} == {"USD"}


def test_quote_with_unknown_component_is_not_found(records_client, db_session, company_id):
    supplier_id = _create_supplier(records_client)

    response = records_client.post(
        "/api/v1/records/quotes",
        json={
            "supplier_id": supplier_id,
            "company_id": company_id,
            "quote_date": "2025-12-01",
            "currency": "USD",
            "line_items": [{"component_id": 9999, "quantity": 1, "unit_price": 1}],
        },
    )

    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "component.not_found"
    assert db_session.scalar(select(func.count()).select_from(PriceQuote)) == 0


def test_purchase_and_costs(records_client, db_session):
    component_id = _create_component(records_client)

    response = records_client.post(
        "/api/v1/records/purchases",
        json={
            "po_number": "PO-ISL-2025-031",
            "po_date": "2025-11-12",
            "currency": "USD",
            "exchange_rate": 15800,
            "method_of_shipment": "Sea",
            "line_items": [{"component_id": component_id, "quantity": 20, "unit_cost": 455.5}],
        },
    )
    assert response.status_code == 201
    po_id = response.json()["id"]

    cost = records_client.post(
        f"/api/v1/records/purchases/{po_id}/costs",
        json={"cost_category": "local_import_duty", "amount": 12500000, "currency": "IDR"},
    )
    assert cost.status_code == 201
    assert cost.json()["table"] == "po_costs"

    purchase = db_session.get(Purchase, po_id)
    assert purchase.total_value == pytest.approx(9110.0)
    assert purchase.status == "Draft"
    assert db_session.scalar(select(func.count()).select_from(PurchaseLineItem)) == 1
    assert db_session.scalar(select(func.count()).select_from(POCost)) == 1


def test_unknown_cost_category_is_rejected(records_client):
    response = records_client.post(
        "/api/v1/records/purchases/1/costs",
        json={"cost_category": "lunch", "amount": 1, "currency": "IDR"},
    )
    assert response.status_code == 422


def test_cost_for_missing_purchase_is_not_found(records_client):
    response = records_client.post(
        "/api/v1/records/purchases/4242/costs",
        json={"cost_category": "down_payment", "amount": 1000, "currency": "USD"},
    )
    assert response.status_code == 404
    assert response.json()["detail"]["code"] == "purchase.not_found"


def test_purchase_and_cost_writes_refresh_component_stats(records_client, monkeypatch: pytest.MonkeyPatch):
    calls = []
    monkeypatch.setattr(record_service, "refresh_component_stats", lambda db: calls.append("refresh"))
    component_id = _create_component(records_client)

    purchase = records_client.post(
        "/api/v1/records/purchases",
        json={
            "po_number": "PO-ICL-2025-004",
            "po_date": "2025-08-01",
            "currency": "RMB",
            "line_items": [{"component_id": component_id, "quantity": 5, "unit_cost": 100}],
        },
    )
    assert purchase.status_code == 201
    assert calls == ["refresh"]

    cost = records_client.post(
        f"/api/v1/records/purchases/{purchase.json()['id']}/costs",
        json={"cost_category": "local_delivery", "amount": 350000, "currency": "IDR"},
    )
    assert cost.status_code == 201
    assert calls == ["refresh", "refresh"]
