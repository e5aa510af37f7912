"""Data-entry endpoints for the supply-chain tables."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database import get_db
from schemas.api.records import (
    ComponentCreate,
    POCostCreate,
    PurchaseCreate,
    QuoteCreate,
    RecordCreated,
    SupplierCreate,
    SupplierSummary,
)
from services import record_service
from services.record_service import RecordInsertError, RecordNotFoundError

router = APIRouter(prefix="/records", tags=["Records"])


def _insert_failed(exc: RecordInsertError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Failed to insert data", "details": str(exc)},
    )


def _not_found(exc: RecordNotFoundError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": f"{exc.entity}.not_found", "message": str(exc)},
    )


@router.get("/suppliers", response_model=List[SupplierSummary], summary="Look up suppliers by name.")
def list_suppliers(
    search: Optional[str] = Query(default=None, max_length=255),
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
) -> List[SupplierSummary]:
    suppliers = record_service.search_suppliers(db, search, limit=limit)
    return [SupplierSummary.model_validate(supplier) for supplier in suppliers]


@router.post("/suppliers", response_model=RecordCreated, status_code=status.HTTP_201_CREATED)
def create_supplier(payload: SupplierCreate, db: Session = Depends(get_db)):
    try:
        return record_service.create_supplier(db, payload)
    except RecordInsertError as exc:
        return _insert_failed(exc)


@router.post("/components", response_model=RecordCreated, status_code=status.HTTP_201_CREATED)
def create_component(payload: ComponentCreate, db: Session = Depends(get_db)):
    try:
        return record_service.create_component(db, payload)
    except RecordInsertError as exc:
        return _insert_failed(exc)


@router.post("/quotes", response_model=RecordCreated, status_code=status.HTTP_201_CREATED)
def create_quote(payload: QuoteCreate, db: Session = Depends(get_db)):
    try:
        return record_service.create_quote(db, payload)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except RecordInsertError as exc:
        return _insert_failed(exc)


@router.post("/purchases", response_model=RecordCreated, status_code=status.HTTP_201_CREATED)
def create_purchase(payload: PurchaseCreate, db: Session = Depends(get_db)):
    try:
        return record_service.create_purchase(db, payload)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except RecordInsertError as exc:
        return _insert_failed(exc)


@router.post("/purchases/{po_id}/costs", response_model=RecordCreated, status_code=status.HTTP_201_CREATED)
def add_purchase_cost(po_id: int, payload: POCostCreate, db: Session = Depends(get_db)):
    try:
        return record_service.add_po_cost(db, po_id, payload)
    except RecordNotFoundError as exc:
        raise _not_found(exc) from exc
    except RecordInsertError as exc:
        return _insert_failed(exc)


__all__ = ["router"]
