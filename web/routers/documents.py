"""Insert extracted quote / PI / PO documents."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from database import get_db
from schemas.api.documents import DocumentInsertRequest, DocumentInsertResponse
from schemas.api.ask import ErrorResponse
from services.document_insert_service import insert_document
from services.record_service import RecordInsertError

router = APIRouter(prefix="/documents", tags=["Documents"])


@router.post(
    "/insert",
    response_model=DocumentInsertResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
    summary="Write an extracted document into the formal or history tables.",
)
def insert_extracted_document(payload: DocumentInsertRequest, db: Session = Depends(get_db)):
    try:
        return insert_document(db, payload.data, payload.mode)
    except RecordInsertError as exc:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to insert data", "details": str(exc)},
        )


__all__ = ["router"]
