"""Natural-language questions over purchase orders, quotes and cost views."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from core.logging import get_logger
from schemas.api.ask import AskRequest, AskResponse, ErrorResponse
from services.ask_service import AskPipelineError, AskService
from web.deps import get_ask_service

logger = get_logger(__name__)

router = APIRouter(prefix="/ask", tags=["Ask"])

_ERROR_RESPONSES = {
    status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
}


async def _answer(service: AskService, payload: AskRequest, profile: str):
    try:
        result = await service.answer(payload.query, profile=profile)
    except AskPipelineError as exc:
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": str(exc)})
    except Exception:
        logger.exception("Ask [%s] failed unexpectedly.", profile)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Query failed"})
    return AskResponse(answer=result.answer)


@router.post(
    "",
    response_model=AskResponse,
    responses=_ERROR_RESPONSES,
    summary="Answer a question from POs, quotes and historical statistics.",
)
async def ask(payload: AskRequest, service: AskService = Depends(get_ask_service)):
    return await _answer(service, payload, "results")


@router.post(
    "/extended",
    response_model=AskResponse,
    responses=_ERROR_RESPONSES,
    summary="Answer a question using every analytics source, including payments and landed costs.",
)
async def ask_extended(payload: AskRequest, service: AskService = Depends(get_ask_service)):
    return await _answer(service, payload, "extended")


__all__ = ["router"]
