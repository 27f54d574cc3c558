"""Memo (goods on approval) endpoints."""

from fastapi import APIRouter, Depends, Query, status

from jewelpos.api.dependencies import (
    get_convert_memo_use_case,
    get_list_memos_use_case,
    get_return_memo_use_case,
)
from jewelpos.application.dto.requests import ConvertMemoRequest, ReturnMemoRequest
from jewelpos.application.dto.responses import (
    ErrorResponse,
    MemoListResponse,
    MemoReturnResponse,
    SaleDocumentResponse,
)
from jewelpos.application.use_cases.convert_memo import ConvertMemoUseCase
from jewelpos.application.use_cases.list_memos import ListMemosUseCase
from jewelpos.application.use_cases.return_memo import ReturnMemoUseCase

router = APIRouter(prefix="/api/memos", tags=["memos"])


@router.get(
    "",
    response_model=MemoListResponse,
    responses={400: {"model": ErrorResponse}},
)
async def list_memos(
    filter: str = Query(default="all", description="all, open, pending, overdue or due_soon"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    use_case: ListMemosUseCase = Depends(get_list_memos_use_case),
) -> MemoListResponse:
    """List memos with their urgency as of today."""
    result = await use_case.execute(filter, limit=limit, offset=offset)
    return use_case.to_response(result)


@router.post(
    "/{memo_id}/convert",
    response_model=SaleDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def convert_memo(
    memo_id: int,
    request: ConvertMemoRequest | None = None,
    use_case: ConvertMemoUseCase = Depends(get_convert_memo_use_case),
) -> SaleDocumentResponse:
    """Convert a pending memo into a paid invoice."""
    payment_method = request.payment_method if request else None
    result = await use_case.execute(memo_id, payment_method=payment_method)
    return use_case.to_response(result)


@router.post(
    "/{memo_id}/returns",
    response_model=MemoReturnResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def return_memo(
    memo_id: int,
    request: ReturnMemoRequest | None = None,
    use_case: ReturnMemoUseCase = Depends(get_return_memo_use_case),
) -> MemoReturnResponse:
    """Restock goods returned from a memo. Omitting lines returns everything."""
    result = await use_case.execute(memo_id, request)
    return use_case.to_response(result)
