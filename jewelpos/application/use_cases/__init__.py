"""Application use cases."""

from jewelpos.application.use_cases.checkout import (
    CheckoutResult,
    CheckoutUseCase,
    StockChange,
)
from jewelpos.application.use_cases.convert_memo import ConvertMemoResult, ConvertMemoUseCase
from jewelpos.application.use_cases.get_sale import GetSaleUseCase, sale_to_response
from jewelpos.application.use_cases.list_memos import (
    ListMemosUseCase,
    MemoFilter,
    MemoListResult,
)
from jewelpos.application.use_cases.pricing_preview import PricingPreviewUseCase
from jewelpos.application.use_cases.remind_overdue_memos import (
    ReminderRunResult,
    RemindOverdueMemosUseCase,
)
from jewelpos.application.use_cases.return_memo import ReturnMemoResult, ReturnMemoUseCase

__all__ = [
    "CheckoutUseCase",
    "CheckoutResult",
    "StockChange",
    "ConvertMemoUseCase",
    "ConvertMemoResult",
    "ReturnMemoUseCase",
    "ReturnMemoResult",
    "PricingPreviewUseCase",
    "GetSaleUseCase",
    "sale_to_response",
    "ListMemosUseCase",
    "MemoFilter",
    "MemoListResult",
    "RemindOverdueMemosUseCase",
    "ReminderRunResult",
]
