"""
Dependency injection container for FastAPI.

Provides use case instances to route handlers. Tests swap any of these
through ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends, Request

from jewelpos.application.use_cases import (
    CheckoutUseCase,
    ConvertMemoUseCase,
    GetSaleUseCase,
    ListMemosUseCase,
    PricingPreviewUseCase,
    ReturnMemoUseCase,
)
from jewelpos.config import Settings, get_settings
from jewelpos.core.interfaces.identity import IIdentityProvider
from jewelpos.infrastructure.identity import RequestIdentityProvider


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Identity dependency
def get_identity(request: Request) -> IIdentityProvider:
    """Actor id from the header set by the auth proxy."""
    header = get_app_settings().api.actor_header
    return RequestIdentityProvider(request.headers.get(header))


# Use case dependencies
def get_checkout_use_case(
    identity: IIdentityProvider = Depends(get_identity),
) -> CheckoutUseCase:
    """Get checkout use case."""
    return CheckoutUseCase(identity=identity)


def get_pricing_preview_use_case() -> PricingPreviewUseCase:
    """Get pricing preview use case."""
    return PricingPreviewUseCase()


def get_sale_use_case() -> GetSaleUseCase:
    """Get sale lookup use case."""
    return GetSaleUseCase()


def get_convert_memo_use_case(
    identity: IIdentityProvider = Depends(get_identity),
) -> ConvertMemoUseCase:
    """Get memo conversion use case."""
    return ConvertMemoUseCase(identity=identity)


def get_return_memo_use_case(
    identity: IIdentityProvider = Depends(get_identity),
) -> ReturnMemoUseCase:
    """Get memo return use case."""
    return ReturnMemoUseCase(identity=identity)


def get_list_memos_use_case() -> ListMemosUseCase:
    """Get memo list use case."""
    return ListMemosUseCase()
