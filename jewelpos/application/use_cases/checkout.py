"""
Checkout Use Case: commit a cart as an invoice or a memo.

All preconditions (actor, cart, customer, products, pricing, stock) are
checked before the first write. The header insert is the point of no
return; later storage failures surface as StorageFailureError and leave
the header in ``pending`` commit status for reconciliation.

Write order:
    header -> line items -> stock decrements -> inventory log -> committed
"""

from dataclasses import dataclass, field

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from jewelpos.application.dto.requests import CheckoutRequest
from jewelpos.application.dto.responses import SaleDocumentResponse
from jewelpos.application.use_cases.get_sale import sale_to_response
from jewelpos.application.use_cases.notify import recipient_for, send_best_effort
from jewelpos.config import Settings, get_logger, get_settings
from jewelpos.core.entities.customer import Customer
from jewelpos.core.entities.inventory import InventoryChangeType, InventoryLogEntry
from jewelpos.core.entities.notification import NotificationChannel
from jewelpos.core.entities.pricing import PricingLine
from jewelpos.core.entities.product import Product
from jewelpos.core.entities.sale import CommitStatus, DocumentType, SaleDocument
from jewelpos.core.exceptions import (
    CustomerNotFoundError,
    DuplicateInvoiceNumberError,
    EmptyCartError,
    InsufficientStockError,
    MissingCustomerError,
    ProductNotFoundError,
    StorageError,
    StorageFailureError,
    UnauthenticatedError,
)
from jewelpos.core.interfaces.customer_repository import ICustomerRepository
from jewelpos.core.interfaces.identity import IIdentityProvider
from jewelpos.core.interfaces.inventory_log_repository import IInventoryLogRepository
from jewelpos.core.interfaces.notification import INotificationDispatcher
from jewelpos.core.interfaces.product_repository import IProductRepository
from jewelpos.core.interfaces.sale_repository import ISaleRepository
from jewelpos.core.services import notification_messages
from jewelpos.core.services.inventory_guard import aggregate_quantities, reserve
from jewelpos.core.services.pricing_calculator import calculate_pricing
from jewelpos.core.services.transaction_builder import ResolvedLine, TransactionBuilder

logger = get_logger(__name__)


def require_actor(identity: IIdentityProvider | None) -> str:
    """Return the current actor id or raise UnauthenticatedError."""
    actor_id = identity.current_actor_id() if identity is not None else None
    if not actor_id:
        raise UnauthenticatedError()
    return actor_id


def builder_from_settings(settings: Settings) -> TransactionBuilder:
    return TransactionBuilder(
        invoice_prefix=settings.sales.invoice_prefix,
        memo_prefix=settings.sales.memo_prefix,
        memo_default_days=settings.sales.memo_default_days,
        default_payment_method=settings.sales.default_payment_method,
        money_places=settings.sales.money_places,
    )


def _log_invoice_number_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "invoice_number_collision",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


async def create_with_unique_number(
    sale_store: ISaleRepository,
    header: SaleDocument,
    next_number,
    attempts: int,
) -> int:
    """
    Insert ``header``, drawing a fresh number after each collision.

    ``next_number`` is called before every attempt after the first.

    Raises:
        DuplicateInvoiceNumberError: still colliding after ``attempts`` tries
    """
    first = True
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(attempts),
        retry=retry_if_exception_type(DuplicateInvoiceNumberError),
        before_sleep=_log_invoice_number_retry,
        reraise=True,
    ):
        with attempt:
            if not first:
                header.invoice_number = next_number()
            first = False
            return await sale_store.create(header)
    raise DuplicateInvoiceNumberError(header.invoice_number)


@dataclass
class StockChange:
    """Stock movement applied to one product."""

    product_id: str
    quantity: int
    new_stock: int

    @property
    def previous_stock(self) -> int:
        return self.new_stock + self.quantity


@dataclass
class CheckoutResult:
    """Result of a committed checkout."""

    sale: SaleDocument
    stock_changes: list[StockChange] = field(default_factory=list)
    low_stock_product_ids: list[str] = field(default_factory=list)
    notifications_sent: int = 0


class CheckoutUseCase:
    """Turn a cart into a committed invoice or memo and take the stock."""

    def __init__(
        self,
        product_store: IProductRepository | None = None,
        customer_store: ICustomerRepository | None = None,
        sale_store: ISaleRepository | None = None,
        inventory_log_store: IInventoryLogRepository | None = None,
        notifier: INotificationDispatcher | None = None,
        identity: IIdentityProvider | None = None,
        settings: Settings | None = None,
    ):
        self._product_store = product_store
        self._customer_store = customer_store
        self._sale_store = sale_store
        self._inventory_log_store = inventory_log_store
        self._notifier = notifier
        self._identity = identity
        self._settings = settings or get_settings()
        self._builder = builder_from_settings(self._settings)

    async def _get_product_store(self) -> IProductRepository:
        if self._product_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_product_store

            self._product_store = await get_product_store()
        return self._product_store

    async def _get_customer_store(self) -> ICustomerRepository:
        if self._customer_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_customer_store

            self._customer_store = await get_customer_store()
        return self._customer_store

    async def _get_sale_store(self) -> ISaleRepository:
        if self._sale_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_sale_store

            self._sale_store = await get_sale_store()
        return self._sale_store

    async def _get_inventory_log_store(self) -> IInventoryLogRepository:
        if self._inventory_log_store is None:
            from jewelpos.infrastructure.storage.sqlite import get_inventory_log_store

            self._inventory_log_store = await get_inventory_log_store()
        return self._inventory_log_store

    def _get_notifier(self) -> INotificationDispatcher:
        if self._notifier is None:
            from jewelpos.infrastructure.notifications import get_notification_dispatcher

            self._notifier = get_notification_dispatcher()
        return self._notifier

    async def execute(self, request: CheckoutRequest) -> CheckoutResult:
        """
        Commit the cart.

        Raises:
            UnauthenticatedError: no actor
            EmptyCartError: no lines
            MissingCustomerError: memo without a customer
            InvalidInputError: unknown customer/product or bad pricing input
            InsufficientStockError: a product is short, before or during commit
            StorageFailureError: a write failed after the header was stored
        """
        actor_id = require_actor(self._identity)
        allow_negative = self._settings.inventory.allow_negative_stock

        logger.info(
            "checkout_started",
            actor_id=actor_id,
            document_type=request.document_type.value,
            items=len(request.items),
        )

        # Preconditions, no writes
        if not request.items:
            raise EmptyCartError()

        if (
            request.document_type == DocumentType.MEMO
            and self._settings.sales.require_customer_for_memo
            and not request.customer_id
        ):
            raise MissingCustomerError(request.document_type.value)

        customer = await self._load_customer(request.customer_id)
        lines, products = await self._resolve_lines(request)

        breakdown = calculate_pricing(
            [line.pricing for line in lines],
            request.discount_percentage,
            request.tax_percentage,
        )

        requested = aggregate_quantities([(line.product.id, line.quantity) for line in lines])
        for product_id, quantity in requested.items():
            reserve(
                products[product_id].stock_quantity,
                quantity,
                allow_negative=allow_negative,
                product_id=product_id,
            )

        header = self._builder.build_document(
            document_type=request.document_type,
            lines=lines,
            breakdown=breakdown,
            created_by=actor_id,
            customer_id=request.customer_id,
            payment_method=request.payment_method,
            notes=request.notes,
            memo_days=request.memo_days,
            memo_due_date=request.memo_due_date,
        )

        sale, changes = await self._commit(header, requested, actor_id, allow_negative)
        result = CheckoutResult(sale=sale, stock_changes=changes)

        await self._notify(result, request, customer, products)

        logger.info(
            "checkout_complete",
            sale_id=result.sale.id,
            invoice_number=result.sale.invoice_number,
            document_type=result.sale.document_type.value,
            total=str(result.sale.total_amount),
        )
        return result

    async def _load_customer(self, customer_id: str | None) -> Customer | None:
        if not customer_id:
            return None
        store = await self._get_customer_store()
        customer = await store.get_by_id(customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    async def _resolve_lines(
        self, request: CheckoutRequest
    ) -> tuple[list[ResolvedLine], dict[str, Product]]:
        """Join cart lines with current product rows."""
        store = await self._get_product_store()
        products: dict[str, Product] = {}
        lines: list[ResolvedLine] = []

        for item in request.items:
            product = products.get(item.product_id)
            if product is None:
                product = await store.get_by_id(item.product_id)
                if product is None:
                    raise ProductNotFoundError(item.product_id)
                products[product.id] = product

            unit_price = item.unit_price if item.unit_price is not None else product.price
            lines.append(
                ResolvedLine(
                    product=product,
                    pricing=PricingLine(
                        unit_price=unit_price,
                        quantity=item.quantity,
                        discount_percentage=item.discount_percentage,
                    ),
                )
            )
        return lines, products

    async def _commit(
        self,
        header: SaleDocument,
        requested: dict[str, int],
        actor_id: str,
        allow_negative: bool,
    ) -> tuple[SaleDocument, list[StockChange]]:
        sale_store = await self._get_sale_store()
        product_store = await self._get_product_store()
        log_store = await self._get_inventory_log_store()
        items = header.items

        sale_id = await create_with_unique_number(
            sale_store,
            header,
            lambda: self._builder.generate_invoice_number(header.document_type),
            self._settings.sales.invoice_number_attempts,
        )
        header.id = sale_id
        logger.info(
            "commit_point_of_no_return",
            sale_id=sale_id,
            invoice_number=header.invoice_number,
        )

        try:
            header.items = await sale_store.add_line_items(sale_id, items)
        except StorageError as e:
            raise StorageFailureError("line_items", sale_id, str(e)) from e

        changes: list[StockChange] = []
        for product_id, quantity in requested.items():
            try:
                new_stock = await product_store.decrement_stock(
                    product_id, quantity, allow_negative=allow_negative
                )
            except (InsufficientStockError, ProductNotFoundError):
                # Lost a race with a concurrent checkout
                await self._abort(sale_store, product_store, sale_id, changes)
                raise
            except StorageError as e:
                raise StorageFailureError("stock_update", sale_id, str(e)) from e
            changes.append(StockChange(product_id, quantity, new_stock))

        for change in changes:
            try:
                await log_store.append(
                    InventoryLogEntry(
                        product_id=change.product_id,
                        change_type=InventoryChangeType.SOLD,
                        quantity_change=-change.quantity,
                        previous_quantity=change.previous_stock,
                        new_quantity=change.new_stock,
                        reference_id=sale_id,
                        created_by=actor_id,
                    )
                )
            except StorageError as e:
                raise StorageFailureError("inventory_log", sale_id, str(e)) from e

        try:
            await sale_store.update_commit_status(sale_id, CommitStatus.COMMITTED)
        except StorageError as e:
            raise StorageFailureError("commit", sale_id, str(e)) from e
        header.commit_status = CommitStatus.COMMITTED

        return header, changes

    async def _abort(
        self,
        sale_store: ISaleRepository,
        product_store: IProductRepository,
        sale_id: int,
        changes: list[StockChange],
    ) -> None:
        """Give back stock already taken and mark the document failed."""
        logger.warning(
            "checkout_stock_race",
            sale_id=sale_id,
            restoring=[c.product_id for c in changes],
        )
        try:
            for change in changes:
                await product_store.increment_stock(change.product_id, change.quantity)
        except StorageError as e:
            raise StorageFailureError("stock_restore", sale_id, str(e)) from e

        try:
            await sale_store.update_commit_status(sale_id, CommitStatus.FAILED)
        except StorageError as e:
            raise StorageFailureError("mark_failed", sale_id, str(e)) from e

    async def _notify(
        self,
        result: CheckoutResult,
        request: CheckoutRequest,
        customer: Customer | None,
        products: dict[str, Product],
    ) -> None:
        settings = self._settings.notifications
        if not settings.enabled:
            return

        dispatcher = self._get_notifier()

        if request.notify_channel and customer is not None:
            recipient = recipient_for(customer, request.notify_channel)
            if recipient:
                payload = notification_messages.sale_receipt(
                    result.sale,
                    customer,
                    shop_name=settings.shop_name,
                    currency_symbol=settings.currency_symbol,
                )
                if await send_best_effort(dispatcher, request.notify_channel, recipient, payload):
                    result.notifications_sent += 1
            else:
                logger.info(
                    "receipt_skipped_no_contact",
                    customer_id=customer.id,
                    channel=request.notify_channel.value,
                )

        if not self._settings.inventory.low_stock_alerts:
            return

        for change in result.stock_changes:
            product = products[change.product_id]
            if change.new_stock > product.min_stock_level:
                continue
            result.low_stock_product_ids.append(product.id)
            payload = notification_messages.low_stock_alert(product, change.new_stock)
            for admin in settings.admin_recipients:
                if await send_best_effort(dispatcher, NotificationChannel.SMS, admin, payload):
                    result.notifications_sent += 1

    def to_response(self, result: CheckoutResult) -> SaleDocumentResponse:
        """Convert result to API response."""
        return sale_to_response(
            result.sale, due_soon_days=self._settings.sales.memo_due_soon_days
        )
