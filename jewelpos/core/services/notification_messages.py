"""Render notification payloads for receipts, stock alerts and memo reminders."""

from datetime import date
from decimal import Decimal

from jewelpos.core.entities.customer import Customer
from jewelpos.core.entities.notification import NotificationKind, NotificationPayload
from jewelpos.core.entities.product import Product
from jewelpos.core.entities.sale import SaleDocument


def format_amount(amount: Decimal, currency_symbol: str = "₹") -> str:
    return f"{currency_symbol}{amount:,.2f}"


def sale_receipt(
    sale: SaleDocument,
    customer: Customer,
    shop_name: str = "Jewellery100",
    currency_symbol: str = "₹",
) -> NotificationPayload:
    """Purchase receipt sent to the customer after checkout."""
    items = "\n".join(
        f"• {item.product_name} ({item.quantity}x) - "
        f"{format_amount(item.total_price, currency_symbol)}"
        for item in sale.items
    )
    title = "Memo" if sale.is_memo else "Purchase Receipt"

    lines = [
        f"*{shop_name} - {title}*",
        "",
        f"Dear {customer.full_name},",
        "",
        "Thank you for your purchase!",
        "",
        f"*Invoice #:* {sale.invoice_number}",
        "",
        "*Items:*",
        items,
        "",
        f"*Total Amount:* {format_amount(sale.total_amount, currency_symbol)}",
        f"*Payment Method:* {sale.payment_method.upper()}",
    ]
    if sale.memo_due_date:
        lines.append(f"*Return By:* {sale.memo_due_date.isoformat()}")
    lines += ["", "We appreciate your business!", "---", shop_name]

    return NotificationPayload(
        kind=NotificationKind.SALE_RECEIPT,
        message="\n".join(lines),
        reference=sale.invoice_number,
        data={
            "sale_id": sale.id,
            "customer_id": customer.id,
            "total_amount": str(sale.total_amount),
        },
    )


def low_stock_alert(product: Product, current_stock: int) -> NotificationPayload:
    """Staff alert when a sale leaves a product at or below its minimum level."""
    message = (
        "*Low Stock Alert*\n\n"
        f"Product: {product.name} ({product.sku})\n"
        f"Current Stock: {current_stock} units\n"
        f"Minimum Level: {product.min_stock_level} units\n\n"
        "Please reorder soon!"
    )
    return NotificationPayload(
        kind=NotificationKind.LOW_STOCK_ALERT,
        message=message,
        reference=product.sku,
        data={
            "product_id": product.id,
            "current_stock": current_stock,
            "min_stock_level": product.min_stock_level,
        },
    )


def memo_reminder(
    memo: SaleDocument,
    customer: Customer,
    today: date,
    shop_name: str = "Jewellery100",
    currency_symbol: str = "₹",
) -> NotificationPayload:
    """Reminder to a customer holding items on an overdue memo."""
    days_overdue = (today - memo.memo_due_date).days if memo.memo_due_date else 0
    message = (
        f"*{shop_name} - Memo Reminder*\n\n"
        f"Dear {customer.full_name},\n\n"
        f"Memo {memo.invoice_number} for "
        f"{format_amount(memo.total_amount, currency_symbol)} was due on "
        f"{memo.memo_due_date.isoformat() if memo.memo_due_date else '-'}"
        f" ({days_overdue} days ago).\n"
        "Please visit us to confirm the purchase or return the items.\n"
        "---\n"
        f"{shop_name}"
    )
    return NotificationPayload(
        kind=NotificationKind.MEMO_REMINDER,
        message=message,
        reference=memo.invoice_number,
        data={"sale_id": memo.id, "days_overdue": days_overdue},
    )
