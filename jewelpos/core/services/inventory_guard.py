"""
Inventory guard.

Decides whether a stock reservation is admissible. Storage adapters apply
the same rule inside their atomic decrement; checkout calls it up front so
an obviously short cart fails before anything is written.
"""

from jewelpos.core.exceptions import InsufficientStockError, InvalidInputError


def reserve(
    current_stock: int,
    requested_quantity: int,
    allow_negative: bool = False,
    product_id: str = "",
) -> int:
    """
    Return the stock level after taking ``requested_quantity``.

    Raises:
        InvalidInputError: requested_quantity is not positive
        InsufficientStockError: stock would go negative and the shop
            does not allow negative stock
    """
    if requested_quantity <= 0:
        raise InvalidInputError("quantity", "must be positive", requested_quantity)

    new_stock = current_stock - requested_quantity
    if new_stock < 0 and not allow_negative:
        raise InsufficientStockError(
            product_id=product_id,
            requested=requested_quantity,
            available=current_stock,
        )
    return new_stock


def aggregate_quantities(lines: list[tuple[str, int]]) -> dict[str, int]:
    """Sum requested quantities per product, keeping first-seen order."""
    totals: dict[str, int] = {}
    for product_id, quantity in lines:
        totals[product_id] = totals.get(product_id, 0) + quantity
    return totals
