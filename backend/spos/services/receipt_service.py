from __future__ import annotations

from .cart_service import CheckoutResult

RECEIPT_WIDTH = 40


def format_receipt(
    result: CheckoutResult,
    *,
    shop_name: str = "SPOS",
    cashier_name: str = "",
    date_time: str = "",
    footer_note: str = "Thank you!",
) -> str:
    """
    Plain fixed-width receipt for a completed checkout.

    Only successful checkouts have a receipt; a partial failure raises ValueError.
    """
    if not result.ok:
        raise ValueError("No receipt for a checkout that did not complete")

    lines = [shop_name.center(RECEIPT_WIDTH), "-" * RECEIPT_WIDTH]
    if date_time:
        lines.append(f"Date    : {date_time}")
    if cashier_name:
        lines.append(f"Cashier : {cashier_name}")
    lines.append("-" * RECEIPT_WIDTH)
    lines.append(f"{'Item':<20}{'Qty':>4}{'Price':>8}{'Total':>8}")
    lines.append("-" * RECEIPT_WIDTH)
    for r in result.lines:
        item = r.line
        lines.append(f"{item.name[:20]:<20}{item.quantity:>4}{item.price:>8.2f}{item.subtotal:>8.2f}")
    lines.append("-" * RECEIPT_WIDTH)
    lines.append(f"{'TOTAL':<28}${result.total:>11.2f}")
    lines.append(f"{'Items sold':<28}{result.items_sold:>12}")
    if footer_note:
        lines.append(footer_note.center(RECEIPT_WIDTH))
    return "\n".join(lines)
