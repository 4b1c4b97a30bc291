# Overview: Cart session for the sell page; scanned lines are sold through the ledger at checkout.

"""
Cart Session

A cart lives for one visit to the sell page. Scanning only touches the
cart; stock moves at checkout, one ledger sell() per line.

Checkout is not atomic. Lines are sold in order; if a later line fails,
earlier lines from the same checkout stay sold and the cart is kept as
it was, so the operator sees every line including the ones already
posted. The per-line results say which is which.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field

from ..models import Product
from ..validation import ValidationError
from .inventory_service import InventoryLedger, ProductNotFoundError, SaleError


class CartLineNotFoundError(LookupError):
    """Raised for a line index that is not in the cart."""


@dataclass
class CartLine:
    product_id: int
    name: str
    price: float
    quantity: int
    barcode: str | None = None

    @property
    def subtotal(self) -> float:
        return self.quantity * self.price

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            product_id=data["product_id"],
            name=data.get("name", ""),
            price=data.get("price", 0),
            quantity=data.get("quantity", 1),
            barcode=data.get("barcode"),
        )


@dataclass(frozen=True)
class ScanResult:
    action: str  # "added" | "incremented"
    product: Product
    line: CartLine


@dataclass(frozen=True)
class LineResult:
    line: CartLine
    ok: bool
    message: str
    reason: str | None = None
    remaining: int | None = None

    def to_dict(self) -> dict:
        return {
            "line": self.line.to_dict(),
            "ok": self.ok,
            "message": self.message,
            "reason": self.reason,
            "remaining": self.remaining,
        }


@dataclass(frozen=True)
class CheckoutResult:
    ok: bool
    total: float = 0
    items_sold: int = 0
    lines: list[LineResult] = field(default_factory=list)

    @property
    def failures(self) -> list[LineResult]:
        return [r for r in self.lines if not r.ok]

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "total": self.total,
            "items_sold": self.items_sold,
            "lines": [r.to_dict() for r in self.lines],
            "failures": [f"{r.line.name}: {r.message}" for r in self.failures],
        }


class CartSession:
    def __init__(self, ledger: InventoryLedger, lines: list[CartLine] | None = None):
        self.ledger = ledger
        self.lines: list[CartLine] = list(lines or [])

    def __len__(self) -> int:
        return len(self.lines)

    @property
    def total(self) -> float:
        return sum(line.subtotal for line in self.lines)

    def to_list(self) -> list[dict]:
        return [line.to_dict() for line in self.lines]

    def scan(self, barcode: str) -> ScanResult:
        code = (barcode or "").strip()
        if not code:
            raise ValidationError("Please scan or enter barcode")

        product = self.ledger.find_by_barcode(code)
        if product is None:
            raise ProductNotFoundError("Product not found!", details={"barcode": code})

        for line in self.lines:
            if line.product_id == product.id:
                line.quantity += 1
                return ScanResult(action="incremented", product=product, line=line)

        line = CartLine(
            product_id=product.id,
            name=product.name,
            price=product.price,
            quantity=1,
            barcode=product.barcode,
        )
        self.lines.append(line)
        return ScanResult(action="added", product=product, line=line)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.lines):
            raise CartLineNotFoundError(f"No cart line at index {index}")

    def set_line_quantity(self, index: int, quantity: int) -> None:
        """Set a line's quantity; anything below 1 removes the line."""
        self._check_index(index)
        if quantity < 1:
            del self.lines[index]
            return
        self.lines[index].quantity = quantity

    def remove_line(self, index: int) -> None:
        self._check_index(index)
        del self.lines[index]

    def clear(self) -> None:
        self.lines = []

    def checkout(self) -> CheckoutResult:
        """
        Sell every line through the ledger.

        All lines sold: returns the total and clears the cart.
        Any line failed: returns per-line results and leaves the cart as is.
        Lines sold before a failure are not reversed.
        """
        if not self.lines:
            raise ValidationError("Cart is empty")

        results: list[LineResult] = []
        for line in self.lines:
            try:
                sold = self.ledger.sell(line.product_id, line.quantity)
            except SaleError as exc:
                results.append(LineResult(line=line, ok=False, message=str(exc), reason=exc.reason))
            else:
                results.append(LineResult(line=line, ok=True, message=sold.message, remaining=sold.remaining))

        if any(not r.ok for r in results):
            return CheckoutResult(ok=False, lines=results)

        total = self.total
        items_sold = len(self.lines)
        self.clear()
        return CheckoutResult(ok=True, total=total, items_sold=items_sold, lines=results)
