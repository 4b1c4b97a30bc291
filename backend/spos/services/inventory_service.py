# Overview: Inventory ledger; products and sale records kept as whole collections in the store.

"""
Inventory Ledger

Owns two collections: products and sales. Every operation re-reads the
whole collection from the store, mutates it in memory and writes the
whole collection back, so a read after a write always sees the write.

INVARIANT: sell() never drives a quantity below zero. A sell that asks
for more than is on hand fails closed: no product write, no sale record.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models import Product, SaleRecord
from ..time_utils import now_iso, parse_iso_datetime
from ..validation import ValidationError
from .storage_service import KeyValueStore, PRODUCTS_KEY, SALES_KEY, next_record_id


class SaleError(Exception):
    """Raised when a sell cannot be performed. reason is a stable code."""
    reason = "sale_failed"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ProductNotFoundError(SaleError, LookupError):
    reason = "not_found"


class InsufficientStockError(SaleError):
    reason = "insufficient_stock"


@dataclass(frozen=True)
class SellResult:
    message: str
    remaining: int
    sale: SaleRecord


class InventoryLedger:
    def __init__(self, store: KeyValueStore):
        self.store = store

    # -- products ---------------------------------------------------------

    def _load_products(self) -> list[dict]:
        return self.store.read_collection(PRODUCTS_KEY)

    def _save_products(self, rows: list[dict]) -> None:
        self.store.write_collection(PRODUCTS_KEY, rows)

    def list_products(self) -> list[Product]:
        return [Product.from_dict(row) for row in self._load_products()]

    def get_product(self, product_id: int) -> Product | None:
        for row in self._load_products():
            if row.get("id") == product_id:
                return Product.from_dict(row)
        return None

    def find_by_barcode(self, code: str) -> Product | None:
        """First product whose barcode equals code exactly."""
        for row in self._load_products():
            if row.get("barcode") == code:
                return Product.from_dict(row)
        return None

    def create(self, draft: dict) -> Product:
        """
        Append a product built from an already-validated draft.

        Assigns id and created_at; any id/created_at in the draft is ignored.
        """
        rows = self._load_products()
        fields = {k: v for k, v in draft.items() if k in Product.MUTABLE_FIELDS}
        product = Product(
            id=next_record_id(rows),
            name=fields.get("name", ""),
            quantity=fields.get("quantity", 0),
            price=fields.get("price", 0),
            weight=fields.get("weight") or "",
            barcode=fields.get("barcode"),
            created_at=now_iso(),
        )
        rows.append(product.to_dict())
        self._save_products(rows)
        return product

    def update(self, product_id: int, fields: dict) -> bool:
        """
        Merge fields into the matching product.

        Returns False (and writes nothing) when no product has this id.
        """
        rows = self._load_products()
        for row in rows:
            if row.get("id") == product_id:
                for k, v in fields.items():
                    if k in Product.MUTABLE_FIELDS:
                        row[k] = v
                self._save_products(rows)
                return True
        return False

    def delete(self, product_id: int) -> None:
        """Remove the product if present. Deleting twice is harmless."""
        rows = self._load_products()
        kept = [row for row in rows if row.get("id") != product_id]
        self._save_products(kept)

    def restock(self, product_id: int, add_quantity: int) -> Product:
        """Add to an existing product's quantity."""
        product = self.get_product(product_id)
        if product is None:
            raise ProductNotFoundError("Product not found", details={"product_id": product_id})
        self.update(product_id, {"quantity": product.quantity + add_quantity})
        return self.get_product(product_id)

    # -- sales ------------------------------------------------------------

    def sell(self, product_id: int, quantity: int) -> SellResult:
        """
        Decrement stock and append a sale record.

        Raises:
            ValidationError: quantity is not a positive integer
            ProductNotFoundError: no product with this id
            InsufficientStockError: quantity exceeds stock on hand
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError("quantity must be a positive integer")

        rows = self._load_products()
        row = next((r for r in rows if r.get("id") == product_id), None)
        if row is None:
            raise ProductNotFoundError("Product not found", details={"product_id": product_id})

        on_hand = row.get("quantity", 0)
        if on_hand < quantity:
            raise InsufficientStockError(
                "Insufficient quantity",
                details={
                    "product_id": product_id,
                    "requested_quantity": quantity,
                    "on_hand": on_hand,
                },
            )

        row["quantity"] = on_hand - quantity
        sale = SaleRecord(
            product_id=product_id,
            product_name=row.get("name", ""),
            quantity=quantity,
            price=row["price"],
            total=row["price"] * quantity,
            sold_at=now_iso(),
        )

        sales = self.store.read_collection(SALES_KEY)
        sales.append(sale.to_dict())
        self.store.write_collection(SALES_KEY, sales)
        self._save_products(rows)

        return SellResult(
            message=f"Sold {quantity} of {sale.product_name}",
            remaining=row["quantity"],
            sale=sale,
        )

    def list_sales(self, since: str | None = None) -> list[SaleRecord]:
        """
        All sale records in the order they were made.

        since: optional ISO-8601 timestamp; keeps sales at or after it.
        """
        sales = [SaleRecord.from_dict(row) for row in self.store.read_collection(SALES_KEY)]
        if since is None:
            return sales
        try:
            cutoff = parse_iso_datetime(since)
        except ValueError:
            raise ValidationError("since must be an ISO-8601 datetime")
        if cutoff is None:
            return sales
        # records without a timestamp cannot be placed on the timeline
        return [s for s in sales if s.sold_at and parse_iso_datetime(s.sold_at) >= cutoff]
