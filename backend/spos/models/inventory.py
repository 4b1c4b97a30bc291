from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import ClassVar


@dataclass
class Product:
    """
    Product master data, stored as one element of the products collection.

    id is assigned at creation from the millisecond clock and never changes.
    barcode is a lookup key only; nothing enforces uniqueness.
    """
    id: int
    name: str
    quantity: int
    price: float
    weight: str = ""
    barcode: str | None = None
    created_at: str | None = None

    MUTABLE_FIELDS: ClassVar[frozenset] = frozenset({"name", "quantity", "price", "weight", "barcode"})

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} barcode={self.barcode!r} qty={self.quantity}>"

    @property
    def stock_value(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "Product":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            quantity=data.get("quantity", 0),
            price=data.get("price", 0),
            weight=data.get("weight") or "",
            barcode=data.get("barcode"),
            created_at=data.get("created_at"),
        )


@dataclass(frozen=True)
class SaleRecord:
    """Append-only record of one successful sell; snapshots name and price."""
    product_id: int
    product_name: str
    quantity: int
    price: float
    total: float
    sold_at: str

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "SaleRecord":
        return cls(
            product_id=data["product_id"],
            product_name=data.get("product_name", ""),
            quantity=data["quantity"],
            price=data["price"],
            total=data["total"],
            sold_at=data.get("sold_at", ""),
        )
