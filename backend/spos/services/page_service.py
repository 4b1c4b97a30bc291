# Overview: Read-only page projections (home, dashboard) and the add-product form handler.

from __future__ import annotations

from dataclasses import dataclass

from ..models import Product
from ..validation import ModelValidationPolicy, validate_payload, enforce_rules_product, ValidationError
from .inventory_service import InventoryLedger


DEFAULT_LOW_STOCK_THRESHOLD = 10

PRODUCT_FORM_POLICY = ModelValidationPolicy(
    field_types={"barcode": str, "name": str, "quantity": int, "price": float, "weight": str},
    writable_fields={"barcode", "name", "quantity", "price", "weight"},
    required_on_create={"barcode", "name", "price"},
)


def home_stats(ledger: InventoryLedger, low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD) -> dict:
    """
    Quick stats for the home page.

    low_stock counts products strictly below the threshold.
    """
    products = ledger.list_products()
    sales = ledger.list_sales()
    return {
        "products": len(products),
        "total_value": sum(p.stock_value for p in products),
        "sales": len(sales),
        "low_stock": sum(1 for p in products if p.quantity < low_stock_threshold),
        "low_stock_threshold": low_stock_threshold,
    }


def dashboard_rows(ledger: InventoryLedger) -> dict:
    products = ledger.list_products()
    rows = [
        {
            "id": p.id,
            "name": p.name,
            "quantity": p.quantity,
            "price": p.price,
            "price_display": f"${p.price:.2f}",
            "barcode": p.barcode or "-",
            "weight": p.weight or "-",
        }
        for p in products
    ]
    return {"rows": rows, "empty": not rows}


@dataclass(frozen=True)
class AddProductOutcome:
    status: str  # "created" | "exists"
    product: Product

    @property
    def message(self) -> str:
        if self.status == "created":
            return f"Added: {self.product.name}"
        return f'Product "{self.product.name}" already exists.'


@dataclass(frozen=True)
class RestockOutcome:
    product: Product
    added: int

    @property
    def message(self) -> str:
        return f"Added {self.added} to {self.product.name}"


class AddProductController:
    """
    Form handler for the add-product page.

    A barcode that is already on file never creates a second product;
    the caller is told it exists and may restock it instead.
    """

    def __init__(self, ledger: InventoryLedger):
        self.ledger = ledger

    def submit(self, form: dict) -> AddProductOutcome:
        if not isinstance(form, dict):
            raise ValidationError("Invalid JSON payload")
        if not str(form.get("barcode") or "").strip():
            raise ValidationError("Barcode is required")

        existing = self.ledger.find_by_barcode(str(form["barcode"]).strip())
        if existing is not None:
            return AddProductOutcome(status="exists", product=existing)

        draft = validate_payload(payload=form, policy=PRODUCT_FORM_POLICY, partial=False)
        if draft.get("quantity") is None:
            draft["quantity"] = 1
        enforce_rules_product(draft, creating=True)

        product = self.ledger.create(draft)
        return AddProductOutcome(status="created", product=product)

    def restock(self, product_id: int, add_quantity) -> RestockOutcome:
        """Add add_quantity (a positive integer, or its string form) to a product."""
        patch = validate_payload(
            payload={"quantity": add_quantity},
            policy=PRODUCT_FORM_POLICY,
            partial=True,
        )
        amount = patch.get("quantity")
        if amount is None or amount <= 0:
            raise ValidationError("Quantity to add must be a positive integer")
        return RestockOutcome(product=self.ledger.restock(product_id, amount), added=amount)
