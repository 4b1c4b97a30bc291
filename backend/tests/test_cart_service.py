import pytest

from spos.services.cart_service import CartLine, CartLineNotFoundError, CartSession
from spos.services.inventory_service import ProductNotFoundError
from spos.validation import ValidationError


class TestScan:
    def test_first_scan_adds_line(self, cart, pen):
        result = cart.scan("111")

        assert result.action == "added"
        assert result.product == pen
        assert [l.to_dict() for l in cart.lines] == [{
            "product_id": pen.id,
            "name": "Pen",
            "price": 1.5,
            "quantity": 1,
            "barcode": "111",
        }]

    def test_same_barcode_twice_is_one_line(self, cart, pen):
        cart.scan("111")
        result = cart.scan("111")

        assert result.action == "incremented"
        assert len(cart) == 1
        assert cart.lines[0].quantity == 2

    def test_scan_does_not_touch_stock(self, cart, ledger, pen):
        cart.scan("111")
        cart.scan("111")
        assert ledger.get_product(pen.id).quantity == 5
        assert ledger.list_sales() == []

    def test_scan_trims_input(self, cart, pen):
        assert cart.scan("  111 ").product.id == pen.id

    def test_unknown_barcode(self, cart):
        with pytest.raises(ProductNotFoundError):
            cart.scan("999")
        assert len(cart) == 0

    def test_blank_barcode(self, cart):
        with pytest.raises(ValidationError):
            cart.scan("   ")

    def test_total(self, cart, pen, notebook):
        cart.scan("111")
        cart.scan("111")
        cart.scan("222")
        assert cart.total == pytest.approx(2 * 1.5 + 3.25)


class TestLineEdits:
    def test_set_quantity(self, cart, pen):
        cart.scan("111")
        cart.set_line_quantity(0, 4)
        assert cart.lines[0].quantity == 4

    @pytest.mark.parametrize("quantity", [0, -3])
    def test_quantity_below_one_removes_line(self, cart, pen, quantity):
        cart.scan("111")
        cart.set_line_quantity(0, quantity)
        assert len(cart) == 0

    def test_remove_line(self, cart, pen, notebook):
        cart.scan("111")
        cart.scan("222")
        cart.remove_line(0)
        assert [l.name for l in cart.lines] == ["Notebook"]

    def test_bad_index(self, cart, pen):
        cart.scan("111")
        with pytest.raises(CartLineNotFoundError):
            cart.remove_line(3)
        with pytest.raises(CartLineNotFoundError):
            cart.set_line_quantity(-1, 2)

    def test_clear(self, cart, pen):
        cart.scan("111")
        cart.clear()
        assert len(cart) == 0

    def test_lines_survive_serialization(self, ledger, pen):
        cart = CartSession(ledger)
        cart.scan("111")
        restored = CartSession(ledger, [CartLine.from_dict(d) for d in cart.to_list()])
        restored.scan("111")
        assert restored.lines[0].quantity == 2


class TestCheckout:
    def test_successful_checkout(self, cart, ledger, pen, notebook):
        cart.scan("111")
        cart.scan("111")
        cart.scan("222")

        result = cart.checkout()

        assert result.ok is True
        assert result.total == pytest.approx(6.25)
        assert result.items_sold == 2
        assert len(cart) == 0
        assert ledger.get_product(pen.id).quantity == 3
        assert ledger.get_product(notebook.id).quantity == 0
        assert len(ledger.list_sales()) == 2

    def test_empty_cart(self, cart):
        with pytest.raises(ValidationError):
            cart.checkout()

    def test_partial_failure_is_not_rolled_back(self, cart, ledger, pen, notebook):
        # Cart [A x2, B x1] where B has less stock than the cart asks for.
        cart.scan("111")
        cart.scan("111")
        cart.scan("222")
        ledger.update(notebook.id, {"quantity": 0})

        result = cart.checkout()

        assert result.ok is False
        assert [r.ok for r in result.lines] == [True, False]
        assert result.failures[0].line.name == "Notebook"
        assert result.failures[0].reason == "insufficient_stock"
        assert result.to_dict()["failures"] == ["Notebook: Insufficient quantity"]

        # A was already sold...
        assert ledger.get_product(pen.id).quantity == 3
        assert [s.product_name for s in ledger.list_sales()] == ["Pen"]
        # ...while the cart still lists both lines as pending
        assert [(l.name, l.quantity) for l in cart.lines] == [("Pen", 2), ("Notebook", 1)]

    def test_deleted_product_fails_its_line(self, cart, ledger, pen):
        cart.scan("111")
        ledger.delete(pen.id)

        result = cart.checkout()

        assert result.ok is False
        assert result.lines[0].reason == "not_found"
        assert len(cart) == 1

    def test_checkout_uses_cart_price_snapshot_for_total(self, cart, ledger, pen):
        cart.scan("111")
        ledger.update(pen.id, {"price": 2.0})

        result = cart.checkout()

        assert result.total == pytest.approx(1.5)
        assert ledger.list_sales()[0].total == pytest.approx(2.0)
