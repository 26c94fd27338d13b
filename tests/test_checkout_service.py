"""
Tests for the checkout workflow
"""
import asyncio
import re
import unittest
from decimal import Decimal

from models.checkout import CheckoutStep
from services.cart_service import CartService
from services.checkout_service import CheckoutService, validate_shipping, validate_payment
from services.order_service import OrderService
from tests.helpers import (
    MemoryStorage, RecordingOrderBackend, FailingOrderBackend, BlockingOrderBackend,
    make_product, VALID_SHIPPING, VALID_PAYMENT
)


class TestValidation(unittest.TestCase):
    """Field checks for the shipping and payment forms"""

    def test_valid_shipping(self):
        self.assertEqual(validate_shipping(VALID_SHIPPING), {})

    def test_blank_shipping_fields(self):
        form = dict(VALID_SHIPPING, full_name="   ", city="")
        self.assertEqual(validate_shipping(form), {"full_name": True, "city": True})

    def test_email_needs_at_sign(self):
        self.assertEqual(validate_shipping(dict(VALID_SHIPPING, email="john@@")), {})
        self.assertEqual(validate_shipping(dict(VALID_SHIPPING, email="johnexample.com")), {"email": True})

    def test_missing_fields_are_errors(self):
        errors = validate_shipping({})
        self.assertEqual(set(errors), {"full_name", "email", "address_line", "city", "postal_code"})

    def test_none_values_are_errors(self):
        form = dict(VALID_SHIPPING, full_name=None, email=None)
        self.assertEqual(validate_shipping(form), {"full_name": True, "email": True})
        self.assertEqual(validate_payment({"card_number": None, "expiry": None, "cvv": None}),
                         {"card_number": True, "expiry": True, "cvv": True})

    def test_valid_payment(self):
        self.assertEqual(validate_payment(VALID_PAYMENT), {})

    def test_short_card_number(self):
        errors = validate_payment(dict(VALID_PAYMENT, card_number="4242 4242"))
        self.assertEqual(errors, {"card_number": True})

    def test_card_number_whitespace_is_ignored(self):
        self.assertEqual(validate_payment(dict(VALID_PAYMENT, card_number="4242\t4242 4242 4")), {})

    def test_expiry_and_cvv(self):
        errors = validate_payment(dict(VALID_PAYMENT, expiry=" ", cvv="12"))
        self.assertEqual(errors, {"expiry": True, "cvv": True})


class TestCheckoutService(unittest.IsolatedAsyncioTestCase):
    """Shipping -> Payment -> Confirmation"""

    def setUp(self):
        self.cart = CartService(MemoryStorage())
        self.backend = RecordingOrderBackend("order-42")
        self.checkout = CheckoutService(self.cart, OrderService(self.backend))

        self.cart.add_item(make_product("a", price="10.00"))
        self.cart.add_item(make_product("a", price="10.00"))
        self.cart.add_item(make_product("b", price="5.00"))

    async def complete_checkout(self):
        self.assertTrue(self.checkout.open()["success"])
        self.checkout.update_fields(VALID_SHIPPING)
        self.assertTrue((await self.checkout.advance())["success"])
        self.checkout.update_fields(VALID_PAYMENT)
        return await self.checkout.advance()

    async def test_end_to_end(self):
        """Completing checkout clears the cart and yields an order id"""
        self.assertEqual(self.cart.total, Decimal("25.00"))

        result = await self.complete_checkout()

        self.assertTrue(result["success"])
        self.assertEqual(result["order_id"], "order-42")
        self.assertEqual(self.checkout.step, CheckoutStep.CONFIRMATION)
        self.assertEqual(self.checkout.order_id, "order-42")
        self.assertEqual(self.cart.count, 0)

        shipping_info, total = self.backend.orders[0]
        self.assertEqual(shipping_info.email, "john@example.com")
        self.assertEqual(total, Decimal("25.00"))
        items = self.backend.items["order-42"]
        self.assertEqual([(i.product_id, i.quantity, i.unit_price) for i in items],
                         [("a", 2, Decimal("10.00")), ("b", 1, Decimal("5.00"))])

    async def test_payment_fields_are_discarded(self):
        await self.complete_checkout()
        self.assertEqual(self.checkout.form["card_number"], "")
        self.assertEqual(self.checkout.form["cvv"], "")

    async def test_failing_backend_still_confirms(self):
        checkout = CheckoutService(self.cart, OrderService(FailingOrderBackend()))
        checkout.open()
        checkout.update_fields(VALID_SHIPPING)
        await checkout.advance()
        checkout.update_fields(VALID_PAYMENT)

        result = await checkout.advance()

        self.assertTrue(result["success"])
        self.assertEqual(checkout.step, CheckoutStep.CONFIRMATION)
        self.assertRegex(checkout.order_id, r"^LUXE-[0-9A-Z]+$")
        self.assertEqual(self.cart.count, 0)

    async def test_invalid_shipping_blocks(self):
        self.checkout.open()
        self.checkout.update_fields(dict(VALID_SHIPPING, email="johnexample.com"))

        result = await self.checkout.advance()

        self.assertFalse(result["success"])
        self.assertEqual(result["errors"], {"email": True})
        self.assertEqual(self.checkout.step, CheckoutStep.SHIPPING)

    async def test_editing_field_clears_its_error(self):
        self.checkout.open()
        await self.checkout.advance()
        self.assertIn("city", self.checkout.errors)

        self.checkout.update_field("city", "Paris")

        self.assertNotIn("city", self.checkout.errors)
        self.assertIn("email", self.checkout.errors)

    async def test_invalid_payment_blocks(self):
        self.checkout.open()
        self.checkout.update_fields(VALID_SHIPPING)
        await self.checkout.advance()
        self.checkout.update_fields(dict(VALID_PAYMENT, card_number="4242 4242"))

        result = await self.checkout.advance()

        self.assertFalse(result["success"])
        self.assertEqual(result["errors"], {"card_number": True})
        self.assertEqual(self.checkout.step, CheckoutStep.PAYMENT)
        self.assertEqual(self.backend.orders, [])
        self.assertEqual(self.cart.count, 3)

    async def test_back_navigation(self):
        self.checkout.open()
        self.assertFalse(self.checkout.back()["success"])

        self.checkout.update_fields(VALID_SHIPPING)
        await self.checkout.advance()
        self.assertTrue(self.checkout.back()["success"])
        self.assertEqual(self.checkout.step, CheckoutStep.SHIPPING)
        self.assertEqual(self.checkout.form["email"], "john@example.com")

    async def test_no_way_out_of_confirmation(self):
        await self.complete_checkout()

        self.assertFalse(self.checkout.back()["success"])
        self.assertFalse((await self.checkout.advance())["success"])
        self.assertFalse(self.checkout.update_field("email", "x@y")["success"])
        self.assertEqual(self.checkout.step, CheckoutStep.CONFIRMATION)

    async def test_close_and_reopen_starts_fresh(self):
        self.checkout.open()
        self.checkout.update_fields(VALID_SHIPPING)
        await self.checkout.advance()
        self.checkout.update_field("card_number", "4242")

        self.checkout.close()
        self.assertFalse(self.checkout.is_open)
        self.checkout.open()

        self.assertEqual(self.checkout.step, CheckoutStep.SHIPPING)
        self.assertTrue(all(value == "" for value in self.checkout.form.values()))
        self.assertEqual(self.checkout.errors, {})
        self.assertIsNone(self.checkout.order_id)

    async def test_close_after_confirmation_clears_order_id(self):
        await self.complete_checkout()
        self.checkout.close()

        self.assertIsNone(self.checkout.order_id)
        self.assertEqual(self.checkout.step, CheckoutStep.SHIPPING)

    async def test_open_requires_items(self):
        self.cart.clear()
        result = self.checkout.open()

        self.assertFalse(result["success"])
        self.assertFalse(self.checkout.is_open)

    async def test_open_closes_cart_drawer(self):
        self.assertTrue(self.cart.is_open)
        self.checkout.open()
        self.assertFalse(self.cart.is_open)

    async def test_actions_require_open_checkout(self):
        self.assertFalse((await self.checkout.advance())["success"])
        self.assertFalse(self.checkout.update_field("email", "a@b")["success"])

    async def test_unknown_field(self):
        self.checkout.open()
        result = self.checkout.update_field("coupon", "FREE")
        self.assertFalse(result["success"])

    async def test_order_uses_snapshot_from_open(self):
        self.checkout.open()
        self.cart.add_item(make_product("c", price="100.00"))
        self.checkout.update_fields(VALID_SHIPPING)
        await self.checkout.advance()
        self.checkout.update_fields(VALID_PAYMENT)
        await self.checkout.advance()

        _, total = self.backend.orders[0]
        self.assertEqual(total, Decimal("25.00"))

    async def test_single_submission_in_flight(self):
        backend = BlockingOrderBackend()
        checkout = CheckoutService(self.cart, OrderService(backend))
        checkout.open()
        checkout.update_fields(VALID_SHIPPING)
        await checkout.advance()
        checkout.update_fields(VALID_PAYMENT)

        task = asyncio.create_task(checkout.advance())
        for _ in range(100):
            if checkout.submitting:
                break
            await asyncio.sleep(0.01)
        self.assertTrue(checkout.submitting)

        second = await checkout.advance()
        self.assertFalse(second["success"])
        self.assertFalse(checkout.close()["success"])
        self.assertFalse(checkout.back()["success"])

        backend.release.set()
        result = await task

        self.assertTrue(result["success"])
        self.assertFalse(checkout.submitting)
        self.assertEqual(len(backend.orders), 1)
        self.assertEqual(checkout.step, CheckoutStep.CONFIRMATION)

    async def test_details_mask_card(self):
        self.checkout.open()
        self.checkout.update_fields(VALID_SHIPPING)
        await self.checkout.advance()
        self.checkout.update_fields(VALID_PAYMENT)

        details = self.checkout.get_checkout_details()

        self.assertEqual(details["step"], "payment")
        self.assertEqual(details["fields"]["card_number"], "************4242")
        self.assertNotIn("cvv", details["fields"])
        self.assertEqual(details["order_summary"]["total"], "25.00")
        self.assertFalse(re.search(r"4242 4242", str(details)))


if __name__ == '__main__':
    unittest.main()
