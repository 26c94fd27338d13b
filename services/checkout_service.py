"""
Checkout service - the Shipping -> Payment -> Confirmation workflow
"""
import logging
import re
from decimal import Decimal
from typing import Dict, List, Any, Mapping, Optional

from models.cart import CartLine, CartSummary
from models.checkout import CheckoutStep, ShippingInfo, PaymentInfo, SHIPPING_FIELDS, PAYMENT_FIELDS
from .cart_service import CartService
from .order_service import OrderService

logger = logging.getLogger(__name__)

FORM_FIELDS = SHIPPING_FIELDS + PAYMENT_FIELDS
MIN_CARD_DIGITS = 13
MIN_CVV_LENGTH = 3


def validate_shipping(form: Mapping[str, str]) -> Dict[str, bool]:
    # Per-field error flags; an empty dict means the form is valid
    errors = {}
    for name in SHIPPING_FIELDS:
        if not (form.get(name) or "").strip():
            errors[name] = True
    if "@" not in (form.get("email") or ""):
        errors["email"] = True
    return errors


def validate_payment(form: Mapping[str, str]) -> Dict[str, bool]:
    # Structural checks only; no card is ever authorized
    errors = {}
    card_number = form.get("card_number") or ""
    if not card_number.strip() or len(re.sub(r"\s", "", card_number)) < MIN_CARD_DIGITS:
        errors["card_number"] = True
    if not (form.get("expiry") or "").strip():
        errors["expiry"] = True
    cvv = form.get("cvv") or ""
    if not cvv.strip() or len(cvv) < MIN_CVV_LENGTH:
        errors["cvv"] = True
    return errors


def _empty_form() -> Dict[str, str]:
    return {name: "" for name in FORM_FIELDS}


def _mask_card_number(card_number: str) -> str:
    digits = re.sub(r"\s", "", card_number)
    if len(digits) <= 4:
        return "*" * len(digits)
    return "*" * (len(digits) - 4) + digits[-4:]


class CheckoutService:
    # One checkout session at a time: form state, step, and the cart snapshot it pays for

    def __init__(self, cart_service: CartService, order_service: OrderService):
        self.cart_service = cart_service
        self.order_service = order_service
        self._reset()

    def _reset(self):
        self.is_open = False
        self.step = CheckoutStep.SHIPPING
        self.form = _empty_form()
        self.errors: Dict[str, bool] = {}
        self.order_id: Optional[str] = None
        self.submitting = False
        self._lines: List[CartLine] = []
        self._summary: Optional[CartSummary] = None

    @property
    def total(self) -> Decimal:
        return self._summary.total if self._summary else Decimal("0")

    def open(self) -> Dict[str, Any]:
        # Start a fresh session against a snapshot of the current cart
        if self.submitting:
            return {"success": False, "error": "An order is being submitted"}

        lines, summary = self.cart_service.snapshot()
        if not lines:
            return {"success": False, "error": "Your cart is empty"}

        self._reset()
        self.is_open = True
        self._lines = lines
        self._summary = summary
        self.cart_service.close_cart()
        logger.info("Checkout opened for %d items, total %s", summary.count, summary.total)
        return {"success": True, "step": self.step.value}

    def update_field(self, name: str, value: str) -> Dict[str, Any]:
        # Editing a field clears its error flag
        if not self.is_open:
            return {"success": False, "error": "Checkout is not open"}
        if self.submitting or self.step is CheckoutStep.CONFIRMATION:
            return {"success": False, "error": "The order can no longer be edited"}
        if name not in self.form:
            return {"success": False, "error": f"Unknown field: {name}"}

        self.form[name] = "" if value is None else str(value)
        self.errors.pop(name, None)
        return {"success": True}

    def update_fields(self, values: Mapping[str, str]) -> Dict[str, Any]:
        for name, value in values.items():
            result = self.update_field(name, value)
            if not result["success"]:
                return result
        return {"success": True}

    async def advance(self) -> Dict[str, Any]:
        # The "Continue" / "Pay" action
        if not self.is_open:
            return {"success": False, "error": "Checkout is not open"}
        if self.submitting:
            return {"success": False, "error": "An order is already being submitted"}

        if self.step is CheckoutStep.SHIPPING:
            self.errors = validate_shipping(self.form)
            if self.errors:
                return {"success": False, "step": self.step.value, "errors": dict(self.errors)}
            self.step = CheckoutStep.PAYMENT
            logger.info("Checkout moved to payment")
            return {"success": True, "step": self.step.value}

        if self.step is CheckoutStep.PAYMENT:
            self.errors = validate_payment(self.form)
            if self.errors:
                return {"success": False, "step": self.step.value, "errors": dict(self.errors)}
            return await self._submit()

        return {"success": False, "step": self.step.value, "error": "Checkout is already complete"}

    async def _submit(self) -> Dict[str, Any]:
        shipping_info = ShippingInfo.from_form(self.form)

        self.submitting = True
        try:
            order_id = await self.order_service.submit_order(self._lines, self.total, shipping_info)
        finally:
            self.submitting = False

        self.cart_service.clear()
        self.order_id = order_id
        for name in PAYMENT_FIELDS:
            self.form[name] = ""
        self.step = CheckoutStep.CONFIRMATION
        logger.info("Checkout confirmed as order %s", order_id)
        return {"success": True, "step": self.step.value, "order_id": order_id}

    def back(self) -> Dict[str, Any]:
        if self.step is not CheckoutStep.PAYMENT or self.submitting:
            return {"success": False, "step": self.step.value, "error": "Cannot go back from this step"}
        self.step = CheckoutStep.SHIPPING
        self.errors = {}
        return {"success": True, "step": self.step.value}

    def close(self) -> Dict[str, Any]:
        # Discard the session; a running submission has to finish first
        if self.submitting:
            return {"success": False, "error": "An order is being submitted"}
        self._reset()
        return {"success": True, "step": self.step.value}

    def get_checkout_details(self) -> Dict[str, Any]:
        # Session state for rendering; card data is masked and the CVV never leaves
        fields = {name: self.form[name] for name in SHIPPING_FIELDS}
        payment = PaymentInfo.from_form(self.form)
        fields["card_number"] = _mask_card_number(payment.card_number)
        fields["expiry"] = payment.expiry

        return {
            "success": True,
            "is_open": self.is_open,
            "step": self.step.value,
            "submitting": self.submitting,
            "fields": fields,
            "errors": dict(self.errors),
            "order_id": self.order_id,
            "order_summary": {
                "items": [
                    {
                        "product_id": line.product_id,
                        "name": line.name,
                        "quantity": line.quantity,
                        "line_total": str(line.line_total)
                    }
                    for line in self._lines
                ],
                "total": self._summary.to_dict()["total"] if self._summary else "0.00"
            }
        }
