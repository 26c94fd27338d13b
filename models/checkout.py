"""
Checkout related data models
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any


class CheckoutStep(Enum):
    SHIPPING = "shipping"
    PAYMENT = "payment"
    CONFIRMATION = "confirmation"


SHIPPING_FIELDS = ("full_name", "email", "address_line", "city", "postal_code")
PAYMENT_FIELDS = ("card_number", "expiry", "cvv")


@dataclass(frozen=True)
class ShippingInfo:
    """Shipping details collected in the first checkout step"""
    full_name: str
    email: str
    address_line: str
    city: str
    postal_code: str

    @classmethod
    def from_form(cls, form: Dict[str, str]) -> "ShippingInfo":
        return cls(**{name: form.get(name, "").strip() for name in SHIPPING_FIELDS})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {name: getattr(self, name) for name in SHIPPING_FIELDS}


@dataclass(frozen=True)
class PaymentInfo:
    """Card details; validated only, never stored or sent anywhere"""
    card_number: str
    expiry: str
    cvv: str

    @classmethod
    def from_form(cls, form: Dict[str, str]) -> "PaymentInfo":
        return cls(**{name: form.get(name, "") for name in PAYMENT_FIELDS})

    def __repr__(self) -> str:
        return "PaymentInfo(card_number='****', expiry='****', cvv='***')"
