"""Checkout orchestration on top of :class:`ApiClient`."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from eatfreshly.client.api import ApiClient, ApiError

logger = logging.getLogger(__name__)

HOSTED_PAYMENT_METHOD = "Stripe"
PAYMENT_METHODS: tuple[str, ...] = ("Cash on Delivery", "Credit Card", "Debit Card", "Digital Wallet", HOSTED_PAYMENT_METHOD)

# (level, message); level is "success", "error" or "info".
Notifier = Callable[[str, str], None]
# Receives the payment intent, returns the confirmed intent id or None when abandoned.
PaymentConfirmer = Callable[[dict[str, Any]], str | None]


@dataclass
class CheckoutForm:
    delivery_address: dict[str, Any]
    payment_method: str = "Cash on Delivery"
    special_instructions: str | None = None
    promo_code: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def order_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "delivery_address": self.delivery_address,
            "special_instructions": self.special_instructions,
            "promo_code": self.promo_code or None,
        }
        payload.update(self.extra)
        return payload


class CheckoutFlow:
    """Submit the cart as an order, through the hosted widget for card payments.

    Every step waits for the previous one. After the order exists the cart is
    cleared and only then is the order number returned for navigation.
    Failures never raise: they are reported through ``notify`` and the
    submission returns None.
    """

    def __init__(self, api: ApiClient, notify: Notifier, confirm_payment: PaymentConfirmer | None = None) -> None:
        self.api = api
        self.notify = notify
        self.confirm_payment = confirm_payment

    def apply_promo(self, promo_code: str, subtotal: float) -> dict[str, Any] | None:
        try:
            result = self.api.validate_promo(promo_code, subtotal)
        except ApiError as exc:
            self.notify("error", exc.message)
            return None
        self.notify("success", f"Promo code applied. You save {result['discount_amount']:.2f}")
        return result

    def submit(self, form: CheckoutForm) -> str | None:
        try:
            cart = self.api.get_cart()
            if not cart.get("items"):
                self.notify("error", "Your cart is empty")
                return None
            if form.promo_code:
                self.api.validate_promo(form.promo_code, cart["total_amount"])

            if form.payment_method == HOSTED_PAYMENT_METHOD:
                order = self._pay_and_confirm(form)
                if order is None:
                    return None
            else:
                order = self.api.create_order({**form.order_payload(), "payment_method": form.payment_method})
        except ApiError as exc:
            logger.info("[CHECKOUT] Submission failed (%s): %s", exc.status_code, exc.message)
            self.notify("error", exc.message)
            return None

        # The order exists from here on.
        try:
            self.api.clear_cart()
        except ApiError as exc:
            logger.warning("[CHECKOUT] Order %s placed but clearing the cart failed: %s", order["order_number"], exc.message)

        self.notify("success", f"Order {order['order_number']} placed successfully")
        return order["order_number"]

    def _pay_and_confirm(self, form: CheckoutForm) -> dict[str, Any] | None:
        if self.confirm_payment is None:
            self.notify("error", "Card payments are not available right now")
            return None
        intent = self.api.create_payment_intent(form.promo_code or None)
        payment_intent_id = self.confirm_payment(intent)
        if not payment_intent_id:
            self.notify("error", "Payment was not completed")
            return None
        return self.api.confirm_payment(payment_intent_id, form.order_payload())
