"""Synchronous httpx client for the EatFreshly REST API."""

import logging
from typing import Any

import httpx

from eatfreshly.client.session import CredentialStore
from eatfreshly.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Something went wrong. Please try again."
LOGIN_PATH = "/login"


class ApiError(Exception):
    """Failed API call carrying the backend ``message`` when it sent one."""

    def __init__(self, message: str, status_code: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


class AuthenticationExpired(ApiError):
    """Raised on a 401 after the stored credentials were cleared."""

    login_path = LOGIN_PATH


def _error_message(payload: Any) -> str:
    if isinstance(payload, dict) and isinstance(payload.get("message"), str) and payload["message"]:
        return payload["message"]
    return DEFAULT_ERROR_MESSAGE


class ApiClient:
    """Customer-facing API calls.

    The bearer token from ``credentials`` is attached to every request by a
    request event hook. Responses are unwrapped from the ``{success, data,
    message}`` envelope; failures raise :class:`ApiError`, and a 401 clears
    the stored credentials before raising :class:`AuthenticationExpired`.
    """

    scope = "customer"
    login_endpoint = "/auth/login"

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        *,
        credentials: CredentialStore | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.credentials = credentials or CredentialStore(scope=self.scope)
        self._http = http_client or httpx.Client(
            base_url=base_url or settings.api_base_url,
            timeout=timeout or settings.client_timeout_seconds,
        )
        self._http.event_hooks = {"request": [self._attach_token], "response": []}

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _attach_token(self, request: httpx.Request) -> None:
        token = self.credentials.token
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("[API] %s %s failed: %s", method, path, exc)
            raise ApiError(DEFAULT_ERROR_MESSAGE) from exc

        if response.status_code < 400:
            return response
        try:
            payload = response.json()
        except ValueError:
            payload = None
        message = _error_message(payload)
        if response.status_code == 401:
            self.credentials.clear()
            raise AuthenticationExpired(message, response.status_code, payload)
        raise ApiError(message, response.status_code, payload)

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the envelope's ``data``."""
        body = self._send(method, path, **kwargs).json()
        return body.get("data") if isinstance(body, dict) else body

    def _get(self, path: str, **params: Any) -> Any:
        return self._request("GET", path, params={k: v for k, v in params.items() if v is not None})

    # Auth

    def login(self, email: str, password: str) -> dict[str, Any]:
        data = self._request("POST", self.login_endpoint, json={"email": email, "password": password})
        self.credentials.save(data["token"], data["user"])
        return data["user"]

    def register(self, name: str, email: str, password: str, phone: str | None = None) -> dict[str, Any]:
        data = self._request(
            "POST",
            "/auth/register",
            json={"name": name, "email": email, "password": password, "phone": phone},
        )
        self.credentials.save(data["token"], data["user"])
        return data["user"]

    def logout(self) -> None:
        try:
            if self.credentials.is_authenticated:
                self._request("POST", "/auth/logout")
        finally:
            self.credentials.clear()

    def me(self) -> dict[str, Any]:
        return self._request("GET", "/auth/me")

    def update_profile(self, **changes: Any) -> dict[str, Any]:
        user = self._request("PUT", "/users/me", json=changes)
        if self.credentials.token:
            self.credentials.save(self.credentials.token, user)
        return user

    def change_password(self, current_password: str, new_password: str) -> None:
        self._request(
            "PUT",
            "/users/me/password",
            json={"current_password": current_password, "new_password": new_password},
        )

    # Menu

    def list_menu(self, **filters: Any) -> list[dict[str, Any]]:
        return self._get("/menu", **filters)

    def menu_categories(self) -> list[dict[str, Any]]:
        return self._get("/menu/categories")

    def signature_items(self) -> list[dict[str, Any]]:
        return self._get("/menu/signature")

    def get_menu_item(self, item_id: int) -> dict[str, Any]:
        return self._get(f"/menu/{item_id}")

    # Cart

    def get_cart(self) -> dict[str, Any]:
        return self._get("/cart")

    def add_to_cart(self, menu_item_id: int, quantity: int = 1) -> dict[str, Any]:
        return self._request("POST", "/cart/items", json={"menu_item_id": menu_item_id, "quantity": quantity})

    def update_cart_item(self, cart_item_id: int, quantity: int) -> dict[str, Any]:
        return self._request("PUT", f"/cart/items/{cart_item_id}", json={"quantity": quantity})

    def remove_cart_item(self, cart_item_id: int) -> dict[str, Any]:
        return self._request("DELETE", f"/cart/items/{cart_item_id}")

    def clear_cart(self) -> dict[str, Any]:
        return self._request("DELETE", "/cart")

    # Orders and payments

    def create_order(self, order: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/orders", json=order)

    def list_orders(self, status: str | None = None, page: int = 1, limit: int = 10) -> dict[str, Any]:
        return self._get("/orders", status=status, page=page, limit=limit)

    def get_order(self, reference: str | int) -> dict[str, Any]:
        return self._get(f"/orders/{reference}")

    def cancel_order(self, reference: str | int) -> dict[str, Any]:
        return self._request("PUT", f"/orders/{reference}/cancel")

    def create_payment_intent(self, promo_code: str | None = None) -> dict[str, Any]:
        return self._request("POST", "/payments/create-payment-intent", json={"promo_code": promo_code})

    def confirm_payment(self, payment_intent_id: str, order: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/payments/confirm-payment", json={"payment_intent_id": payment_intent_id, **order})

    # Promotions

    def active_promotions(self) -> list[dict[str, Any]]:
        return self._get("/promotions/active")

    def validate_promo(self, promo_code: str, order_amount: float) -> dict[str, Any]:
        return self._request(
            "POST",
            "/promotions/validate",
            json={"promo_code": promo_code, "order_amount": order_amount},
        )

    # Reviews

    def list_reviews(self, rating: int | None = None, page: int = 1, limit: int = 10) -> dict[str, Any]:
        return self._get("/reviews", rating=rating, page=page, limit=limit)

    def top_reviews(self, limit: int = 6) -> list[dict[str, Any]]:
        return self._get("/reviews/top", limit=limit)

    def my_reviews(self) -> list[dict[str, Any]]:
        return self._get("/reviews/mine")

    def create_review(self, order_id: int, rating: int, comment: str, **extra: Any) -> dict[str, Any]:
        return self._request("POST", "/reviews", json={"order_id": order_id, "rating": rating, "comment": comment, **extra})

    def delete_review(self, review_id: int) -> None:
        self._request("DELETE", f"/reviews/{review_id}")

    # Newsletter and contact

    def subscribe(self, email: str, name: str | None = None, **extra: Any) -> dict[str, Any]:
        return self._request("POST", "/newsletter/subscribe", json={"email": email, "name": name, **extra})

    def unsubscribe(self, *, token: str | None = None, email: str | None = None) -> None:
        self._request("POST", "/newsletter/unsubscribe", json={"token": token, "email": email})

    def send_contact_message(self, name: str, email: str, subject: str, message: str, inquiry_type: str = "general") -> dict[str, Any]:
        return self._request(
            "POST",
            "/contact",
            json={"name": name, "email": email, "subject": subject, "message": message, "inquiry_type": inquiry_type},
        )

    def contact_info(self) -> dict[str, Any]:
        return self._get("/contact/info")


class AdminApiClient(ApiClient):
    """Back-office calls; credentials live under ``adminToken``/``adminUser``."""

    scope = "admin"
    login_endpoint = "/auth/admin/login"

    # Menu

    def admin_menu(self, **filters: Any) -> list[dict[str, Any]]:
        return self._get("/admin/menu", **filters)

    def create_menu_item(self, item: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/admin/menu", json=item)

    def update_menu_item(self, item_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/admin/menu/{item_id}", json=changes)

    def toggle_menu_item(self, item_id: int) -> dict[str, Any]:
        return self._request("PATCH", f"/admin/menu/{item_id}/toggle")

    def delete_menu_item(self, item_id: int) -> None:
        self._request("DELETE", f"/admin/menu/{item_id}")

    # Orders

    def admin_orders(self, **filters: Any) -> dict[str, Any]:
        return self._get("/admin/orders", **filters)

    def update_order_status(self, order_id: int, status: str) -> dict[str, Any]:
        return self._request("PUT", f"/admin/orders/{order_id}/status", json={"status": status})

    # Users

    def admin_users(self, **filters: Any) -> dict[str, Any]:
        return self._get("/admin/users", **filters)

    def create_user(self, user: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/admin/users", json=user)

    def update_user(self, user_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/admin/users/{user_id}", json=changes)

    def delete_user(self, user_id: int) -> None:
        self._request("DELETE", f"/admin/users/{user_id}")

    # Promotions

    def admin_promotions(self, **filters: Any) -> dict[str, Any]:
        return self._get("/admin/promotions", **filters)

    def create_promotion(self, promotion: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/admin/promotions", json=promotion)

    def toggle_promotion(self, promotion_id: int) -> dict[str, Any]:
        return self._request("PATCH", f"/admin/promotions/{promotion_id}/toggle")

    def delete_promotion(self, promotion_id: int) -> None:
        self._request("DELETE", f"/admin/promotions/{promotion_id}")

    # Analytics

    def dashboard_metrics(self) -> dict[str, Any]:
        return self._get("/admin/dashboard/metrics")

    def dashboard_charts(self, days: int = 7) -> dict[str, Any]:
        return self._get("/admin/dashboard/charts", days=days)

    def dashboard_predictions(self) -> dict[str, Any]:
        return self._get("/admin/dashboard/predictions")

    def recent_activities(self, limit: int = 10) -> list[dict[str, Any]]:
        return self._get("/admin/dashboard/activities", limit=limit)

    def sales_report(self, **filters: Any) -> dict[str, Any]:
        return self._get("/admin/reports/sales", **filters)

    def export_csv(self, export_type: str, **filters: Any) -> bytes:
        params = {"type": export_type, "format": "csv", **{k: v for k, v in filters.items() if v is not None}}
        return self._send("GET", "/admin/reports/export", params=params).content

    def orders_pdf(self, **filters: Any) -> bytes:
        params = {k: v for k, v in filters.items() if v is not None}
        return self._send("GET", "/admin/reports/orders.pdf", params=params).content
