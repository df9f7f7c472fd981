"""Python client for the EatFreshly REST API."""

from eatfreshly.client.api import AdminApiClient, ApiClient, ApiError, AuthenticationExpired
from eatfreshly.client.checkout import CheckoutFlow, CheckoutForm
from eatfreshly.client.session import CredentialStore, JsonFileStore

__all__ = [
    "AdminApiClient", "ApiClient", "ApiError", "AuthenticationExpired", "CheckoutFlow", "CheckoutForm",
    "CredentialStore", "JsonFileStore",
]
