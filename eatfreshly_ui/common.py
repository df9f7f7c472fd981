"""Shared helpers for the Streamlit storefront and back office."""

from datetime import datetime

import streamlit as st

from eatfreshly.client import AdminApiClient, ApiClient, ApiError, AuthenticationExpired, CredentialStore

TOAST_ICONS: dict[str, str] = {"success": "✅", "error": "⚠️", "info": "ℹ️"}


def notify(level: str, message: str) -> None:
    st.toast(message, icon=TOAST_ICONS.get(level))


def get_client() -> ApiClient:
    if "api_client" not in st.session_state:
        st.session_state["api_client"] = ApiClient(credentials=CredentialStore(st.session_state, scope="customer"))
    return st.session_state["api_client"]


def get_admin_client() -> AdminApiClient:
    if "admin_api_client" not in st.session_state:
        st.session_state["admin_api_client"] = AdminApiClient(credentials=CredentialStore(st.session_state, scope="admin"))
    return st.session_state["admin_api_client"]


def call(action, *args, **kwargs):
    """Run an API call, turning failures into toasts; returns None on error."""
    try:
        return action(*args, **kwargs)
    except AuthenticationExpired as exc:
        notify("error", exc.message)
        st.session_state["page"] = exc.login_path
        return None
    except ApiError as exc:
        notify("error", exc.message)
        return None


def now_string() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M")
