"""Template rendering with declared variables."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from jinja2 import StrictUndefined, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from eatfreshly.core.errors import ValidationFailed

_env = SandboxedEnvironment(autoescape=True, undefined=StrictUndefined)
_text_env = SandboxedEnvironment(autoescape=False, undefined=StrictUndefined)


def resolve_variables(declared: Iterable[Mapping[str, Any]], values: Mapping[str, Any]) -> dict[str, Any]:
    """Merge caller values with declared defaults; missing required names are an error."""
    resolved: dict[str, Any] = {}
    missing: list[str] = []
    for variable in declared:
        name = variable["name"]
        if values.get(name) not in (None, ""):
            resolved[name] = values[name]
        elif variable.get("default") is not None:
            resolved[name] = variable["default"]
        elif variable.get("required"):
            missing.append(name)
        else:
            resolved[name] = ""
    if missing:
        raise ValidationFailed(f"Missing required variables: {', '.join(missing)}")
    for name, value in values.items():
        resolved.setdefault(name, value)
    return resolved


def render_string(source: str, context: Mapping[str, Any], *, html: bool = True) -> str:
    env = _env if html else _text_env
    try:
        return env.from_string(source).render(**context)
    except TemplateError as exc:
        raise ValidationFailed(f"Template rendering failed: {exc}") from exc


def render_email(
    *,
    subject: str,
    html_content: str,
    text_content: str | None,
    declared: Iterable[Mapping[str, Any]],
    values: Mapping[str, Any],
) -> dict[str, str | None]:
    context = resolve_variables(declared, values)
    return {
        "subject": render_string(subject, context, html=False),
        "html": render_string(html_content, context),
        "text": render_string(text_content, context, html=False) if text_content else None,
    }


DEFAULT_TEMPLATES: dict[str, dict[str, Any]] = {
    "order-confirmation": {
        "subject": "Your EatFreshly order {{ order_number }} is confirmed",
        "html_content": (
            "<h2>Thanks for your order, {{ customer_name }}!</h2>"
            "<p>Order <strong>{{ order_number }}</strong> has been placed.</p>"
            "<p>Total: {{ total }}</p>"
            "<p>Estimated delivery: {{ estimated_delivery }}</p>"
        ),
        "text_content": (
            "Thanks for your order, {{ customer_name }}! Order {{ order_number }} has been placed. "
            "Total: {{ total }}. Estimated delivery: {{ estimated_delivery }}."
        ),
        "variables": [
            {"name": "customer_name", "required": True},
            {"name": "order_number", "required": True},
            {"name": "total", "required": True},
            {"name": "estimated_delivery", "default": "soon"},
        ],
    },
    "order-completion": {
        "subject": "Your EatFreshly order {{ order_number }} was delivered",
        "html_content": (
            "<h2>Enjoy your meal, {{ customer_name }}!</h2>"
            "<p>Order <strong>{{ order_number }}</strong> has been delivered.</p>"
            "<p>We would love to hear what you think. Leave a review from your order history.</p>"
        ),
        "text_content": (
            "Enjoy your meal, {{ customer_name }}! Order {{ order_number }} has been delivered."
        ),
        "variables": [
            {"name": "customer_name", "required": True},
            {"name": "order_number", "required": True},
        ],
    },
}
