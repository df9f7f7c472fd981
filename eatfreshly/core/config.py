"""Application configuration."""

from os import getenv

from pydantic import BaseModel


class Settings(BaseModel):
    """Runtime settings for the application."""

    app_name: str = "EatFreshly API"
    app_env: str = getenv("APP_ENV", "dev")
    debug: bool = getenv("DEBUG", "0") == "1"
    log_level: str = getenv("LOG_LEVEL", "INFO")
    database_url: str = getenv("DATABASE_URL", "sqlite:///./eatfreshly.db")
    jwt_secret_key: str = getenv("JWT_SECRET_KEY", "dev-only-change-me-to-a-long-random-secret")
    jwt_algorithm: str = getenv("JWT_ALGORITHM", "HS256")
    jwt_expire_minutes: int = int(getenv("JWT_EXPIRE_MINUTES", "1440"))
    admin_email: str = getenv("ADMIN_EMAIL", "")
    admin_password: str = getenv("ADMIN_PASSWORD", "")
    seed_demo_data: bool = getenv("SEED_DEMO_DATA", "0") == "1"

    payment_provider: str = getenv("PAYMENT_PROVIDER", "mock")
    mock_payments_auto_confirm: bool = getenv("MOCK_PAYMENTS_AUTO_CONFIRM", "1") == "1"
    stripe_secret_key: str = getenv("STRIPE_SECRET_KEY", "")
    stripe_webhook_secret: str = getenv("STRIPE_WEBHOOK_SECRET", "")
    payment_currency: str = getenv("PAYMENT_CURRENCY", "inr")

    email_provider: str = getenv("EMAIL_PROVIDER", "log")
    sendgrid_api_key: str = getenv("SENDGRID_API_KEY", "")
    email_sender_email: str = getenv("EMAIL_SENDER_EMAIL", "noreply@eatfreshly.example")
    email_sender_name: str = getenv("EMAIL_SENDER_NAME", "EatFreshly")

    api_base_url: str = getenv("API_BASE_URL", "http://localhost:8000/api/v1")
    client_timeout_seconds: float = float(getenv("CLIENT_TIMEOUT_SECONDS", "10"))


settings: Settings = Settings()
