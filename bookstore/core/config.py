# bookstore/core/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string)
      - JWT_SECRET (secret used to verify access tokens)

    Pricing:
      - GST_PERCENT: tax percentage applied to the cart total
      - DELIVERY_LEAD_DAYS: days added to "today" for the delivery estimate

    Gift cards:
      - GIFT_CARD_EXPIRY_DAYS: lifetime of a newly issued gift card

    Super admins are not stored in the users table; any authenticated
    account whose email is listed in SUPER_ADMIN_EMAILS acts as SuperAdmin.
    """

    PROJECT_NAME: str = "Bookstore API"
    API_V1_STR: str = "/api/v1"

    DATABASE_URL: str

    JWT_SECRET: str
    JWT_ALG: str = "HS256"

    GST_PERCENT: float = 18.0
    DELIVERY_LEAD_DAYS: int = 2
    GIFT_CARD_EXPIRY_DAYS: int = 365

    SUPER_ADMIN_EMAILS: list[str] = []

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
