"""
zapShift Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; validated before app starts.

Deployment environment variable names (case-insensitive):
    PORT, DB_USER, DB_PASS, PAYMENT_GATEWAY_KEY, FB_SERVICE_KEY
"""

import base64
import binascii
import json
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Secrets (database password, Stripe key, Firebase service account) have
    empty defaults so the app can boot for local development; the affected
    routes then fail with a clear server-side log entry.
    """

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000, ge=1, le=65535)

    # ── Document Store ────────────────────────────────────────────────────
    # What: Full MongoDB connection string. Takes precedence when set.
    database_url: str = Field(
        default="",
        validation_alias=AliasChoices("database_url", "mongodb_uri"),
        description="MongoDB connection URI",
    )

    # What: Atlas credentials used to compose the URI when database_url is empty
    db_user: str = Field(default="")
    db_pass: str = Field(default="")
    db_cluster_host: str = Field(default="localhost:27017")

    database_name: str = Field(default="zapShiftDB")

    # What: How long the driver waits to find a usable server before failing an operation
    db_server_selection_timeout_ms: int = Field(default=5000, ge=100, le=120_000)

    # ── Stripe ────────────────────────────────────────────────────────────
    stripe_secret_key: str = Field(
        default="",
        validation_alias=AliasChoices("stripe_secret_key", "payment_gateway_key"),
    )
    payment_currency: str = Field(default="usd", min_length=3, max_length=3)

    # ── Firebase ──────────────────────────────────────────────────────────
    # What: Base64-encoded service account JSON for the Firebase Admin SDK
    firebase_service_key: str = Field(
        default="",
        validation_alias=AliasChoices("firebase_service_key", "fb_service_key"),
    )

    # ── CORS ──────────────────────────────────────────────────────────────
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Retry Configuration ───────────────────────────────────────────────
    # What: Tenacity retry settings for Stripe connection failures
    retry_max_attempts: int = Field(default=3, ge=1, le=10)
    retry_min_wait: int = Field(default=1, ge=1, le=30)
    retry_max_wait: int = Field(default=8, ge=2, le=120)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "populate_by_name": True,
        "extra": "ignore",
    }

    @property
    def mongodb_uri(self) -> str:
        """
        What:  The URI handed to AsyncMongoClient.
        How:   database_url wins; otherwise an Atlas SRV URI is built from
               DB_USER / DB_PASS / DB_CLUSTER_HOST. Without credentials a
               plain mongodb:// URI to the cluster host is returned.
        """
        if self.database_url:
            return self.database_url
        if self.db_user:
            return (
                f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_pass)}"
                f"@{self.db_cluster_host}/?retryWrites=true&w=majority"
            )
        return f"mongodb://{self.db_cluster_host}"

    @property
    def firebase_credentials_info(self) -> Optional[Dict[str, Any]]:
        """
        What:  Decodes FB_SERVICE_KEY into the service account dict.
        Returns None when the key is unset.
        Raises ValueError when the key is set but is not base64 JSON.
        """
        if not self.firebase_service_key:
            return None
        try:
            decoded = base64.b64decode(self.firebase_service_key, validate=True)
            return json.loads(decoded.decode("utf-8"))
        except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValueError("FB_SERVICE_KEY is not base64-encoded service account JSON") from e

    def validate_required_for_production(self) -> None:
        """
        What:  Validates that critical settings are configured.
        When:  Called during app startup (lifespan).
        How:   Collects every problem and raises one ValueError listing them.
        """
        errors = []
        if not self.database_url and not self.db_user:
            errors.append(
                "Neither DATABASE_URL nor DB_USER/DB_PASS is set. "
                f"Falling back to {self.mongodb_uri}"
            )
        if not self.stripe_secret_key:
            errors.append(
                "PAYMENT_GATEWAY_KEY is not set. POST /create-payment-intent will fail."
            )
        if not self.firebase_service_key:
            errors.append(
                "FB_SERVICE_KEY is not set. Identity-gated routes will fail."
            )
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


settings = Settings()
