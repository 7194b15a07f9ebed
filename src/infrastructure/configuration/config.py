"""
Configuration management for the Kingsman storefront backend
"""

import logging
import threading
from typing import Dict, List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.infrastructure.utilities.constants import ConfigValidation

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Database configuration
    database_url: str = Field(
        default="sqlite:///data/kingsman.db", description="Database connection URL"
    )

    # Application settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: str = Field(default="logs", description="Directory for rotating log files")
    environment: str = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="0.0.0.0", description="HTTP bind address")
    port: int = Field(default=8000, description="HTTP port")
    cors_origins: List[str] = Field(
        default=["http://localhost:5173"], description="Allowed storefront origins"
    )
    admin_user_ids: List[str] = Field(
        default_factory=list, description="User ids allowed to use admin endpoints"
    )

    # Pricing settings
    currency: str = Field(default="ILS", description="Currency code")
    vat_rate: float = Field(default=0.18, description="VAT applied to the discounted subtotal")
    new_user_discount_percentage: float = Field(
        default=5.0, description="Automatic discount for new accounts"
    )
    new_user_discount_months: int = Field(
        default=3, description="Months after sign-up during which the new-user discount applies"
    )
    min_payment_amount: float = Field(default=1.0, description="Lowest chargeable total")
    max_payment_amount: float = Field(default=100000.0, description="Highest chargeable total")

    # Delivery settings
    delivery_zone_fees: Dict[str, float] = Field(
        default={
            "telaviv_north": 65.0,
            "jerusalem": 85.0,
            "south": 85.0,
            "westbank": 85.0,
        },
        description="Base delivery fee per zone",
    )
    free_delivery_thresholds: Dict[str, float] = Field(
        default={"westbank": 1500.0},
        description="Per-zone subtotal from which delivery is free",
    )
    default_free_delivery_threshold: float = Field(
        default=850.0, description="Subtotal from which delivery is free"
    )
    delivery_weight_step_kg: float = Field(
        default=30.0, description="Each started weight step adds another delivery fee"
    )
    max_delivery_fee_multiplier: int = Field(
        default=2, description="Cap on the number of delivery fees per order"
    )

    # Payment provider / client settings
    tranzila_terminal_name: str = Field(default="terminalname", description="Tranzila terminal")
    tranzila_base_url: str = Field(
        default="https://directng.tranzila.com", description="Tranzila iframe host"
    )
    api_base_url: str = Field(
        default="", description="Backend URL for checkout sessions; empty runs them in-process"
    )
    request_timeout_seconds: float = Field(
        default=30.0, description="Transport timeout for checkout client requests"
    )


_settings_instance: Settings | None = None
_settings_lock = threading.Lock()


def get_config() -> Settings:
    """Get the global settings instance, ensuring thread safety."""
    global _settings_instance
    if _settings_instance is None:
        with _settings_lock:
            if _settings_instance is None:
                _settings_instance = Settings()
    return _settings_instance


def reset_config() -> None:
    """Drop the cached settings so the next get_config() re-reads the environment."""
    global _settings_instance
    with _settings_lock:
        _settings_instance = None


class ConfigValidator:
    """Validates configuration for production readiness"""

    def __init__(self, config: Settings | None = None):
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.config: Settings | None = config

    def validate_all(self) -> bool:
        """Run all validation checks and collect results"""
        if self.config is None:
            try:
                self.config = get_config()
            except (ValueError, TypeError) as exc:  # pragma: no cover
                self.errors.append(f"Failed to load configuration: {exc}")
                return False

        self._validate_environment_settings()
        self._validate_pricing_rules()
        self._validate_delivery_rules()

        self._log_validation_results()
        return not self.errors

    def get_validation_report(self) -> dict[str, object]:
        """Return detailed report after running `validate_all()`."""
        return {
            "valid": not self.errors,
            "errors": self.errors,
            "warnings": self.warnings,
            "config_summary": {
                "environment": self.config.environment if self.config else None,
                "database_type": (
                    "sqlite"
                    if self.config and self.config.database_url.startswith(ConfigValidation.SQLITE_PREFIX)
                    else "other"
                ),
                "currency": self.config.currency if self.config else None,
                "admins_configured": bool(self.config and self.config.admin_user_ids),
            },
        }

    def _validate_environment_settings(self):
        if self.config.environment not in ConfigValidation.VALID_ENVIRONMENTS:
            self.warnings.append(f"Unknown environment: {self.config.environment}")
        if self.config.environment == "production":
            if self.config.log_level.upper() == "DEBUG":
                self.warnings.append("DEBUG logging in production may impact performance")
            if not self.config.admin_user_ids:
                self.warnings.append("No admin users configured; failed orders cannot be reviewed")

    def _validate_pricing_rules(self):
        if not 0 <= self.config.vat_rate < 1:
            self.errors.append("VAT rate must be within [0, 1)")
        if not 0 <= self.config.new_user_discount_percentage <= 100:
            self.errors.append("New-user discount percentage must be within [0, 100]")
        if self.config.min_payment_amount <= 0:
            self.errors.append("Minimum payment amount must be positive")
        if self.config.min_payment_amount > self.config.max_payment_amount:
            self.errors.append("Minimum payment amount exceeds maximum payment amount")
        if self.config.currency not in ConfigValidation.VALID_CURRENCIES:
            self.warnings.append(f"Unusual currency: {self.config.currency}")

    def _validate_delivery_rules(self):
        for zone, fee in self.config.delivery_zone_fees.items():
            if fee < 0:
                self.errors.append(f"Delivery fee for {zone} cannot be negative")
        if self.config.delivery_weight_step_kg <= 0:
            self.errors.append("Delivery weight step must be positive")
        if self.config.max_delivery_fee_multiplier < 1:
            self.errors.append("Delivery fee multiplier cap must be at least 1")

    def _log_validation_results(self):
        if self.errors:
            logger.error("Configuration validation failed", extra={"errors": self.errors, "warnings": self.warnings})
        elif self.warnings:
            logger.warning("Configuration validation passed with warnings", extra={"warnings": self.warnings})
        else:
            logger.info("Configuration validation passed successfully")
