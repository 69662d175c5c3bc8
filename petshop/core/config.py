"""Checkout Service Configuration"""

from decimal import Decimal
from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Poshik Pet Shop"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    # Pricing
    currency: str = "INR"
    tax_rate_cgst: Decimal = Decimal("0.09")
    tax_rate_sgst: Decimal = Decimal("0.09")
    express_delivery_fee: Decimal = Decimal("99")

    # Cart ledger backend: "memory" or "rest"
    ledger_backend: str = "memory"
    backend_url: Optional[str] = None
    backend_api_key: Optional[str] = None
    backend_timeout: float = 30.0

    # Idle session and cart view cleanup
    session_max_age_hours: int = 24
    session_cleanup_interval: float = 3600.0

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        env_prefix = "PETSHOP_"
        case_sensitive = False

    @property
    def rest_backend_configured(self) -> bool:
        """Check if the hosted backend credentials are configured"""
        return all([self.backend_url, self.backend_api_key])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
