"""
Configuration management for the NodeArmy registry.
"""
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from web3 import Web3


class Settings(BaseSettings):
    """Registry settings loaded from environment variables (``NODEARMY_*``) or ``.env``."""

    # Application Configuration
    app_name: str = "NodeArmy Registry"
    environment: str = "development"

    # Identity Configuration
    owner_address: Optional[str] = None
    treasury_address: Optional[str] = None
    founder_address: Optional[str] = None

    # Fee Configuration (wei)
    register_fee: int = Field(default=Web3.to_wei("0.01", "ether"), ge=0)
    upgrade_fee: int = Field(default=Web3.to_wei("0.02", "ether"), ge=0)
    action_fee: int = Field(default=Web3.to_wei("0.001", "ether"), ge=0)
    boost_fee: int = Field(default=Web3.to_wei("0.005", "ether"), ge=0)
    treasury_bps: int = 7000

    # Logging Configuration
    log_level: str = "INFO"
    log_file_enabled: bool = False
    log_file_path: str = "./logs/nodearmy.log"

    @field_validator('owner_address', 'treasury_address', 'founder_address')
    @classmethod
    def validate_address(cls, v):
        """Validate addresses are proper Ethereum addresses."""
        if v and not (isinstance(v, str) and v.startswith('0x') and Web3.is_address(v)):
            raise ValueError('Address must be a valid Ethereum address (0x...)')
        return v

    @field_validator('treasury_bps')
    @classmethod
    def validate_treasury_bps(cls, v):
        """Validate the treasury share is expressed in basis points."""
        if not 0 <= v <= 10_000:
            raise ValueError('treasury_bps must be between 0 and 10000')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Normalise the log level name."""
        level = str(v).upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f'Unknown log level: {v}')
        return level

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "env_prefix": "NODEARMY_",
        "extra": "ignore",
    }


# Create global settings instance
settings = Settings()


def get_settings() -> Settings:
    return settings
