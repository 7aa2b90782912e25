#!/usr/bin/env python3
"""
Configuration management for contract deployment.

Every value can be set through a DEPLOY_* environment variable or a .env file.
Network selection, signer and gas/fee settings belong here, never to the
orchestrator, which only sees the resulting context.
"""

from enum import Enum
from typing import Optional

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings

from .errors import ConfigurationError

load_dotenv()


class Backend(str, Enum):
    """Framework used to resolve, sign and submit deployments"""
    BROWNIE = "brownie"
    WEB3 = "web3"


class Settings(BaseSettings):
    """Deployment settings with environment-based configuration"""

    backend: Backend = Backend.BROWNIE

    # Brownie settings
    network: Optional[str] = None  # Brownie network id, e.g. "development" or "mainnet-fork"
    project_path: str = "."

    # Web3 settings
    rpc_url: str = "http://localhost:8545"
    build_dir: str = "build/contracts"

    # Signer: private key if given, otherwise the account at account_index
    private_key: Optional[str] = None
    account_index: int = 0

    # Confirmation depth (1 = mined once)
    required_confirmations: int = 1
    receipt_timeout: float = 120.0
    poll_interval: float = 1.0

    # Gas/fee values in wei, passed through only when set
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None
    max_fee: Optional[int] = None
    priority_fee: Optional[int] = None

    # Outputs
    sequence_path: Optional[str] = None
    output_path: Optional[str] = None
    log_level: str = "INFO"

    @field_validator('gas_limit', 'gas_price', 'max_fee', 'priority_fee', mode='before')
    @classmethod
    def parse_optional_int(cls, v):
        """Handle empty strings for optional numeric fields"""
        if v == '' or v is None:
            return None
        return v

    @field_validator('network', 'private_key', 'sequence_path', 'output_path', mode='before')
    @classmethod
    def parse_optional_str(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator('log_level')
    @classmethod
    def normalize_log_level(cls, v):
        return str(v).upper()

    model_config = {"env_prefix": "DEPLOY_", "env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}


def get_settings() -> Settings:
    """Build deployment settings from the environment and .env"""
    return Settings()


def validate_settings(config: Settings) -> Settings:
    """Validate settings for the selected backend"""
    if config.backend == Backend.WEB3 and not config.rpc_url:
        raise ConfigurationError("An RPC URL is required for the web3 backend")
    if config.gas_price is not None and (config.max_fee is not None or config.priority_fee is not None):
        raise ConfigurationError("gas_price cannot be combined with max_fee/priority_fee")
    if config.required_confirmations < 1:
        raise ConfigurationError(f"required_confirmations must be at least 1, got {config.required_confirmations}")
    if config.account_index < 0:
        raise ConfigurationError(f"account_index must not be negative, got {config.account_index}")
    return config
