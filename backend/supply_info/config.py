from pydantic import field_validator
from pydantic_settings import BaseSettings

from supply_info.constants import (
    DEFAULT_NEVM_EXPLORER_API_URL,
    DEFAULT_NEVM_SUPPLY_URL,
    EXPLORER_TIMEOUT_SECONDS,
    RPC_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    # Syscoin Core RPC (authoritative UTXO source)
    syscoin_core_rpc_host: str = "127.0.0.1"
    syscoin_core_rpc_port: int = 8370
    syscoin_core_rpc_username: str = ""
    syscoin_core_rpc_password: str = ""
    rpc_timeout_seconds: float = RPC_TIMEOUT_SECONDS

    # NEVM explorers
    syscoin_vault_manager: str = ""  # Address whose balance is deducted from NEVM supply
    nevm_supply_url: str = DEFAULT_NEVM_SUPPLY_URL
    nevm_explorer_api_url: str = DEFAULT_NEVM_EXPLORER_API_URL
    explorer_timeout_seconds: float = EXPLORER_TIMEOUT_SECONDS

    # Recording
    polling_interval_seconds: int = 30  # <= 0 disables polling after the startup cycle
    treasury_deduction: float = 0.0

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3000
    shutdown_grace_seconds: float = 10.0

    log_level: str = "INFO"

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError(f"port must be between 1 and 65535, got {v}")
        return v

    @field_validator("rpc_timeout_seconds", "explorer_timeout_seconds", "shutdown_grace_seconds")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("treasury_deduction")
    @classmethod
    def validate_deduction(cls, v: float) -> float:
        if v < 0:
            raise ValueError("treasury_deduction must not be negative")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @property
    def rpc_url(self) -> str:
        return f"http://{self.syscoin_core_rpc_host}:{self.syscoin_core_rpc_port}/"

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
