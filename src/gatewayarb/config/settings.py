"""
Application settings with environment variable support.

Uses Pydantic Settings for type-safe configuration with automatic
environment variable loading and validation.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gatewayarb.config.constants import (
    DEFAULT_CANDIDATE_DELAY,
    DEFAULT_DELIVERY_CHANNELS,
    DEFAULT_MAX_CHAINS,
    DEFAULT_MAX_HOPS,
    DEFAULT_MIN_PROFIT_PERCENT,
    DEFAULT_POSITION_SIZE_SOL,
    DEFAULT_SCAN_INTERVAL,
    DEFAULT_SLIPPAGE_BPS,
    DEFAULT_TIP_LAMPORTS,
    DELIVERY_TIMEOUT_SECONDS,
    GATEWAY_RPC_URL,
    JUPITER_API_URL,
    LAMPORTS_PER_SOL,
    QUOTE_TIMEOUT_SECONDS,
    SOLANA_RPC_URL,
)
from gatewayarb.core.errors import ConfigurationError
from gatewayarb.core.types import DeliveryChannel


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables.
    Sensitive values use SecretStr for safe handling.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================================================================
    # Credentials
    # =========================================================================

    private_key: SecretStr = Field(
        ...,
        description="Base58-encoded wallet secret key used to sign swaps",
    )
    gateway_api_key: SecretStr | None = Field(
        default=None,
        description="Bearer key for the relay gateway",
    )

    # =========================================================================
    # Network Configuration
    # =========================================================================

    solana_rpc_url: str = Field(
        default=SOLANA_RPC_URL,
        description="Standard Solana JSON-RPC endpoint",
    )
    solana_network: Literal["mainnet-beta", "devnet", "testnet"] = Field(
        default="mainnet-beta",
        description="Cluster the wallet operates on",
    )
    gateway_rpc_url: str = Field(
        default=GATEWAY_RPC_URL,
        description="Relay gateway JSON-RPC endpoint",
    )
    quote_api_url: str = Field(
        default=JUPITER_API_URL,
        description="Jupiter quote/swap API base URL",
    )

    # =========================================================================
    # Trading Configuration
    # =========================================================================

    min_profit_percent: float = Field(
        default=DEFAULT_MIN_PROFIT_PERCENT,
        ge=0.0,
        le=100.0,
        description="Minimum chain profit in percent (e.g., 0.01 = 0.01%)",
    )

    max_slippage_bps: int = Field(
        default=DEFAULT_SLIPPAGE_BPS,
        ge=1,
        le=1000,
        description="Slippage tolerance used for simulation quotes",
    )

    position_size_sol: float = Field(
        default=DEFAULT_POSITION_SIZE_SOL,
        gt=0.0,
        description="Amount of SOL pushed through each candidate chain",
    )

    candidate_pairs: str | None = Field(
        default=None,
        description="Comma-separated tradable pairs (e.g. 'SOL/USDC,USDC/USDT'); "
        "default catalog is used when unset",
    )

    max_hops: int = Field(
        default=DEFAULT_MAX_HOPS,
        ge=2,
        le=4,
        description="Hop count of discovered chains",
    )

    max_chains: int = Field(
        default=DEFAULT_MAX_CHAINS,
        ge=1,
        le=500,
        description="Maximum number of candidate chains to scan",
    )

    # =========================================================================
    # Delivery
    # =========================================================================

    delivery_channels: str = Field(
        default=",".join(DEFAULT_DELIVERY_CHANNELS),
        description="Comma-separated delivery channels raced per transaction",
    )

    jito_tip_lamports: int = Field(
        default=DEFAULT_TIP_LAMPORTS,
        ge=0,
        le=10_000_000,
        description="Incentive tip attached to accelerated delivery paths",
    )

    delivery_timeout_seconds: float = Field(
        default=DELIVERY_TIMEOUT_SECONDS,
        gt=0.0,
        le=120.0,
        description="Upper bound on one delivery race",
    )

    optimize_before_send: bool = Field(
        default=True,
        description="Ask the relay for a compute budget estimate before sending",
    )

    # =========================================================================
    # Scheduling
    # =========================================================================

    scan_interval_seconds: float = Field(
        default=DEFAULT_SCAN_INTERVAL,
        ge=0.0,
        description="Pause between full scans",
    )

    candidate_delay_seconds: float = Field(
        default=DEFAULT_CANDIDATE_DELAY,
        ge=0.0,
        le=10.0,
        description="Pause between candidate evaluations within a scan",
    )

    quote_timeout_seconds: float = Field(
        default=QUOTE_TIMEOUT_SECONDS,
        gt=0.0,
        le=60.0,
        description="Per-call timeout for quote requests",
    )

    # =========================================================================
    # Operation Mode
    # =========================================================================

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional log file",
    )

    metrics_file: Path | None = Field(
        default=None,
        description="Optional JSON-lines file receiving transaction metrics",
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("private_key", mode="after")
    @classmethod
    def validate_private_key(cls, v: SecretStr) -> SecretStr:
        """Ensure the credential is not empty."""
        if not v.get_secret_value().strip():
            raise ValueError("Credential cannot be empty")
        return v

    @field_validator("delivery_channels", mode="after")
    @classmethod
    def validate_channels(cls, v: str) -> str:
        """Ensure every configured channel is known."""
        names = [name.strip().lower() for name in v.split(",") if name.strip()]
        if not names:
            raise ValueError("At least one delivery channel is required")
        for name in names:
            DeliveryChannel(name)
        return ",".join(names)

    @field_validator("candidate_pairs", mode="after")
    @classmethod
    def validate_pairs(cls, v: str | None) -> str | None:
        """Ensure pairs look like 'BASE/QUOTE'."""
        if v is None:
            return v
        for pair in v.split(","):
            parts = pair.strip().split("/")
            if len(parts) != 2 or not all(parts):
                raise ValueError(f"Malformed pair: {pair!r}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def channels(self) -> tuple[DeliveryChannel, ...]:
        """Parsed delivery channels in configured order."""
        return tuple(DeliveryChannel(name) for name in self.delivery_channels.split(","))

    @property
    def pairs(self) -> list[tuple[str, str]]:
        """Parsed candidate pairs, empty when the default catalog is used."""
        if not self.candidate_pairs:
            return []
        result = []
        for pair in self.candidate_pairs.split(","):
            base, quote = pair.strip().split("/")
            result.append((base.strip().upper(), quote.strip().upper()))
        return result

    @property
    def trade_amount(self) -> int:
        """Trade size in lamports."""
        return round(self.position_size_sol * LAMPORTS_PER_SOL)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded only once.
    Clear cache with `get_settings.cache_clear()` if needed.
    """
    return Settings()  # type: ignore[call-arg, unused-ignore]


def load_settings() -> Settings:
    """
    Load settings, converting validation failures to ConfigurationError.

    Raises:
        ConfigurationError: On missing credentials or malformed values.
    """
    try:
        return get_settings()
    except ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ConfigurationError(f"Invalid configuration ({fields}): {e}") from e
