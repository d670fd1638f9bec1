from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    log_level: str = Field(default="INFO", description="Logging level")

    # Chain access
    rpc_url: str = Field(
        default="https://cloudflare-eth.com",
        description="Ethereum mainnet JSON-RPC endpoint",
    )

    # Balance indexer
    ethplorer_base_url: str = Field(
        default="https://api.ethplorer.io",
        description="Base URL for the Ethplorer API",
    )
    ethplorer_api_key: str = Field(default="freekey", description="Ethplorer API key")

    # Community token list
    token_list_base_url: str = Field(
        default="https://raw.githubusercontent.com/ethereum-lists/tokens/master/tokens/eth",
        description="Directory of per-address token JSON files",
    )

    # Curated registry (Kleros ERC20 badge list)
    registry_address: str = Field(
        default="0xCb4Aae35333193232421E86Cd2E9b6C91F3B125F",
        description="ArbitrableAddressList contract backing the curated registry",
    )
    enable_registry: bool = Field(default=True, description="Check curated registry membership")

    # Rate Limiting
    max_concurrent_requests: int = Field(
        default=10,
        ge=1,
        description="Max contracts resolved concurrently per discovery run",
    )
    request_timeout_seconds: int = Field(default=30, ge=1, description="Request timeout")

    @property
    def has_registry(self) -> bool:
        return self.enable_registry and bool(self.registry_address)


# Global settings instance
settings = Settings()
