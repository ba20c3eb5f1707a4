import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str = ""):
    """Read an environment variable when Settings is instantiated"""
    return field(default_factory=lambda: os.getenv(name, default))


def _env_int(name: str, default: int):
    return field(default_factory=lambda: int(os.getenv(name, str(default))))


# Pinned Alchemy base URLs per network slug (prevent SSRF)
ALCHEMY_BASE_URLS = {
    "ethereum-mainnet": "https://eth-mainnet.g.alchemy.com/v2",
    "polygon-mainnet": "https://polygon-mainnet.g.alchemy.com/v2",
    "arbitrum-mainnet": "https://arb-mainnet.g.alchemy.com/v2",
    "optimism-mainnet": "https://opt-mainnet.g.alchemy.com/v2",
}

MULTICALL3_ADDRESS = "0xcA11bde05977b3631167028862bE2a173976CA11"


@dataclass
class Settings:
    # Logging
    log_level: str = _env("LOG_LEVEL", "INFO")
    log_dir: str = _env("LOG_DIR", "./logs")

    # RPC
    alchemy_api_key: str = _env("ALCHEMY_API_KEY")
    ethereum_rpc_url: str = _env("ETHEREUM_RPC_URL")
    polygon_rpc_url: str = _env("POLYGON_RPC_URL")
    arbitrum_rpc_url: str = _env("ARBITRUM_RPC_URL")
    optimism_rpc_url: str = _env("OPTIMISM_RPC_URL")

    # HTTP Settings
    http_timeout: int = _env_int("HTTP_TIMEOUT", 30)  # seconds
    max_retries: int = _env_int("MAX_RETRIES", 5)
    rpc_concurrency: int = _env_int("RPC_CONCURRENCY", 15)

    # Multicall
    multicall_batch_size: int = _env_int("MULTICALL_BATCH_SIZE", 100)
    multicall_address: str = _env("MULTICALL_ADDRESS", MULTICALL3_ADDRESS)

    # Precomputed app tokens / contract positions
    positions_file: str = _env("POSITIONS_FILE")

    # Catch per-group failures in the generalized strategy instead of failing the address
    isolate_group_failures: bool = field(
        default_factory=lambda: os.getenv("ISOLATE_GROUP_FAILURES", "false").lower() == "true"
    )

    def rpc_url_for(self, network: str) -> str:
        """Resolve the RPC URL for a network slug, explicit override first."""
        override = {
            "ethereum-mainnet": self.ethereum_rpc_url,
            "polygon-mainnet": self.polygon_rpc_url,
            "arbitrum-mainnet": self.arbitrum_rpc_url,
            "optimism-mainnet": self.optimism_rpc_url,
        }.get(network, "")
        if override:
            return override

        base_url = ALCHEMY_BASE_URLS.get(network)
        if base_url and self.alchemy_api_key:
            return f"{base_url}/{self.alchemy_api_key}"
        return ""

    def validate(self):
        """Validate configuration on startup"""
        if self.multicall_batch_size < 1:
            raise ValueError("MULTICALL_BATCH_SIZE must be at least 1")
        if self.rpc_concurrency < 1:
            raise ValueError("RPC_CONCURRENCY must be at least 1")
        if self.max_retries < 1:
            raise ValueError("MAX_RETRIES must be at least 1")

        # RPC URLs are checked lazily when a network is first used
        return True

settings = Settings()
settings.validate()

def get_config():
    """Get configuration settings"""
    return {
        "log_level": settings.log_level,
        "log_dir": settings.log_dir,
        "http_timeout": settings.http_timeout,
        "max_retries": settings.max_retries,
        "rpc_concurrency": settings.rpc_concurrency,
        "multicall_batch_size": settings.multicall_batch_size,
        "positions_file": settings.positions_file,
        "isolate_group_failures": settings.isolate_group_failures,
    }
