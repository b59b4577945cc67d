from pydantic import BaseModel
from pydantic_settings import BaseSettings
from decouple import config


DEFAULT_BATCH_LAG = 2000


class NetworkConfig(BaseModel):
    l1_rpc_url: str
    l2_rpc_url: str
    diamond_address: str


# Preset targets, keyed by network name
NETWORKS: dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig(
        l1_rpc_url="https://eth.llamarpc.com",
        l2_rpc_url="https://mainnet.era.zksync.io",
        diamond_address="0x32400084C286CF3E17e7B677ea9583e60a000324",
    ),
    "sepolia": NetworkConfig(
        l1_rpc_url="https://ethereum-sepolia.publicnode.com",
        l2_rpc_url="https://sepolia.era.zksync.dev",
        diamond_address="0x9A6DE0f62Aa270A8bCB1e2610078650D539B1Ef9",
    ),
}


class UnknownNetwork(ValueError):
    pass


def get_network(name: str) -> NetworkConfig:
    try:
        return NETWORKS[name]
    except KeyError:
        raise UnknownNetwork(
            f"Unknown network {name!r}, expected one of {sorted(NETWORKS)}"
        ) from None


class Settings(BaseSettings):
    """Server config settings"""

    # name of app
    app_name: str = "zkSync Storage Proof API"

    # Environment type
    env: str = config("ENV", default="test")
    log_level: str = config("LOG_LEVEL", default="INFO")

    # Network selection, endpoints fall back to the preset when unset
    network: str = config("NETWORK", default="sepolia")
    l1_rpc_url: str | None = config("L1_RPC_URL", default=None)
    l2_rpc_url: str | None = config("L2_RPC_URL", default=None)
    diamond_address: str | None = config("DIAMOND_ADDRESS", default=None)

    # Distance from the latest batch used when no batch number is given
    batch_lag: int = config("BATCH_LAG", default=DEFAULT_BATCH_LAG, cast=int)

    allowed_hosts: list = ["*"]

    class Config:
        env_file = ".env"
        extra = "ignore"

    def network_config(self) -> NetworkConfig:
        preset = get_network(self.network)
        return NetworkConfig(
            l1_rpc_url=self.l1_rpc_url or preset.l1_rpc_url,
            l2_rpc_url=self.l2_rpc_url or preset.l2_rpc_url,
            diamond_address=self.diamond_address or preset.diamond_address,
        )


CONFIG = Settings()
