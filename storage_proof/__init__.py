from storage_proof.config import NETWORKS, NetworkConfig, get_network
from storage_proof.services.storage_proof import StorageProofProvider

__all__ = ["NETWORKS", "NetworkConfig", "StorageProofProvider", "get_network"]
