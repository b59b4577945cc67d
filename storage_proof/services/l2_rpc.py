import logging

from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.types import RPCEndpoint

from storage_proof.dtos.batch import BatchDetails
from storage_proof.dtos.proof import StorageProof
from storage_proof.errors import L2RpcError, ProofFetchFailed
from storage_proof.utils.deserializers import (
    deserialize_batch_details,
    deserialize_storage_proofs,
)

logger = logging.getLogger(__name__)


class L2RpcClient:
    def __init__(self, url: str):
        self.url = url
        self.w3 = AsyncWeb3(AsyncHTTPProvider(self.url))

    async def request(self, method: str, params: list):
        logger.debug("L2 %s %s", method, params)
        response = await self.w3.provider.make_request(RPCEndpoint(method), params)
        if response.get("error") is not None:
            raise L2RpcError(method, response["error"])
        return response.get("result")

    async def close(self):
        await self.w3.provider.disconnect()

    async def get_l1_batch_number(self) -> int:
        result = await self.request("zks_L1BatchNumber", [])
        return int(result, 16) if isinstance(result, str) else int(result)

    async def get_l1_batch_details(self, batch_number: int) -> BatchDetails:
        result = await self.request("zks_getL1BatchDetails", [batch_number])
        return deserialize_batch_details(batch_number, result)

    async def get_proofs(
        self, account: str, storage_keys: list[str], batch_number: int
    ) -> list[StorageProof]:
        # Account proofs don't exist in zkSync, only storage proofs are returned
        try:
            result = await self.request(
                "zks_getProof", [account, storage_keys, batch_number]
            )
            return deserialize_storage_proofs(account, result)
        except Exception as e:
            raise ProofFetchFailed(
                f"Failed to get proof from L2 provider for {account} "
                f"at batch {batch_number}: {e}"
            ) from e
