import logging

from eth_utils import to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3
from web3.exceptions import TransactionNotFound

from storage_proof.utils.abi import DIAMOND_ABI

logger = logging.getLogger(__name__)


class L1RpcClient:
    """Read-only access to the L1 chain and the rollup diamond contract."""

    def __init__(self, url: str, diamond_address: str):
        self.url = url
        self.w3 = AsyncWeb3(AsyncHTTPProvider(self.url))
        self.diamond_address = to_checksum_address(diamond_address)
        self.diamond = self.w3.eth.contract(
            address=self.diamond_address, abi=DIAMOND_ABI
        )

    async def get_transaction(self, tx_hash: str):
        logger.debug("L1 eth_getTransactionByHash %s", tx_hash)
        try:
            return await self.w3.eth.get_transaction(tx_hash)
        except TransactionNotFound:
            return None

    async def get_transaction_receipt(self, tx_hash: str):
        logger.debug("L1 eth_getTransactionReceipt %s", tx_hash)
        try:
            return await self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None

    async def get_l2_logs_root_hash(self, batch_number: int) -> bytes:
        logger.debug("L1 l2LogsRootHash(%s)", batch_number)
        return await self.diamond.functions.l2LogsRootHash(batch_number).call()

    async def close(self):
        await self.w3.provider.disconnect()
