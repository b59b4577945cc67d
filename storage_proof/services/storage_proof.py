import asyncio
import logging

from eth_utils import to_checksum_address

from storage_proof.config import DEFAULT_BATCH_LAG, NetworkConfig
from storage_proof.dtos.batch import CommitBatchInfo, StoredBatchInfo
from storage_proof.dtos.proof import ProofBundle, SingleProofBundle
from storage_proof.dtos.result import ProofFailure, ProofResult, ProofSuccess
from storage_proof.errors import (
    BatchNotCommitted,
    BatchNotProved,
    CommitTransactionNotFound,
    ReceiptNotFound,
    StorageProofError,
)
from storage_proof.services.l1_rpc import L1RpcClient
from storage_proof.services.l2_rpc import L2RpcClient
from storage_proof.utils.abi import decode_commit_batch, locate_commitment
from storage_proof.utils.deserializers import (
    assemble_stored_batch_info,
    to_batch_metadata,
)

logger = logging.getLogger(__name__)


async def gather_or_cancel(*aws):
    """Runs ``aws`` concurrently. The first failure cancels the others and is re-raised."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.wait(tasks)

    errors = [task.exception() for task in tasks if not task.cancelled()]
    for error in errors:
        if error is not None:
            raise error
    return [task.result() for task in tasks]


class StorageProofProvider:
    """Storage proof provider for zkSync.

    Combines a ``zks_getProof`` storage proof with the batch metadata committed
    on L1, so the proof can be checked against the batch root stored in the
    diamond contract. Nothing is cached: every call resolves from the nodes.
    """

    def __init__(
        self,
        l1_client: L1RpcClient,
        l2_client: L2RpcClient,
        diamond_address: str,
        batch_lag: int = DEFAULT_BATCH_LAG,
    ):
        self.l1_client = l1_client
        self.l2_client = l2_client
        self.diamond_address = to_checksum_address(diamond_address)
        self.batch_lag = batch_lag

    @classmethod
    def from_network(cls, network: NetworkConfig, batch_lag: int = DEFAULT_BATCH_LAG):
        return cls(
            L1RpcClient(network.l1_rpc_url, network.diamond_address),
            L2RpcClient(network.l2_rpc_url),
            network.diamond_address,
            batch_lag=batch_lag,
        )

    async def close(self):
        await self.l1_client.close()
        await self.l2_client.close()

    async def parse_commit_transaction(
        self, tx_hash: str, batch_number: int
    ) -> tuple[CommitBatchInfo, bytes]:
        """Parses the transaction where the batch is committed and returns commit info"""
        transaction = await self.l1_client.get_transaction(tx_hash)
        if transaction is None:
            raise CommitTransactionNotFound(tx_hash)
        commit_batch_info = decode_commit_batch(transaction["input"], batch_number)

        receipt = await self.l1_client.get_transaction_receipt(tx_hash)
        if receipt is None:
            raise ReceiptNotFound(tx_hash)
        commitment = locate_commitment(
            receipt["logs"], self.diamond_address, batch_number
        )
        return commit_batch_info, commitment

    async def get_stored_batch_info(self, batch_number: int) -> StoredBatchInfo:
        details = await self.l2_client.get_l1_batch_details(batch_number)

        if details.commit_tx_hash is None:
            logger.warning("Batch %s is not committed", batch_number)
            raise BatchNotCommitted(batch_number)
        elif details.prove_tx_hash is None:
            logger.warning(
                "Batch %s committed in %s but not proved",
                batch_number,
                details.commit_tx_hash,
            )
            raise BatchNotProved(batch_number)

        commit_batch_info, commitment = await self.parse_commit_transaction(
            details.commit_tx_hash, batch_number
        )
        l2_logs_tree_root = await self.l1_client.get_l2_logs_root_hash(batch_number)

        return assemble_stored_batch_info(
            commit_batch_info, commitment, l2_logs_tree_root
        )

    async def resolve_batch_number(self, batch_number: int | None) -> int:
        if batch_number is not None:
            return batch_number
        latest = await self.l2_client.get_l1_batch_number()
        return latest - self.batch_lag

    async def get_proofs(
        self,
        address: str,
        storage_keys: list[str],
        batch_number: int | None = None,
    ) -> ProofBundle:
        """Gets the proofs and batch metadata for the given address and storage keys.

        Defaults to ``batch_lag`` batches behind the latest one, which is old
        enough to have been proved.
        """
        batch_number = await self.resolve_batch_number(batch_number)

        proofs, stored_batch_info = await gather_or_cancel(
            self.l2_client.get_proofs(address, storage_keys, batch_number),
            self.get_stored_batch_info(batch_number),
        )
        logger.info(
            "Assembled %d proof(s) for %s at batch %s",
            len(proofs),
            address,
            batch_number,
        )
        return ProofBundle(metadata=to_batch_metadata(stored_batch_info), proofs=proofs)

    async def get_proof(
        self, address: str, storage_key: str, batch_number: int | None = None
    ) -> SingleProofBundle:
        bundle = await self.get_proofs(address, [storage_key], batch_number)
        return SingleProofBundle(metadata=bundle.metadata, proof=bundle.proofs[0])

    async def resolve_proofs(
        self,
        address: str,
        storage_keys: list[str],
        batch_number: int | None = None,
    ) -> ProofResult:
        """Like ``get_proofs`` but returns a tagged result instead of raising."""
        try:
            bundle = await self.get_proofs(address, storage_keys, batch_number)
        except StorageProofError as e:
            return ProofFailure(kind=e.kind, message=str(e))
        return ProofSuccess(bundle=bundle)
