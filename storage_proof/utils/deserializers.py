from hexbytes import HexBytes

from storage_proof.dtos.batch import (
    BatchDetails,
    BatchMetadata,
    BatchMetadataResponse,
    CommitBatchInfo,
    StoredBatchInfo,
    StoredBatchInfoResponse,
)
from storage_proof.dtos.proof import (
    ProofBundle,
    ProofBundleResponse,
    SingleProofBundle,
    SingleProofBundleResponse,
    StorageProof,
    StorageProofResponse,
)
from storage_proof.errors import IncompleteBatchMetadata


def bytes_to_hex(bytes_):
    return "0x" + bytes(bytes_).hex()


def hex_to_bytes(value) -> bytes:
    return bytes(HexBytes(value))


def _require_hash(name: str, value) -> bytes:
    if value is None or len(HexBytes(value)) == 0:
        raise IncompleteBatchMetadata(f"{name} is missing")
    value = hex_to_bytes(value)
    if len(value) != 32:
        raise IncompleteBatchMetadata(f"{name} must be 32 bytes, got {len(value)}")
    return value


def assemble_stored_batch_info(
    commit_batch_info: CommitBatchInfo, commitment, l2_logs_tree_root
) -> StoredBatchInfo:
    return StoredBatchInfo(
        batch_number=commit_batch_info.batch_number,
        batch_hash=commit_batch_info.new_state_root,
        index_repeated_storage_changes=commit_batch_info.index_repeated_storage_changes,
        number_of_layer1_txs=commit_batch_info.number_of_layer1_txs,
        priority_operations_hash=commit_batch_info.priority_operations_hash,
        l2_logs_tree_root=_require_hash("l2LogsTreeRoot", l2_logs_tree_root),
        timestamp=commit_batch_info.timestamp,
        commitment=_require_hash("commitment", commitment),
    )


def to_batch_metadata(stored_batch_info: StoredBatchInfo) -> BatchMetadata:
    """Public view of a stored batch: everything except ``batch_hash``."""
    return BatchMetadata(**stored_batch_info.model_dump(exclude={"batch_hash"}))


def deserialize_batch_details(batch_number: int, result) -> BatchDetails:
    # zks_getL1BatchDetails returns null for batches the node has not sealed
    if result is None:
        return BatchDetails(number=batch_number)
    return BatchDetails(
        number=result.get("number", batch_number),
        commit_tx_hash=result.get("commitTxHash"),
        prove_tx_hash=result.get("proveTxHash"),
        execute_tx_hash=result.get("executeTxHash"),
    )


def deserialize_storage_proofs(account: str, result) -> list[StorageProof]:
    proofs = []
    for item in result["storageProof"]:
        proofs.append(
            StorageProof(
                account=account,
                key=hex_to_bytes(item["key"]),
                value=hex_to_bytes(item["value"]),
                proof=tuple(hex_to_bytes(sibling) for sibling in item["proof"]),
                index=item["index"],
            )
        )
    return proofs


def deserialize_to_batch_metadata_response(metadata: BatchMetadata):
    return BatchMetadataResponse(
        batch_number=metadata.batch_number,
        index_repeated_storage_changes=metadata.index_repeated_storage_changes,
        number_of_layer1_txs=metadata.number_of_layer1_txs,
        priority_operations_hash=bytes_to_hex(metadata.priority_operations_hash),
        l2_logs_tree_root=bytes_to_hex(metadata.l2_logs_tree_root),
        timestamp=metadata.timestamp,
        commitment=bytes_to_hex(metadata.commitment),
    )


def deserialize_to_stored_batch_info_response(stored: StoredBatchInfo):
    return StoredBatchInfoResponse(
        **deserialize_to_batch_metadata_response(stored).model_dump(),
        batch_hash=bytes_to_hex(stored.batch_hash),
    )


def deserialize_to_storage_proof_response(proof: StorageProof):
    return StorageProofResponse(
        account=proof.account,
        key=bytes_to_hex(proof.key),
        value=bytes_to_hex(proof.value),
        proof=[bytes_to_hex(sibling) for sibling in proof.proof],
        index=proof.index,
    )


def deserialize_to_proof_bundle_response(bundle: ProofBundle):
    return ProofBundleResponse(
        metadata=deserialize_to_batch_metadata_response(bundle.metadata),
        proofs=[deserialize_to_storage_proof_response(p) for p in bundle.proofs],
    )


def deserialize_to_single_proof_bundle_response(bundle: SingleProofBundle):
    return SingleProofBundleResponse(
        metadata=deserialize_to_batch_metadata_response(bundle.metadata),
        proof=deserialize_to_storage_proof_response(bundle.proof),
    )
