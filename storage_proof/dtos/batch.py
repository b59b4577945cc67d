from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBytes, StrictInt


Uint64 = Annotated[StrictInt, Field(ge=0, lt=2**64)]
Uint256 = Annotated[StrictInt, Field(ge=0, lt=2**256)]
Bytes32 = Annotated[StrictBytes, Field(min_length=32, max_length=32)]


class CommitBatchInfo(BaseModel):
    """One element of ``newBatchesData`` in a ``commitBatches`` call."""

    model_config = ConfigDict(frozen=True)

    batch_number: Uint64
    timestamp: Uint64
    index_repeated_storage_changes: Uint64
    new_state_root: Bytes32
    number_of_layer1_txs: Uint256
    priority_operations_hash: Bytes32
    bootloader_heap_initial_contents_hash: Bytes32
    events_queue_state_hash: Bytes32
    system_logs: StrictBytes
    total_l2_to_l1_pubdata: StrictBytes


class BatchMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    batch_number: Uint64
    index_repeated_storage_changes: Uint64
    number_of_layer1_txs: Uint256
    priority_operations_hash: Bytes32
    l2_logs_tree_root: Bytes32
    timestamp: Uint64
    commitment: Bytes32


class StoredBatchInfo(BatchMetadata):
    batch_hash: Bytes32


class BatchDetails(BaseModel):
    number: int
    commit_tx_hash: str | None = None
    prove_tx_hash: str | None = None
    execute_tx_hash: str | None = None

    @property
    def status(self) -> Literal["uncommitted", "committed", "proved"]:
        if self.commit_tx_hash is None:
            return "uncommitted"
        if self.prove_tx_hash is None:
            return "committed"
        return "proved"


class BatchMetadataResponse(BaseModel):
    batch_number: int
    index_repeated_storage_changes: int
    number_of_layer1_txs: int
    priority_operations_hash: str
    l2_logs_tree_root: str
    timestamp: int
    commitment: str


class StoredBatchInfoResponse(BatchMetadataResponse):
    batch_hash: str
