class StorageProofError(Exception):
    """Base class for failures while building a proof bundle.

    ``kind`` is a stable tag naming the failure, used by the tagged result
    returned from ``StorageProofProvider.resolve_proofs`` and by the HTTP layer.
    """

    kind = "storage_proof_error"


class BatchNotCommitted(StorageProofError):
    kind = "batch_not_committed"

    def __init__(self, batch_number: int):
        self.batch_number = batch_number
        super().__init__(f"Batch {batch_number} is not committed")


class BatchNotProved(StorageProofError):
    kind = "batch_not_proved"

    def __init__(self, batch_number: int):
        self.batch_number = batch_number
        super().__init__(f"Batch {batch_number} is not proved")


class CalldataDecodeError(StorageProofError):
    kind = "calldata_decode_error"


class BatchNotFoundInCalldata(StorageProofError):
    kind = "batch_not_found_in_calldata"

    def __init__(self, batch_number: int):
        self.batch_number = batch_number
        super().__init__(f"Batch {batch_number} not found in calldata")


class CommitEventNotFound(StorageProofError):
    kind = "commit_event_not_found"

    def __init__(self, batch_number: int):
        self.batch_number = batch_number
        super().__init__(f"Commit log for batch {batch_number} not found")


class CommitTransactionNotFound(StorageProofError):
    kind = "commit_transaction_not_found"

    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"Commit tx {tx_hash} not found")


class ReceiptNotFound(StorageProofError):
    kind = "receipt_not_found"

    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"Receipt for commit tx {tx_hash} not found")


class IncompleteBatchMetadata(StorageProofError):
    kind = "incomplete_batch_metadata"


class L2RpcError(StorageProofError):
    kind = "l2_rpc_error"

    def __init__(self, method: str, error):
        self.method = method
        self.error = error
        super().__init__(f"L2 RPC {method} failed: {error}")


class ProofFetchFailed(StorageProofError):
    kind = "proof_fetch_failed"
