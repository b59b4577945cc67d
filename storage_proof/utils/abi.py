import logging

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import (
    event_signature_to_log_topic,
    function_signature_to_4byte_selector,
    to_checksum_address,
)
from hexbytes import HexBytes
from pydantic import ValidationError

from storage_proof.dtos.batch import CommitBatchInfo
from storage_proof.errors import (
    BatchNotFoundInCalldata,
    CalldataDecodeError,
    CommitEventNotFound,
)

logger = logging.getLogger(__name__)


STORED_BATCH_INFO_TYPE = "(uint64,bytes32,uint64,uint256,bytes32,bytes32,uint256,bytes32)"
COMMIT_BATCH_INFO_TYPE = (
    "(uint64,uint64,uint64,bytes32,uint256,bytes32,bytes32,bytes32,bytes,bytes)"
)

COMMIT_BATCHES_SIGNATURE = (
    f"commitBatches({STORED_BATCH_INFO_TYPE},{COMMIT_BATCH_INFO_TYPE}[])"
)
COMMIT_BATCHES_SELECTOR = function_signature_to_4byte_selector(COMMIT_BATCHES_SIGNATURE)

BLOCK_COMMIT_SIGNATURE = "BlockCommit(uint256,bytes32,bytes32)"
BLOCK_COMMIT_TOPIC = event_signature_to_log_topic(BLOCK_COMMIT_SIGNATURE)

# Only the view function the provider calls
DIAMOND_ABI = [
    {
        "type": "function",
        "name": "l2LogsRootHash",
        "stateMutability": "view",
        "inputs": [{"name": "_batchNumber", "type": "uint256"}],
        "outputs": [{"name": "", "type": "bytes32"}],
    },
]


def to_commit_batch_info(batch: tuple) -> CommitBatchInfo:
    """Maps a decoded ``newBatchesData`` tuple onto a validated record."""
    try:
        return CommitBatchInfo(
            batch_number=batch[0],
            timestamp=batch[1],
            index_repeated_storage_changes=batch[2],
            new_state_root=batch[3],
            number_of_layer1_txs=batch[4],
            priority_operations_hash=batch[5],
            bootloader_heap_initial_contents_hash=batch[6],
            events_queue_state_hash=batch[7],
            system_logs=batch[8],
            total_l2_to_l1_pubdata=batch[9],
        )
    except (ValidationError, IndexError) as e:
        raise CalldataDecodeError(f"Malformed batch tuple in calldata: {e}") from e


def decode_commit_batches(calldata) -> tuple[tuple, list[tuple]]:
    """Decodes ``commitBatches`` calldata into its two arguments."""
    data = bytes(HexBytes(calldata))
    if data[:4] != COMMIT_BATCHES_SELECTOR:
        raise CalldataDecodeError(
            f"Calldata selector 0x{data[:4].hex()} is not commitBatches "
            f"(0x{COMMIT_BATCHES_SELECTOR.hex()})"
        )
    try:
        last_committed, new_batches = decode(
            [STORED_BATCH_INFO_TYPE, f"{COMMIT_BATCH_INFO_TYPE}[]"], data[4:]
        )
    except DecodingError as e:
        raise CalldataDecodeError(f"Failed to decode commitBatches calldata: {e}") from e
    return last_committed, list(new_batches)


def decode_commit_batch(calldata, batch_number: int) -> CommitBatchInfo:
    """Returns the committed batch with the given number from ``commitBatches`` calldata.

    The batches array is searched in full; its order is not relied upon.
    """
    _, new_batches = decode_commit_batches(calldata)
    for batch in new_batches:
        if batch[0] == batch_number:
            return to_commit_batch_info(batch)
    logger.debug(
        "Batch %s not among %s",
        batch_number,
        [batch[0] for batch in new_batches],
    )
    raise BatchNotFoundInCalldata(batch_number)


def block_commit_topics(batch_number: int) -> list[HexBytes]:
    """Topic filter for ``BlockCommit`` narrowed to one batch number."""
    return [
        HexBytes(BLOCK_COMMIT_TOPIC),
        HexBytes(encode(["uint256"], [int(batch_number)])),
    ]


def decode_commitment(log) -> bytes:
    topics = [HexBytes(topic) for topic in log["topics"]]
    if len(topics) > 3:
        return bytes(topics[3])
    # non-indexed commitment lives in the data payload
    try:
        (commitment,) = decode(["bytes32"], bytes(HexBytes(log["data"])))
    except DecodingError as e:
        raise CalldataDecodeError(f"Malformed BlockCommit payload: {e}") from e
    return commitment


def locate_commitment(logs, contract_address: str, batch_number: int) -> bytes:
    """Finds the ``BlockCommit`` log for ``batch_number`` emitted by ``contract_address``
    and returns its commitment hash.
    """
    address = to_checksum_address(contract_address)
    expected = block_commit_topics(batch_number)

    for log in logs:
        if to_checksum_address(log["address"]) != address:
            continue
        topics = [HexBytes(topic) for topic in log["topics"]]
        if len(topics) < len(expected):
            continue
        if all(topic == topics[i] for i, topic in enumerate(expected)):
            return decode_commitment(log)

    raise CommitEventNotFound(batch_number)
