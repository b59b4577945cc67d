import pytest
from eth_abi import encode
from hexbytes import HexBytes

from storage_proof.services.storage_proof import StorageProofProvider
from storage_proof.utils.abi import (
    BLOCK_COMMIT_TOPIC,
    COMMIT_BATCH_INFO_TYPE,
    COMMIT_BATCHES_SELECTOR,
    STORED_BATCH_INFO_TYPE,
)
from storage_proof.utils.deserializers import (
    deserialize_batch_details,
    deserialize_storage_proofs,
)


DIAMOND_ADDRESS = "0x9A6DE0f62Aa270A8bCB1e2610078650D539B1Ef9"
OTHER_ADDRESS = "0x1111111111111111111111111111111111111111"
ACCOUNT = "0x0000000000000000000000000000000000008003"
STORAGE_KEY = "0x8b65c0cf1012ea9f393197eb24619fd814379b298b238285649e14f936a5eb12"


def h32(seed: int) -> bytes:
    return seed.to_bytes(32, "big")


def new_state_root(batch_number: int) -> bytes:
    return h32(0xA000 + batch_number)


def commitment_for(batch_number: int) -> bytes:
    return h32(0xC000 + batch_number)


def logs_root_for(batch_number: int) -> bytes:
    return h32(0xD000 + batch_number)


def commit_tx_hash(batch_number: int) -> str:
    return "0x" + h32(0xE000 + batch_number).hex()


def make_batch(batch_number: int, timestamp: int = 1_700_000_000):
    return (
        batch_number,
        timestamp,
        batch_number * 10,
        new_state_root(batch_number),
        batch_number % 7,
        h32(0xB000 + batch_number),
        h32(0xB100 + batch_number),
        h32(0xB200 + batch_number),
        b"system logs %d" % batch_number,
        b"pubdata %d" % batch_number,
    )


def make_calldata(batch_numbers, last_committed: int = 99) -> bytes:
    last = (last_committed, h32(1), 0, 0, h32(2), h32(3), 0, h32(4))
    batches = [make_batch(n) for n in batch_numbers]
    return COMMIT_BATCHES_SELECTOR + encode(
        [STORED_BATCH_INFO_TYPE, f"{COMMIT_BATCH_INFO_TYPE}[]"], [last, batches]
    )


def make_commit_log(batch_number: int, address: str = DIAMOND_ADDRESS, commitment=None):
    return {
        "address": address,
        "topics": [
            HexBytes(BLOCK_COMMIT_TOPIC),
            HexBytes(encode(["uint256"], [batch_number])),
            HexBytes(new_state_root(batch_number)),
            HexBytes(commitment or commitment_for(batch_number)),
        ],
        "data": HexBytes(b""),
    }


def make_proof_result(account: str, keys):
    return {
        "address": account,
        "storageProof": [
            {
                "key": key,
                "value": "0x" + h32(i + 1).hex(),
                "index": 27 + i,
                "proof": ["0x" + h32(0xF00 + i * 10 + j).hex() for j in range(3)],
            }
            for i, key in enumerate(keys)
        ],
    }


class FakeL1Client:
    def __init__(self):
        self.transactions = {}
        self.receipts = {}
        self.logs_roots = {}
        self.calls = []

    def add_commit(self, batch_numbers, logs=None):
        """Registers one commit tx per batch in ``batch_numbers``, all sharing calldata."""
        calldata = make_calldata(batch_numbers)
        for n in batch_numbers:
            tx_hash = commit_tx_hash(n)
            self.transactions[tx_hash] = {"hash": tx_hash, "input": HexBytes(calldata)}
            self.receipts[tx_hash] = {
                "transactionHash": tx_hash,
                "logs": logs if logs is not None else [make_commit_log(m) for m in batch_numbers],
            }
            self.logs_roots[n] = logs_root_for(n)

    async def get_transaction(self, tx_hash):
        self.calls.append(("get_transaction", tx_hash))
        return self.transactions.get(tx_hash)

    async def get_transaction_receipt(self, tx_hash):
        self.calls.append(("get_transaction_receipt", tx_hash))
        return self.receipts.get(tx_hash)

    async def get_l2_logs_root_hash(self, batch_number):
        self.calls.append(("get_l2_logs_root_hash", batch_number))
        return self.logs_roots[batch_number]


class FakeL2Client:
    def __init__(self, latest_batch_number: int = 5000):
        self.latest_batch_number = latest_batch_number
        self.details = {}
        self.calls = []

    def set_details(self, batch_number, commit=True, prove=True):
        self.details[batch_number] = {
            "number": batch_number,
            "commitTxHash": commit_tx_hash(batch_number) if commit else None,
            "proveTxHash": "0x" + h32(0x9000 + batch_number).hex() if prove else None,
        }

    async def get_l1_batch_number(self):
        self.calls.append(("get_l1_batch_number",))
        return self.latest_batch_number

    async def get_l1_batch_details(self, batch_number):
        self.calls.append(("get_l1_batch_details", batch_number))
        return deserialize_batch_details(batch_number, self.details.get(batch_number))

    async def get_proofs(self, account, storage_keys, batch_number):
        self.calls.append(("get_proofs", account, list(storage_keys), batch_number))
        return deserialize_storage_proofs(account, make_proof_result(account, storage_keys))


@pytest.fixture
def l1_client():
    return FakeL1Client()


@pytest.fixture
def l2_client():
    return FakeL2Client()


@pytest.fixture
def provider(l1_client, l2_client):
    return StorageProofProvider(l1_client, l2_client, DIAMOND_ADDRESS)


@pytest.fixture
def proved_batch(l1_client, l2_client):
    """Batch 101, committed together with 100 and 102, and proved."""
    l1_client.add_commit([100, 101, 102])
    l2_client.set_details(101)
    return 101
