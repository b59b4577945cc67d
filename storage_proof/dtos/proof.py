from pydantic import BaseModel, ConfigDict

from storage_proof.dtos.batch import (
    BatchMetadata,
    BatchMetadataResponse,
    Bytes32,
    Uint64,
)


class StorageProof(BaseModel):
    model_config = ConfigDict(frozen=True)

    account: str
    key: Bytes32
    value: Bytes32
    # sibling hashes, leaf to root
    proof: tuple[Bytes32, ...]
    index: Uint64


class ProofBundle(BaseModel):
    metadata: BatchMetadata
    proofs: list[StorageProof]


class SingleProofBundle(BaseModel):
    metadata: BatchMetadata
    proof: StorageProof


class StorageProofResponse(BaseModel):
    account: str
    key: str
    value: str
    proof: list[str]
    index: int


class ProofBundleResponse(BaseModel):
    metadata: BatchMetadataResponse
    proofs: list[StorageProofResponse]


class SingleProofBundleResponse(BaseModel):
    metadata: BatchMetadataResponse
    proof: StorageProofResponse
