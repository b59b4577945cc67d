import logging

from eth_utils import is_address
from fastapi import APIRouter, HTTPException, Query, Request

from storage_proof.dtos.batch import StoredBatchInfoResponse
from storage_proof.dtos.proof import (
    ProofBundleResponse,
    SingleProofBundle,
    SingleProofBundleResponse,
)
from storage_proof.dtos.result import ProofFailure
from storage_proof.errors import StorageProofError
from storage_proof.utils.deserializers import (
    deserialize_to_proof_bundle_response,
    deserialize_to_single_proof_bundle_response,
    deserialize_to_stored_batch_info_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/v1/proof",
    tags=["Proof"],
    responses={404: {"description": "Not found"}},
)

# status code per error kind, anything else is an upstream failure
STATUS_CODES = {
    "batch_not_committed": 404,
    "batch_not_proved": 409,
    "batch_not_found_in_calldata": 404,
    "commit_event_not_found": 404,
    "commit_transaction_not_found": 404,
    "receipt_not_found": 404,
    "calldata_decode_error": 422,
    "incomplete_batch_metadata": 422,
}


def error_response(kind: str, message: str) -> HTTPException:
    status_code = STATUS_CODES.get(kind, 502)
    logger.info("Request failed with %s (%s): %s", kind, status_code, message)
    return HTTPException(status_code=status_code, detail={"kind": kind, "message": message})


def check_address(address: str):
    if not is_address(address):
        raise HTTPException(status_code=400, detail=f"Invalid address {address}")


@router.get("/batch/{batch_number}", response_model=StoredBatchInfoResponse)
async def get_stored_batch_info(request: Request, batch_number: int):
    try:
        stored = await request.app.provider.get_stored_batch_info(batch_number)
    except StorageProofError as e:
        raise error_response(e.kind, str(e))
    return deserialize_to_stored_batch_info_response(stored)


@router.get("/{address}", response_model=ProofBundleResponse)
async def get_proofs(
    request: Request,
    address: str,
    key: list[str] = Query(...),
    batch_number: int | None = None,
):
    check_address(address)
    result = await request.app.provider.resolve_proofs(address, key, batch_number)
    if isinstance(result, ProofFailure):
        raise error_response(result.kind, result.message)
    return deserialize_to_proof_bundle_response(result.bundle)


@router.get("/{address}/single", response_model=SingleProofBundleResponse)
async def get_proof(
    request: Request,
    address: str,
    key: str,
    batch_number: int | None = None,
):
    check_address(address)
    result = await request.app.provider.resolve_proofs(address, [key], batch_number)
    if isinstance(result, ProofFailure):
        raise error_response(result.kind, result.message)
    bundle = SingleProofBundle(
        metadata=result.bundle.metadata, proof=result.bundle.proofs[0]
    )
    return deserialize_to_single_proof_bundle_response(bundle)
