from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from storage_proof.dtos.proof import ProofBundle


class ProofSuccess(BaseModel):
    status: Literal["ok"] = "ok"
    bundle: ProofBundle


class ProofFailure(BaseModel):
    status: Literal["error"] = "error"
    kind: str
    message: str


ProofResult = Annotated[
    Union[ProofSuccess, ProofFailure], Field(discriminator="status")
]
