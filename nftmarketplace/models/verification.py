"""Source verification result model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    ALREADY_VERIFIED = "already_verified"


class VerificationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    address: str
    contract_name: str
    status: VerificationStatus
    guid: str = ""
    message: str = ""
