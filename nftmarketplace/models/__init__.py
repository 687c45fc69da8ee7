"""Data models — all Pydantic v2, all frozen (immutable)."""

from nftmarketplace.models.accounts import Signer
from nftmarketplace.models.deployments import DeploymentRecord
from nftmarketplace.models.events import ContractEvent, TransactionReceipt
from nftmarketplace.models.listing import Listing
from nftmarketplace.models.verification import VerificationResult, VerificationStatus

__all__ = [
    "Signer",
    "Listing",
    "ContractEvent",
    "TransactionReceipt",
    "DeploymentRecord",
    "VerificationResult",
    "VerificationStatus",
]
