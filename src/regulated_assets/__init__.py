"""Client for SEP-8 regulated assets on the Stellar network."""

from regulated_assets.core.exceptions import (
    AccountNotFoundError,
    ConfigurationError,
    NetworkError,
    ParseError,
    RegulatedAssetsError,
    UnsupportedActionMethodError,
)
from regulated_assets.core.types import (
    PostActionDone,
    PostActionNextUrl,
    PostTransactionActionRequired,
    PostTransactionPending,
    PostTransactionRejected,
    PostTransactionRevised,
    PostTransactionSuccess,
    RegulatedAsset,
)
from regulated_assets.metadata import StellarToml, extract_regulated_assets
from regulated_assets.protocols.approval import ApprovalClient
from regulated_assets.service import RegulatedAssetsService

__all__ = [
    "AccountNotFoundError",
    "ApprovalClient",
    "ConfigurationError",
    "NetworkError",
    "ParseError",
    "PostActionDone",
    "PostActionNextUrl",
    "PostTransactionActionRequired",
    "PostTransactionPending",
    "PostTransactionRejected",
    "PostTransactionRevised",
    "PostTransactionSuccess",
    "RegulatedAsset",
    "RegulatedAssetsError",
    "RegulatedAssetsService",
    "StellarToml",
    "UnsupportedActionMethodError",
    "extract_regulated_assets",
]
