"""Core types, errors and logging."""

from regulated_assets.core.exceptions import (
    AccountNotFoundError,
    ConfigurationError,
    ErrorCode,
    NetworkError,
    ParseError,
    RegulatedAssetsError,
    UnsupportedActionMethodError,
)
from regulated_assets.core.types import (
    AccountFlags,
    ActionResult,
    PostActionDone,
    PostActionNextUrl,
    PostActionResponse,
    PostTransactionActionRequired,
    PostTransactionPending,
    PostTransactionRejected,
    PostTransactionResponse,
    PostTransactionRevised,
    PostTransactionStatus,
    PostTransactionSuccess,
    RegulatedAsset,
)

__all__ = [
    "AccountFlags",
    "AccountNotFoundError",
    "ActionResult",
    "ConfigurationError",
    "ErrorCode",
    "NetworkError",
    "ParseError",
    "PostActionDone",
    "PostActionNextUrl",
    "PostActionResponse",
    "PostTransactionActionRequired",
    "PostTransactionPending",
    "PostTransactionRejected",
    "PostTransactionResponse",
    "PostTransactionRevised",
    "PostTransactionStatus",
    "PostTransactionSuccess",
    "RegulatedAsset",
    "RegulatedAssetsError",
    "UnsupportedActionMethodError",
]
