"""
Core Type Definitions
=====================

Value types shared by the metadata extractor, the Horizon checker and the
approval-server clients.

Approval-server replies are modelled as tagged unions: every variant is a
frozen dataclass carrying a ``status`` (or ``result``) discriminator, so
callers can branch with ``match`` or ``isinstance`` and the outcome cannot
be mutated after it is returned.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class PostTransactionStatus(str, Enum):
    """Discriminator values of an approval server's transaction reply."""

    SUCCESS = "success"
    REVISED = "revised"
    PENDING = "pending"
    ACTION_REQUIRED = "action_required"
    REJECTED = "rejected"

    def __str__(self) -> str:
        return self.value


class ActionResult(str, Enum):
    """Discriminator values of an action endpoint's reply."""

    NO_FURTHER_ACTION_REQUIRED = "no_further_action_required"
    FOLLOW_NEXT_URL = "follow_next_url"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class RegulatedAsset:
    """An asset whose transfers must be approved by its issuer's approval server."""
    code: str
    issuer: str
    approval_server: str
    approval_criteria: str | None = None

    @property
    def asset_id(self) -> str:
        """Canonical ``CODE:ISSUER`` identifier."""
        return f"{self.code}:{self.issuer}"


@dataclass(frozen=True)
class AccountFlags:
    """Authorization flags of an account as reported by Horizon."""
    auth_required: bool = False
    auth_revocable: bool = False
    auth_immutable: bool = False
    auth_clawback_enabled: bool = False


# =============================================================================
# POST /tx_approve OUTCOMES
# =============================================================================

@dataclass(frozen=True)
class PostTransactionSuccess:
    """The transaction was signed by the issuer unchanged."""
    tx: str
    message: str | None = None
    status: PostTransactionStatus = field(default=PostTransactionStatus.SUCCESS, init=False)


@dataclass(frozen=True)
class PostTransactionRevised:
    """The issuer revised and signed the transaction; ``tx`` replaces the original."""
    tx: str
    message: str | None = None
    status: PostTransactionStatus = field(default=PostTransactionStatus.REVISED, init=False)


@dataclass(frozen=True)
class PostTransactionPending:
    """
    The issuer will decide later.

    ``timeout`` is the wait hint exactly as sent by the server (SEP-8 states
    it in milliseconds); 0 means the server gave no hint.
    """
    timeout: int = 0
    message: str | None = None
    status: PostTransactionStatus = field(default=PostTransactionStatus.PENDING, init=False)


@dataclass(frozen=True)
class PostTransactionActionRequired:
    """The user must supply more information at ``action_url`` before approval."""
    action_url: str
    action_method: str = "GET"
    action_fields: tuple[str, ...] = ()
    message: str | None = None
    status: PostTransactionStatus = field(
        default=PostTransactionStatus.ACTION_REQUIRED, init=False
    )


@dataclass(frozen=True)
class PostTransactionRejected:
    """The issuer declined the transaction."""
    error: str
    status: PostTransactionStatus = field(default=PostTransactionStatus.REJECTED, init=False)


PostTransactionResponse = Union[
    PostTransactionSuccess,
    PostTransactionRevised,
    PostTransactionPending,
    PostTransactionActionRequired,
    PostTransactionRejected,
]


# =============================================================================
# POST action_url OUTCOMES
# =============================================================================

@dataclass(frozen=True)
class PostActionDone:
    """No further action is required; resubmit the transaction."""
    result: ActionResult = field(default=ActionResult.NO_FURTHER_ACTION_REQUIRED, init=False)


@dataclass(frozen=True)
class PostActionNextUrl:
    """The user must continue at ``next_url``."""
    next_url: str
    message: str | None = None
    result: ActionResult = field(default=ActionResult.FOLLOW_NEXT_URL, init=False)


PostActionResponse = Union[PostActionDone, PostActionNextUrl]


__all__ = [
    'AccountFlags',
    'ActionResult',
    'PostActionDone',
    'PostActionNextUrl',
    'PostActionResponse',
    'PostTransactionActionRequired',
    'PostTransactionPending',
    'PostTransactionRejected',
    'PostTransactionResponse',
    'PostTransactionRevised',
    'PostTransactionStatus',
    'PostTransactionSuccess',
    'RegulatedAsset',
]
