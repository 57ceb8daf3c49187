"""
SEP-8 Approval Server Protocol
==============================

Client side of the approval-server exchange:

1. ``post_transaction`` sends ``{"tx": <base64 envelope>}`` to the asset's
   approval server and classifies the reply by its ``status`` field into
   one of five outcomes (success, revised, pending, action_required,
   rejected).
2. When the outcome is action_required with method POST,
   ``post_action`` sends the user's field values to ``action_url`` and
   classifies the reply by its ``result`` field (done or follow next URL).

Rejected and pending replies are outcomes, not errors. A reply that cannot
be classified is a ``ParseError``; it is never coerced into a variant.
"""

import time
from collections.abc import Mapping
from typing import Any

import httpx

from regulated_assets.core.exceptions import ParseError, UnsupportedActionMethodError
from regulated_assets.core.structured_logger import get_logger
from regulated_assets.core.types import (
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
)
from regulated_assets.network.base import DEFAULT_TIMEOUT, BaseHTTPClient

logger = get_logger("ApprovalClient")


# =============================================================================
# RESPONSE PARSING
# =============================================================================

def _required_str(data: Mapping[str, Any], key: str, context: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise ParseError(f"{context} response is missing '{key}'", details={'body': dict(data)})
    return value


def _optional_str(data: Mapping[str, Any], key: str, context: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ParseError(f"{context} response has non-string '{key}'", details={'body': dict(data)})
    return value


def _parse_timeout(data: Mapping[str, Any]) -> int:
    value = data.get("timeout", 0)
    # bool is an int subclass but never a valid wait hint
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ParseError("pending response has an invalid 'timeout'", details={'body': dict(data)})
    return value


def _parse_action_fields(data: Mapping[str, Any]) -> tuple[str, ...]:
    value = data.get("action_fields")
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(f, str) for f in value):
        raise ParseError(
            "action_required response has invalid 'action_fields'",
            details={'body': dict(data)},
        )
    return tuple(value)


def parse_post_transaction_response(data: Mapping[str, Any]) -> PostTransactionResponse:
    """
    Classify a decoded approval-server reply.

    Raises:
        ParseError: Missing or unknown ``status``, or a variant lacks its
            mandatory fields
    """
    raw_status = data.get("status")
    if not isinstance(raw_status, str):
        raise ParseError("Approval server response has no 'status'", details={'body': dict(data)})
    try:
        status = PostTransactionStatus(raw_status)
    except ValueError:
        raise ParseError(
            f"Unknown approval server status: {raw_status!r}",
            details={'body': dict(data)},
        ) from None

    if status is PostTransactionStatus.SUCCESS:
        return PostTransactionSuccess(
            tx=_required_str(data, "tx", "success"),
            message=_optional_str(data, "message", "success"),
        )
    if status is PostTransactionStatus.REVISED:
        return PostTransactionRevised(
            tx=_required_str(data, "tx", "revised"),
            message=_optional_str(data, "message", "revised"),
        )
    if status is PostTransactionStatus.PENDING:
        return PostTransactionPending(
            timeout=_parse_timeout(data),
            message=_optional_str(data, "message", "pending"),
        )
    if status is PostTransactionStatus.ACTION_REQUIRED:
        method = _optional_str(data, "action_method", "action_required") or "GET"
        return PostTransactionActionRequired(
            action_url=_required_str(data, "action_url", "action_required"),
            action_method=method.upper(),
            action_fields=_parse_action_fields(data),
            message=_optional_str(data, "message", "action_required"),
        )
    return PostTransactionRejected(error=_required_str(data, "error", "rejected"))


def parse_post_action_response(data: Mapping[str, Any]) -> PostActionResponse:
    """
    Classify a decoded action endpoint reply.

    A reply with no ``result`` but a ``next_url`` is read as follow_next_url.

    Raises:
        ParseError: Unknown ``result`` or a next-URL reply without ``next_url``
    """
    raw_result = data.get("result")
    if raw_result is None and "next_url" in data:
        raw_result = ActionResult.FOLLOW_NEXT_URL.value
    if not isinstance(raw_result, str):
        raise ParseError("Action response has no 'result'", details={'body': dict(data)})
    try:
        result = ActionResult(raw_result)
    except ValueError:
        raise ParseError(
            f"Unknown action result: {raw_result!r}",
            details={'body': dict(data)},
        ) from None

    if result is ActionResult.NO_FURTHER_ACTION_REQUIRED:
        return PostActionDone()
    return PostActionNextUrl(
        next_url=_required_str(data, "next_url", "follow_next_url"),
        message=_optional_str(data, "message", "follow_next_url"),
    )


# =============================================================================
# CLIENT
# =============================================================================

class ApprovalClient(BaseHTTPClient):
    """
    Talks to issuer approval servers.

    Every call is a single request/response exchange; retry policy (for
    example honouring a pending timeout) belongs to the caller.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(client=client, timeout=timeout, headers=headers)

    async def post_transaction(self, tx: str, approval_server: str) -> PostTransactionResponse:
        """
        Submit a base64-encoded transaction envelope for approval.

        Raises:
            NetworkError: Transport failure, or non-2xx status without a JSON body
            ParseError: The reply cannot be classified
        """
        start_time = time.time()
        response = await self._request("POST", approval_server, json={"tx": tx})
        data = self._require_json_object(response)
        outcome = parse_post_transaction_response(data)
        logger.info(
            "Approval server replied",
            approval_server=approval_server,
            http_status=response.status_code,
            status=outcome.status.value,
            elapsed_ms=round((time.time() - start_time) * 1000, 1),
        )
        return outcome

    async def post_action(
        self,
        action_url: str,
        action_fields: Mapping[str, Any],
        action_method: str = "POST",
    ) -> PostActionResponse:
        """
        Submit user-supplied values for the fields an approval server asked for.

        Only POST actions can be submitted; for any other method the caller
        must send the user to ``action_url``.

        Raises:
            UnsupportedActionMethodError: ``action_method`` is not POST
            NetworkError: Transport failure, or non-2xx status without a JSON body
            ParseError: The reply cannot be classified
        """
        if action_method.upper() != "POST":
            raise UnsupportedActionMethodError(action_method, details={'action_url': action_url})

        start_time = time.time()
        response = await self._request("POST", action_url, json=dict(action_fields))
        data = self._require_json_object(response)
        outcome = parse_post_action_response(data)
        logger.info(
            "Action endpoint replied",
            action_url=action_url,
            http_status=response.status_code,
            fields=sorted(action_fields),
            result=outcome.result.value,
            elapsed_ms=round((time.time() - start_time) * 1000, 1),
        )
        return outcome
