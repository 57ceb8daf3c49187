"""Horizon account lookups for authorization flag checks."""

import time

import httpx

from regulated_assets.core.exceptions import AccountNotFoundError, NetworkError, ParseError
from regulated_assets.core.structured_logger import get_logger
from regulated_assets.core.types import AccountFlags
from regulated_assets.network.base import DEFAULT_TIMEOUT, BaseHTTPClient

logger = get_logger("HorizonClient")


class HorizonClient(BaseHTTPClient):
    """Reads account state from a Horizon server."""

    def __init__(
        self,
        horizon_url: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(client=client, timeout=timeout, headers=headers)
        self.horizon_url = horizon_url.rstrip("/")

    async def get_account_flags(self, account_id: str) -> AccountFlags:
        """
        Fetch the authorization flags of *account_id*.

        Raises:
            AccountNotFoundError: Horizon answered 404
            NetworkError: Transport failure or any other non-2xx status
            ParseError: The account record carries no ``flags`` object
        """
        url = f"{self.horizon_url}/accounts/{account_id}"
        start_time = time.time()
        response = await self._request("GET", url)
        elapsed_ms = (time.time() - start_time) * 1000

        if response.status_code == 404:
            logger.warning("Account not found", account_id=account_id)
            raise AccountNotFoundError(account_id)
        if not response.is_success:
            raise NetworkError(
                f"Horizon account lookup failed with HTTP {response.status_code}",
                status_code=response.status_code,
                details={'account_id': account_id},
            )

        data = self._json_object(response)
        flags = data.get("flags") if data is not None else None
        if not isinstance(flags, dict):
            raise ParseError(
                "Horizon account record has no flags",
                details={'account_id': account_id},
            )

        result = AccountFlags(
            auth_required=bool(flags.get("auth_required", False)),
            auth_revocable=bool(flags.get("auth_revocable", False)),
            auth_immutable=bool(flags.get("auth_immutable", False)),
            auth_clawback_enabled=bool(flags.get("auth_clawback_enabled", False)),
        )
        logger.debug(
            "Fetched account flags",
            account_id=account_id,
            auth_required=result.auth_required,
            auth_revocable=result.auth_revocable,
            elapsed_ms=round(elapsed_ms, 1),
        )
        return result


def requires_authorization(flags: AccountFlags) -> bool:
    """True iff the issuer both requires and may revoke trustline authorization."""
    return flags.auth_required and flags.auth_revocable
