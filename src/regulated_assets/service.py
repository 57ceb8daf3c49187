"""
Regulated Assets Service
========================

Façade over the stellar.toml snapshot, Horizon and the approval servers of
one issuing domain. It holds no state beyond its construction inputs; each
method is a single request/response exchange.

Usage:
    async with await RegulatedAssetsService.from_domain("issuer.example") as service:
        asset = service.regulated_assets[0]
        if await service.authorization_required(asset):
            outcome = await service.post_transaction(tx, asset.approval_server)
"""

from collections.abc import Mapping
from typing import Any

import httpx

from regulated_assets.config.settings import DEFAULT_HORIZON_URLS, Settings
from regulated_assets.core.exceptions import ConfigurationError
from regulated_assets.core.structured_logger import get_logger
from regulated_assets.core.types import (
    AccountFlags,
    PostActionResponse,
    PostTransactionResponse,
    RegulatedAsset,
)
from regulated_assets.metadata.stellar_toml import StellarToml, extract_regulated_assets
from regulated_assets.network.horizon import HorizonClient, requires_authorization
from regulated_assets.protocols.approval import ApprovalClient

logger = get_logger("RegulatedAssetsService")


def resolve_network(
    toml: StellarToml,
    horizon_url: str | None = None,
    network_passphrase: str | None = None,
) -> tuple[str, str]:
    """
    Pick the network passphrase and Horizon URL for a domain.

    Explicit arguments win over stellar.toml values; a missing Horizon URL
    falls back to the public default for a well-known passphrase.

    Raises:
        ConfigurationError: If either value cannot be determined
    """
    passphrase = network_passphrase or toml.network_passphrase
    if not passphrase:
        raise ConfigurationError(
            "No network passphrase given and stellar.toml has no NETWORK_PASSPHRASE"
        )

    url = horizon_url or toml.horizon_url or DEFAULT_HORIZON_URLS.get(passphrase)
    if not url:
        raise ConfigurationError(
            "No Horizon URL given and stellar.toml has no HORIZON_URL",
            details={'network_passphrase': passphrase},
        )
    return passphrase, url.rstrip("/")


class RegulatedAssetsService:
    """Entry point for SEP-8 regulated asset flows."""

    def __init__(
        self,
        toml: StellarToml,
        horizon_url: str | None = None,
        network_passphrase: str | None = None,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        network = self.settings.network
        self.toml = toml
        self.network_passphrase, self.horizon_url = resolve_network(
            toml,
            horizon_url=horizon_url or network.horizon_url,
            network_passphrase=network_passphrase or network.network_passphrase,
        )
        self.regulated_assets: list[RegulatedAsset] = extract_regulated_assets(toml)

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=network.timeout_seconds,
            headers=self.settings.http_headers(),
        )
        self.horizon = HorizonClient(self.horizon_url, client=self._client)
        self.approval = ApprovalClient(client=self._client)

        logger.info(
            "Service initialised",
            horizon_url=self.horizon_url,
            regulated_assets=[a.asset_id for a in self.regulated_assets],
        )

    @classmethod
    async def from_domain(
        cls,
        domain: str,
        horizon_url: str | None = None,
        network_passphrase: str | None = None,
        client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> "RegulatedAssetsService":
        """
        Build a service from the stellar.toml published by *domain*.

        Raises:
            NetworkError: The stellar.toml could not be fetched
            ConfigurationError: It could not be parsed, or the network is unknown
        """
        settings = settings or Settings()
        toml = await StellarToml.from_domain(
            domain, client=client, timeout=settings.network.timeout_seconds
        )
        return cls(
            toml,
            horizon_url=horizon_url,
            network_passphrase=network_passphrase,
            client=client,
            settings=settings,
        )

    async def aclose(self) -> None:
        """Close the HTTP client if the service created it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "RegulatedAssetsService":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def find_asset(self, code: str, issuer: str | None = None) -> RegulatedAsset | None:
        """Return the first regulated asset matching *code* (and *issuer*, if given)."""
        for asset in self.regulated_assets:
            if asset.code == code and (issuer is None or asset.issuer == issuer):
                return asset
        return None

    async def account_flags(self, asset: RegulatedAsset) -> AccountFlags:
        """Fetch the issuer's current authorization flags."""
        return await self.horizon.get_account_flags(asset.issuer)

    async def authorization_required(self, asset: RegulatedAsset) -> bool:
        """
        True iff the issuer has both AUTH_REQUIRED and AUTH_REVOCABLE set.

        This is a point-in-time read; re-check before each transaction if
        the issuer's flags may change.

        Raises:
            NetworkError: The issuing account could not be fetched
        """
        flags = await self.account_flags(asset)
        required = requires_authorization(flags)
        logger.debug("Checked authorization flags", asset=asset.asset_id, required=required)
        return required

    async def post_transaction(self, tx: str, approval_server: str) -> PostTransactionResponse:
        """Submit a base64-encoded transaction envelope to *approval_server*."""
        return await self.approval.post_transaction(tx, approval_server)

    async def post_action(
        self,
        action_url: str,
        action_fields: Mapping[str, Any],
        action_method: str = "POST",
    ) -> PostActionResponse:
        """Submit the values requested by an action_required outcome."""
        return await self.approval.post_action(action_url, action_fields, action_method)
