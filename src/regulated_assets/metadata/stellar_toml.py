"""
stellar.toml Snapshot and Regulated Asset Extraction
====================================================

Parses the subset of a domain's SEP-1 ``stellar.toml`` that regulated asset
flows depend on (network passphrase, Horizon URL and the ``[[CURRENCIES]]``
table) and extracts the currencies that require issuer approval.

The snapshot is read-only: extraction never mutates it, so the same
snapshot can back any number of concurrent lookups.
"""

import tomllib
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from regulated_assets.core.exceptions import ConfigurationError, ErrorCode, NetworkError
from regulated_assets.core.structured_logger import get_logger
from regulated_assets.core.types import RegulatedAsset

logger = get_logger("StellarToml")

WELL_KNOWN_PATH = "/.well-known/stellar.toml"


class Currency(BaseModel):
    """A single ``[[CURRENCIES]]`` entry"""

    code: Optional[str] = Field(default=None, description="Asset code")
    issuer: Optional[str] = Field(default=None, description="Issuing account (G... strkey)")
    regulated: bool = Field(
        default=False,
        description="Transfers require approval from the approval server"
    )
    approval_server: Optional[str] = Field(
        default=None,
        description="URL of the SEP-8 approval service"
    )
    approval_criteria: Optional[str] = Field(
        default=None,
        description="Human readable approval requirements"
    )

    model_config = ConfigDict(extra='allow', frozen=True)


class StellarToml(BaseModel):
    """Parsed snapshot of a domain's stellar.toml"""

    network_passphrase: Optional[str] = Field(default=None, alias="NETWORK_PASSPHRASE")
    horizon_url: Optional[str] = Field(default=None, alias="HORIZON_URL")
    currencies: List[Currency] = Field(default_factory=list, alias="CURRENCIES")

    model_config = ConfigDict(extra='allow', frozen=True, populate_by_name=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StellarToml":
        """
        Validate already-decoded stellar.toml data.

        Raises:
            ConfigurationError: If a known field has the wrong type
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(
                "stellar.toml has invalid fields",
                details={'errors': e.errors(include_url=False)},
            ) from e

    @classmethod
    def from_string(cls, text: str) -> "StellarToml":
        """
        Parse stellar.toml text.

        Raises:
            ConfigurationError: If the text is not valid TOML or fields are malformed
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(
                f"Invalid stellar.toml: {e}", error_code=ErrorCode.INVALID_TOML
            ) from e
        return cls.from_dict(data)

    @classmethod
    async def from_domain(
        cls,
        domain: str,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> "StellarToml":
        """
        Fetch and parse ``https://<domain>/.well-known/stellar.toml``.

        ``domain`` may carry an explicit scheme (``http://localhost:8000``),
        which is kept as-is.

        Raises:
            NetworkError: On transport failure or a non-2xx status
            ConfigurationError: If the document cannot be parsed
        """
        url = toml_url(domain)
        logger.debug("Fetching stellar.toml", url=url)
        try:
            if client is not None:
                response = await client.get(url)
            else:
                async with httpx.AsyncClient(timeout=timeout) as own_client:
                    response = await own_client.get(url)
        except httpx.TimeoutException as e:
            raise NetworkError(
                f"Timed out fetching {url}", error_code=ErrorCode.TIMEOUT
            ) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Could not fetch {url}: {e}") from e

        if not response.is_success:
            raise NetworkError(
                f"stellar.toml request to {url} failed with HTTP {response.status_code}",
                status_code=response.status_code,
            )
        return cls.from_string(response.text)


def toml_url(domain: str) -> str:
    """Return the well-known stellar.toml URL for *domain*."""
    base = domain.rstrip("/")
    if not base.startswith(("http://", "https://")):
        base = f"https://{base}"
    return f"{base}{WELL_KNOWN_PATH}"


def is_regulated(currency: Currency) -> bool:
    """True if the currency is flagged regulated and names an approval server."""
    return bool(currency.regulated and currency.approval_server and currency.approval_server.strip())


def extract_regulated_assets(toml: StellarToml) -> list[RegulatedAsset]:
    """
    Return the regulated assets declared in *toml*, in declaration order.

    A currency is included only when it is flagged ``regulated`` and carries
    a non-empty ``approval_server``. Entries that pass that test but lack a
    code or issuer cannot name an asset and are skipped.
    """
    assets: list[RegulatedAsset] = []
    for currency in toml.currencies:
        if not is_regulated(currency):
            continue
        if not currency.code or not currency.issuer:
            logger.warning(
                "Skipping regulated currency without code or issuer",
                code=currency.code,
                issuer=currency.issuer,
            )
            continue
        assets.append(
            RegulatedAsset(
                code=currency.code,
                issuer=currency.issuer,
                approval_server=currency.approval_server,
                approval_criteria=currency.approval_criteria,
            )
        )
    return assets


__all__ = [
    'Currency',
    'StellarToml',
    'extract_regulated_assets',
    'is_regulated',
    'toml_url',
]
