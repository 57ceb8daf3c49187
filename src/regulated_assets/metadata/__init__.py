"""Domain metadata (SEP-1 stellar.toml) parsing."""

from regulated_assets.metadata.stellar_toml import (
    Currency,
    StellarToml,
    extract_regulated_assets,
    is_regulated,
    toml_url,
)

__all__ = [
    "Currency",
    "StellarToml",
    "extract_regulated_assets",
    "is_regulated",
    "toml_url",
]
