"""Canned stellar.toml data and mock HTTP helpers shared by the tests."""

import json
from collections.abc import Callable

import httpx

GOAT_ISSUER = "GDWHIBZEH4Q3ZJ4E3ZCELTZQ6PR5SKFQNPRDNSDI6QWF3ZNAMQWUBXTO"
JACK_ISSUER = "GBIMSJLMG5NP6G6H6PFHAMXW6HWVOOBHODXDVYRQJAYHH2VUEEQCDSOA"
OTHER_ISSUER = "GCSVOVNR6PTXWSE6QFDQIHQVWCQ7CGKGHH7FNVF3U7KFRTRB3IPW6IAU"

SAMPLE_TOML = f'''
NETWORK_PASSPHRASE = "Test SDF Network ; September 2015"
HORIZON_URL = "https://horizon.test"

[[CURRENCIES]]
code = "GOAT"
issuer = "{GOAT_ISSUER}"
regulated = true
approval_server = "https://goat.io/tx_approve"
approval_criteria = "The goat approval server will ensure that transactions are compliant with NFO regulation"

[[CURRENCIES]]
code = "NOP"
issuer = "{OTHER_ISSUER}"
display_decimals = 2

[[CURRENCIES]]
code = "JACK"
issuer = "{JACK_ISSUER}"
regulated = true
approval_server = "https://jack.io/tx_approve"

[[CURRENCIES]]
code = "HALF"
issuer = "{OTHER_ISSUER}"
regulated = true

[[CURRENCIES]]
code = "EMPTY"
issuer = "{OTHER_ISSUER}"
regulated = true
approval_server = ""

[[CURRENCIES]]
code = "OFF"
issuer = "{OTHER_ISSUER}"
regulated = false
approval_server = "https://off.io/tx_approve"
'''

# Base64 XDR envelopes are opaque to the client; any string will do.
SAMPLE_TX = "AAAAAgAAAADpq0A0gV2DsmBsfLdyPkgvXNd2lD8ggGwfqrAZnbrtngAAAGQAAAAAAAAAAQAAAAA="
SIGNED_TX = "AAAAAgAAAADpq0A0gV2DsmBsfLdyPkgvXNd2lD8ggGwfqrAZnbrtngAAAGQAAAAAAAAAAgAAAAE="


def json_response(status_code: int, body) -> httpx.Response:
    """Build an httpx response carrying *body* as JSON."""
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode(),
        headers={"Content-Type": "application/json"},
    )


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def account_record(auth_required: bool, auth_revocable: bool, **extra_flags) -> dict:
    """Minimal Horizon account record."""
    return {
        "id": GOAT_ISSUER,
        "account_id": GOAT_ISSUER,
        "sequence": "4294967296",
        "flags": {
            "auth_required": auth_required,
            "auth_revocable": auth_revocable,
            "auth_immutable": False,
            "auth_clawback_enabled": False,
            **extra_flags,
        },
    }
