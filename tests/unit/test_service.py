"""Tests for regulated_assets.service: the end-to-end approval flow against mocked servers."""

import json

import httpx
import pytest

from regulated_assets.config.settings import NetworkConfig, Settings
from regulated_assets.core.exceptions import AccountNotFoundError, ConfigurationError, NetworkError
from regulated_assets.core.types import (
    PostActionDone,
    PostTransactionActionRequired,
    PostTransactionPending,
    PostTransactionRevised,
    PostTransactionSuccess,
)
from regulated_assets.metadata.stellar_toml import StellarToml
from regulated_assets.service import RegulatedAssetsService, resolve_network
from tests.helpers import (
    GOAT_ISSUER,
    JACK_ISSUER,
    SAMPLE_TOML,
    SAMPLE_TX,
    SIGNED_TX,
    account_record,
    json_response,
    mock_client,
)

TESTNET = "Test SDF Network ; September 2015"


class TestResolveNetwork:
    def test_toml_values(self, sample_toml):
        assert resolve_network(sample_toml) == (TESTNET, "https://horizon.test")

    def test_explicit_values_win(self, sample_toml):
        passphrase, url = resolve_network(sample_toml, "https://mine.test/", "Custom ; 2024")
        assert passphrase == "Custom ; 2024"
        assert url == "https://mine.test"

    def test_default_horizon_for_known_network(self):
        toml = StellarToml.from_dict({"NETWORK_PASSPHRASE": TESTNET})
        assert resolve_network(toml)[1] == "https://horizon-testnet.stellar.org"

    def test_missing_passphrase(self):
        with pytest.raises(ConfigurationError):
            resolve_network(StellarToml.from_dict({}))

    def test_unknown_network_without_horizon(self):
        with pytest.raises(ConfigurationError):
            resolve_network(StellarToml.from_dict({"NETWORK_PASSPHRASE": "Private ; 2024"}))


class TestServiceConstruction:
    @pytest.mark.asyncio
    async def test_extracts_assets_once(self, sample_toml):
        async with RegulatedAssetsService(sample_toml) as service:
            assert [a.code for a in service.regulated_assets] == ["GOAT", "JACK"]
            assert service.horizon_url == "https://horizon.test"
            assert service.network_passphrase == TESTNET

    @pytest.mark.asyncio
    async def test_settings_override_toml(self, sample_toml):
        settings = Settings(network=NetworkConfig(horizon_url="https://override.test"))
        async with RegulatedAssetsService(sample_toml, settings=settings) as service:
            assert service.horizon_url == "https://override.test"

    @pytest.mark.asyncio
    async def test_find_asset(self, sample_toml):
        async with RegulatedAssetsService(sample_toml) as service:
            assert service.find_asset("JACK").issuer == JACK_ISSUER
            assert service.find_asset("GOAT", GOAT_ISSUER).code == "GOAT"
            assert service.find_asset("GOAT", JACK_ISSUER) is None
            assert service.find_asset("NOP") is None

    @pytest.mark.asyncio
    async def test_owned_client_closed(self, sample_toml):
        service = RegulatedAssetsService(sample_toml)
        await service.aclose()
        assert service._client.is_closed

    @pytest.mark.asyncio
    async def test_calls_after_close_fail_without_new_client(self, sample_toml):
        service = RegulatedAssetsService(sample_toml)
        await service.aclose()
        goat = service.find_asset("GOAT")

        with pytest.raises(NetworkError):
            await service.authorization_required(goat)
        with pytest.raises(NetworkError):
            await service.post_transaction(SAMPLE_TX, goat.approval_server)
        with pytest.raises(NetworkError):
            await service.post_action("https://goat.io/action", {})

        assert service.approval._client is service._client
        assert service.horizon._client is service._client

    @pytest.mark.asyncio
    async def test_injected_client_left_open(self, sample_toml):
        client = mock_client(lambda request: json_response(200, {}))
        async with RegulatedAssetsService(sample_toml, client=client):
            pass
        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_from_domain(self, recorded_requests):
        def handler(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return httpx.Response(200, text=SAMPLE_TOML)

        async with mock_client(handler) as client:
            service = await RegulatedAssetsService.from_domain("goat.io", client=client)
            assert [a.code for a in service.regulated_assets] == ["GOAT", "JACK"]
        assert recorded_requests[0].url.path == "/.well-known/stellar.toml"


class TestAuthorizationRequired:
    @pytest.mark.parametrize("required,revocable,expected", [
        (True, True, True),
        (True, False, False),
        (False, True, False),
    ])
    @pytest.mark.asyncio
    async def test_flags(self, sample_toml, required, revocable, expected):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == f"/accounts/{GOAT_ISSUER}"
            return json_response(200, account_record(required, revocable))

        async with mock_client(handler) as client:
            service = RegulatedAssetsService(sample_toml, client=client)
            goat = service.find_asset("GOAT")
            assert await service.authorization_required(goat) is expected

    @pytest.mark.asyncio
    async def test_missing_account(self, sample_toml):
        async with mock_client(lambda request: json_response(404, {"status": 404})) as client:
            service = RegulatedAssetsService(sample_toml, client=client)
            with pytest.raises(AccountNotFoundError):
                await service.authorization_required(service.find_asset("GOAT"))

    @pytest.mark.asyncio
    async def test_network_failure(self, sample_toml):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with mock_client(handler) as client:
            service = RegulatedAssetsService(sample_toml, client=client)
            with pytest.raises(NetworkError):
                await service.authorization_required(service.find_asset("GOAT"))


class TestApprovalFlow:
    @pytest.mark.asyncio
    async def test_action_required_then_success(self, sample_toml):
        """Submit, complete the action, resubmit: the flow a caller drives."""
        submissions = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/tx_approve":
                submissions.append(json.loads(request.content))
                if len(submissions) == 1:
                    return json_response(200, {
                        "status": "action_required",
                        "message": "KYC needed",
                        "action_url": "https://goat.io/action",
                        "action_method": "POST",
                        "action_fields": ["email_address"],
                    })
                return json_response(200, {"status": "success", "tx": SIGNED_TX})
            if request.url.path == "/action":
                assert json.loads(request.content) == {"email_address": "user@example.com"}
                return json_response(200, {"result": "no_further_action_required"})
            return httpx.Response(404)

        async with mock_client(handler) as client:
            service = RegulatedAssetsService(sample_toml, client=client)
            goat = service.find_asset("GOAT")

            first = await service.post_transaction(SAMPLE_TX, goat.approval_server)
            assert isinstance(first, PostTransactionActionRequired)

            done = await service.post_action(
                first.action_url, {"email_address": "user@example.com"}, first.action_method
            )
            assert isinstance(done, PostActionDone)

            second = await service.post_transaction(SAMPLE_TX, goat.approval_server)

        assert second == PostTransactionSuccess(tx=SIGNED_TX)
        assert submissions == [{"tx": SAMPLE_TX}, {"tx": SAMPLE_TX}]

    @pytest.mark.asyncio
    async def test_revised_and_pending_are_returned(self, sample_toml):
        replies = iter([
            {"status": "pending", "timeout": 1000, "message": "wait"},
            {"status": "revised", "tx": SIGNED_TX, "message": "auth ops added"},
        ])

        async with mock_client(lambda request: json_response(200, next(replies))) as client:
            service = RegulatedAssetsService(sample_toml, client=client)
            jack = service.find_asset("JACK")
            pending = await service.post_transaction(SAMPLE_TX, jack.approval_server)
            revised = await service.post_transaction(SAMPLE_TX, jack.approval_server)

        assert pending == PostTransactionPending(timeout=1000, message="wait")
        assert isinstance(revised, PostTransactionRevised)
        assert revised.tx != SAMPLE_TX
