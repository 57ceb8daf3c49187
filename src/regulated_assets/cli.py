"""
Regulated Assets CLI: regulated-assets assets | auth-required | submit | action
"""
import asyncio
import dataclasses
import json
from typing import Any

import click

from regulated_assets.config.settings import Settings, load_settings
from regulated_assets.core.exceptions import RegulatedAssetsError
from regulated_assets.core.structured_logger import TraceContext, configure_logging
from regulated_assets.core.types import RegulatedAsset
from regulated_assets.protocols.approval import ApprovalClient
from regulated_assets.service import RegulatedAssetsService


def _echo_json(value: Any) -> None:
    if dataclasses.is_dataclass(value):
        value = dataclasses.asdict(value)
    click.echo(json.dumps(value, indent=2, default=str))


def _parse_fields(fields: tuple[str, ...]) -> dict[str, str]:
    """Turn ``name=value`` pairs into a dict."""
    parsed = {}
    for item in fields:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected name=value, got {item!r}", param_hint="--field")
        parsed[name] = value
    return parsed


def _run(coro) -> Any:
    """Run a coroutine, reporting library errors on stderr with exit status 1."""
    try:
        with TraceContext():
            return asyncio.run(coro)
    except RegulatedAssetsError as e:
        click.echo(f"{e.user_message()}: {e.message}", err=True)
        raise SystemExit(1)


async def _with_asset(settings: Settings, domain: str, code: str, issuer: str | None, fn):
    async with await RegulatedAssetsService.from_domain(domain, settings=settings) as service:
        asset = service.find_asset(code, issuer)
        if asset is None:
            raise click.ClickException(f"{domain} declares no regulated asset {code}")
        return await fn(service, asset)


@click.group()
@click.version_option(package_name="regulated-assets")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """Regulated assets (SEP-8) approval client."""
    settings = load_settings(config_path)
    configure_logging(settings.logging)
    ctx.obj = settings


@cli.command()
@click.argument("domain")
@click.pass_obj
def assets(settings: Settings, domain: str) -> None:
    """List the regulated assets declared in DOMAIN's stellar.toml."""

    async def _list() -> list[RegulatedAsset]:
        async with await RegulatedAssetsService.from_domain(domain, settings=settings) as service:
            return service.regulated_assets

    found = _run(_list())
    if not found:
        click.echo(f"No regulated assets declared by {domain}")
        return
    for asset in found:
        click.echo(f"{asset.asset_id}  {asset.approval_server}")
        if asset.approval_criteria:
            click.echo(f"    {asset.approval_criteria}")


@cli.command("auth-required")
@click.argument("domain")
@click.argument("code")
@click.option("--issuer", default=None, help="Issuer account, if DOMAIN issues several assets with CODE")
@click.pass_obj
def auth_required(settings: Settings, domain: str, code: str, issuer: str | None) -> None:
    """Report whether the issuer of CODE requires and can revoke authorization."""

    async def _check(service: RegulatedAssetsService, asset: RegulatedAsset) -> bool:
        return await service.authorization_required(asset)

    required = _run(_with_asset(settings, domain, code, issuer, _check))
    click.echo("required" if required else "not required")


@cli.command()
@click.argument("domain")
@click.argument("code")
@click.argument("tx")
@click.option("--issuer", default=None, help="Issuer account, if DOMAIN issues several assets with CODE")
@click.pass_obj
def submit(settings: Settings, domain: str, code: str, tx: str, issuer: str | None) -> None:
    """Submit base64 transaction envelope TX to CODE's approval server."""

    async def _submit(service: RegulatedAssetsService, asset: RegulatedAsset):
        return await service.post_transaction(tx, asset.approval_server)

    _echo_json(_run(_with_asset(settings, domain, code, issuer, _submit)))


@cli.command()
@click.argument("url")
@click.option("--field", "fields", multiple=True, help="Action field as name=value (repeatable)")
@click.option("--method", default="POST", show_default=True, help="Action method from the approval server")
@click.pass_obj
def action(settings: Settings, url: str, fields: tuple[str, ...], method: str) -> None:
    """Post action field values to URL."""
    values = _parse_fields(fields)

    async def _post():
        async with ApprovalClient(
            timeout=settings.network.timeout_seconds, headers=settings.http_headers()
        ) as client:
            return await client.post_action(url, values, method)

    _echo_json(_run(_post()))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
