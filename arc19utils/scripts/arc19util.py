import sys

import click
import structlog

from arc19utils.algorand.arc19 import cid2address, decode_template
from arc19utils.algorand.asset_utils import decode_asset
from arc19utils.core.config import ResolverConfig
from arc19utils.core.errors import Arc19Error


def get_tracer(verbose):
    if not verbose:
        return None
    structlog.configure(logger_factory=structlog.PrintLoggerFactory(sys.stderr))
    return structlog.get_logger().bind(component="arc19")


def fail(error):
    click.echo(click.style(f"{error.kind}: {error.message}", fg="red"), err=True)
    sys.exit(1)


@click.group()
def cli():
    pass


@click.command()
@click.argument("asset_id", type=click.IntRange(min=1))
@click.option("-t", "--testnet", is_flag=True, default=False, help="Look the asset up on testnet instead of mainnet.")
@click.option("-g", "--gateway", default=None, help="IPFS gateway base url, e.g. https://ipfs.io/ipfs/")
@click.option("-p", "--image-params", default=None, help="Query string appended to gateway image urls.")
@click.option("--timeout", type=click.FloatRange(min=0, min_open=True), default=None, help="Seconds to wait for the gateway.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full result as JSON.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log every pipeline stage to stderr.")
def resolve(asset_id, testnet, gateway, image_params, timeout, as_json, verbose):
    """Resolve an ARC-19 asset id to its metadata and image urls."""
    config = ResolverConfig.from_settings(
        network="testnet" if testnet else None,
        gateway=gateway,
        image_params=image_params,
        timeout=timeout,
    )
    decoded = decode_asset(asset_id, config, tracer=get_tracer(verbose))
    if not decoded.ok:
        fail(decoded.error)

    result = decoded.result
    if as_json:
        click.echo(result.model_dump_json(indent=2))
        return

    click.echo(f"Metadata URL: {result.metadata_url}")
    if result.degraded:
        click.echo(click.style("Warning: metadata is not JSON, shown as plain text", fg="yellow"))
    if result.image_url:
        click.echo(f"Image URL: {result.image_url}")
    else:
        click.echo("Image URL could not be determined from metadata.")


@click.command()
@click.argument("template")
@click.argument("reserve")
def cid(template, reserve):
    """Decode a url TEMPLATE and RESERVE address to a CID, offline."""
    try:
        _, cidstr = decode_template(template, reserve)
    except Arc19Error as e:
        fail(e)
    click.echo(cidstr)


@click.command()
@click.argument("cid")
def reserve(cid):
    """Print the reserve address that points an ARC-19 asset at CID."""
    try:
        address = cid2address(cid)
    except Arc19Error as e:
        fail(e)
    click.echo(address)


cli.add_command(resolve)
cli.add_command(cid)
cli.add_command(reserve)


if __name__ == "__main__":
    cli()
