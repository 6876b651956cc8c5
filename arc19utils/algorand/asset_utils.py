"""This module resolves ARC-19 assets end to end: indexer lookup, CID decoding,
gateway fetch and image extraction.

``resolve_asset`` raises the typed errors from ``arc19utils.core.errors``;
``decode_asset`` returns a DecodeSuccess or DecodeFailure instead. Both have
async counterparts whose two network calls are separate awaits.
"""
import asyncio

from arc19utils.algorand.arc19 import decode_template
from arc19utils.algorand.index_utils import IndexParser, validate_asset_id
from arc19utils.algorand.schemas import (
    AssetParams,
    DecodeFailure,
    DecodeResult,
    DecodeSuccess,
    Decoded,
)
from arc19utils.core.config import ResolverConfig
from arc19utils.core.errors import Arc19Error
from arc19utils.utils.ipfs import (
    extract_image_url,
    fetch_content,
    make_gateway_url,
    parse_metadata,
)


def _config(config):
    return ResolverConfig.from_settings() if config is None else config


def metadata_url(cid, template, config: ResolverConfig):
    return make_gateway_url(cid + template.path_suffix, config.gateway)


def build_result(url, content, cid, config: ResolverConfig, asset_id=None, tracer=None):
    """Parses fetched gateway content into the final DecodeResult"""
    metadata, degraded = parse_metadata(content)
    if degraded is not None and tracer is not None:
        tracer.warning(
            "Metadata parse degraded", kind=type(degraded).__name__, url=url
        )

    image_url = extract_image_url(metadata, config.gateway, config.image_params)
    if image_url is None and tracer is not None:
        tracer.info("No image reference found in metadata", url=url)

    return DecodeResult(
        asset_id=asset_id,
        cid=cid,
        metadata_url=url,
        image_url=image_url,
        metadata=metadata,
        degraded=degraded is not None,
    )


def resolve_params(params: AssetParams, config: ResolverConfig = None, asset_id=None, tracer=None):
    """
    Resolves already known asset params, skipping the indexer lookup.

    The template and reserve are fully decoded before the gateway is
    contacted, so malformed input never costs a request.
    """
    config = _config(config)
    template, cid = decode_template(params.url, params.reserve, tracer=tracer)
    url = metadata_url(cid, template, config)
    content = fetch_content(url, config.timeout, tracer=tracer)
    return build_result(url, content, cid, config, asset_id=asset_id, tracer=tracer)


def resolve_asset(asset_id: int, config: ResolverConfig = None, indexer=None, tracer=None):
    """
    Resolves an ARC-19 asset id to its metadata url and image url.

    :param asset_id: positive asset id
    :param config: ResolverConfig, defaults to one built from the environment
    :param indexer: indexer client to use instead of one built from config
    :param tracer: optional structlog style logger, silent when None
    :returns: DecodeResult
    :raises Arc19Error: subclass naming the stage that failed
    """
    config = _config(config)
    validate_asset_id(asset_id)
    params = IndexParser(config, indexer=indexer).lookup_asset(asset_id, tracer=tracer)
    return resolve_params(params, config, asset_id=asset_id, tracer=tracer)


def decode_asset(asset_id: int, config: ResolverConfig = None, indexer=None, tracer=None) -> Decoded:
    """Same as resolve_asset, returning DecodeSuccess or DecodeFailure"""
    try:
        return DecodeSuccess(resolve_asset(asset_id, config, indexer=indexer, tracer=tracer))
    except Arc19Error as e:
        return DecodeFailure(e)


async def resolve_asset_async(
    asset_id: int, config: ResolverConfig = None, indexer=None, tracer=None
):
    """
    Async resolve_asset. The indexer lookup and the gateway fetch run in
    worker threads and are awaited one after the other; cancelling the task
    abandons whichever is in flight.
    """
    config = _config(config)
    validate_asset_id(asset_id)
    parser = IndexParser(config, indexer=indexer)
    params = await asyncio.to_thread(parser.lookup_asset, asset_id, tracer=tracer)

    template, cid = decode_template(params.url, params.reserve, tracer=tracer)
    url = metadata_url(cid, template, config)
    content = await asyncio.to_thread(fetch_content, url, config.timeout, tracer=tracer)
    return build_result(url, content, cid, config, asset_id=asset_id, tracer=tracer)


async def decode_asset_async(
    asset_id: int, config: ResolverConfig = None, indexer=None, tracer=None
) -> Decoded:
    try:
        return DecodeSuccess(
            await resolve_asset_async(asset_id, config, indexer=indexer, tracer=tracer)
        )
    except Arc19Error as e:
        return DecodeFailure(e)
