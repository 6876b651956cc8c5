import json
import time

import requests

from arc19utils.core.errors import MetadataFetchError, MetadataParseDegraded


IMAGE_ALIASES = ["image", "image_url"]
# ipfs links win over https links, whichever alias holds them
IMAGE_SCHEMES = ["ipfs://", "https://"]
CHUNK_SIZE = 8192
BLOCKED_MARKERS = ["Gateway Time-out", "Cloudflare", "too many requests"]
DEGRADED_WARNING = "Content from IPFS is not a JSON object. Displaying as plain text."


def make_gateway_url(cid_path, gateway, params=""):
    """Joins the gateway base url, a cid (optionally with a path) and query params"""
    return f"{gateway}{cid_path.lstrip('/')}{params}"


def make_asset_url(asa_url, gateway, params=""):
    """
    Resolves a url found in asset metadata to something fetchable.

    ``ipfs://<cid>/<path>`` goes through the gateway, ``https://`` links are
    returned unchanged and anything else gives None.
    """
    if not isinstance(asa_url, str):
        return None
    if asa_url.startswith("ipfs://"):
        cid_path = asa_url[len("ipfs://"):]
        if not cid_path:
            return None
        return make_gateway_url(cid_path, gateway, params)
    elif asa_url.startswith("https://"):
        return asa_url
    return None


def extract_image_url(metadata, gateway, params=""):
    """
    Looks for an image reference in ARC-3 style metadata.

    An ``ipfs://`` link in any alias is preferred, then an ``https://`` one.

    :param metadata: parsed metadata object
    :param gateway: gateway base url, ending with ``/``
    :param params: query string appended to gateway resolved images
    :return: image url or None when there isn't a usable one
    """
    if not isinstance(metadata, dict):
        return None
    for scheme in IMAGE_SCHEMES:
        for image_alias in IMAGE_ALIASES:
            asa_url = metadata.get(image_alias)
            if not isinstance(asa_url, str) or not asa_url.startswith(scheme):
                continue
            url = make_asset_url(asa_url, gateway, params)
            if url is not None:
                return url
    return None


def parse_metadata(content):
    """
    Interprets gateway content as a metadata object.

    Content that isn't a JSON object is wrapped as ``{"content", "warning"}``
    instead of failing, and a MetadataParseDegraded signal is returned with it.

    :return: (metadata dict, MetadataParseDegraded or None)
    """
    try:
        text = content.decode("utf-8") if isinstance(content, bytes) else content
    except UnicodeDecodeError as e:
        raise MetadataFetchError("Content from IPFS is neither JSON nor text") from e

    try:
        metadata = json.loads(text)
    except json.JSONDecodeError:
        metadata = text

    if isinstance(metadata, dict):
        return metadata, None

    return {"content": metadata, "warning": DEGRADED_WARNING}, MetadataParseDegraded(
        DEGRADED_WARNING
    )


def fetch_content(url, timeout, tracer=None):
    """
    Performs a single https download of gateway content.

    Transport errors, timeouts, non 2xx responses and gateway block pages are
    all reported as MetadataFetchError. There is no retry.

    ``timeout`` bounds the whole download. requests only applies it per socket
    read, so the body is streamed and the deadline checked between chunks.

    :param url: full gateway url
    :param timeout: seconds to wait for the gateway
    :param tracer: optional structlog style logger
    :return: bytes
    """
    log_info = {"url": url, "timeout": timeout}
    starttime = time.time()
    deadline = time.monotonic() + timeout

    try:
        with requests.get(url, timeout=timeout, stream=True) as req:
            log_info["status_code"] = req.status_code
            content_type = req.headers.get("Content-Type", "")
            content = _read_body(req, deadline, timeout) if req.ok else b""
    except requests.exceptions.Timeout as e:
        _trace_error(tracer, e, log_info)
        raise MetadataFetchError(f"Request to IPFS gateway timed out after {timeout}s", url) from e
    except requests.exceptions.ConnectionError as e:
        _trace_error(tracer, e, log_info)
        raise MetadataFetchError("Connection Error Occurred", url) from e
    except requests.exceptions.RequestException as e:
        _trace_error(tracer, e, log_info)
        raise MetadataFetchError(f"Content Request Failed: {type(e).__name__}", url) from e

    if not req.ok:
        _trace_error(tracer, None, log_info)
        raise MetadataFetchError(
            f"Failed to fetch metadata from IPFS. Status: {req.status_code}. URL: {url}", url
        )

    if "html" in content_type:
        contentstr = content.decode("utf-8", "replace")
        if any(marker in contentstr for marker in BLOCKED_MARKERS):
            _trace_error(tracer, None, log_info, reason="blocked")
            raise MetadataFetchError("Failed to Request Content, gateway blocked the request", url)

    if tracer is not None:
        tracer.info(
            "IPFS Fetched Metadata",
            mime=content_type,
            elapsed=(time.time() - starttime),
            **log_info,
        )
    return content


def _read_body(req, deadline, timeout):
    chunks = []
    for chunk in req.iter_content(chunk_size=CHUNK_SIZE):
        if time.monotonic() > deadline:
            raise requests.exceptions.Timeout(f"Body not received within {timeout}s")
        chunks.append(chunk)
    return b"".join(chunks)


def _trace_error(tracer, exc, log_info, **extra):
    if tracer is not None:
        exception = type(exc).__name__ if exc is not None else None
        tracer.error("IPFS Fetch Error", exception=exception, **log_info, **extra)
