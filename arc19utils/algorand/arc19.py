"""Decoding of ARC-19 templated asset urls into IPFS content identifiers.

An ARC-19 asset keeps an immutable url of the form::

    template-ipfs://{ipfscid:<version>:<codec>:reserve:<hashtype>}

and stores the digest part of the CID in its (mutable) reserve address. The
reserve address bytes are tagged as a multihash without hashing them again,
then wrapped in a CID of the requested version and codec.
"""
import re

import multicodec
import multihash
from algosdk import error
from algosdk.encoding import encode_address, decode_address
from cid import CIDv0, CIDv1, make_cid

from arc19utils.algorand.schemas import AssetParams, ParsedTemplate
from arc19utils.core.errors import (
    AddressDecodeError,
    DigestLengthMismatchError,
    FormatError,
    InvalidCidV0Error,
    UnsupportedCidVersionError,
    UnsupportedCodecError,
    UnsupportedHashError,
)
from arc19utils.decorators import traced

TEMPLATE_RE = re.compile(
    r"template-ipfs://\{ipfscid:(?P<version>\d+):(?P<codec>[a-z0-9-]+)"
    r":reserve:(?P<hash_type>[a-z0-9-]+)\}(?P<suffix>[/#?].*)?",
    re.DOTALL,
)
TEMPLATE_FORMAT = "template-ipfs://{ipfscid:<version>:<codec>:reserve:<hashtype>}"

CIDV0_CODEC = "dag-pb"
CIDV0_HASH = "sha2-256"
CIDV1_BASE = "base32"

RESERVE_LENGTH = 32

# digest sizes that can't be read from a "-<bits>" suffix of the name
DIGEST_SIZES = {
    "md4": 16,
    "ed2k": 16,
    "md5": 16,
    "sha1": 20,
    "dbl-sha2-256": 32,
    "shake-128": 32,
    "shake-256": 64,
    "blake3": 32,
    "kangarootwelve": 32,
    "x11": 32,
}
# hash names that tag data of any length
ANY_LENGTH_HASHES = {"id"}
_BITS_SUFFIX = re.compile(r"-(\d+)$")


def is_arc19_url(url):
    return isinstance(url, str) and url.startswith("template-ipfs://")


@traced("template")
def parse_template(url):
    """
    Parses an ARC-19 url template into its version, codec and hash type.

    :param url: asset url, e.g. ``template-ipfs://{ipfscid:0:dag-pb:reserve:sha2-256}``
    :returns: ParsedTemplate
    :raises FormatError: if the url does not match the template grammar
    """
    match = TEMPLATE_RE.fullmatch(url) if isinstance(url, str) else None
    if match is None:
        raise FormatError(
            f"Invalid ARC19 url format: {url!r}. Expected format: {TEMPLATE_FORMAT}",
            url,
        )

    return ParsedTemplate(
        version=int(match["version"]),
        codec=match["codec"],
        hash_type=match["hash_type"],
        suffix=match["suffix"] or "",
        raw_version=match["version"],
    )


@traced("reserve")
def decode_reserve(address):
    """
    Converts an algorand address to its 32 raw public key bytes.

    :raises AddressDecodeError: on a bad checksum, alphabet or length
    """
    if not isinstance(address, str) or not address:
        raise AddressDecodeError("Reserve address must be a non empty string", address)

    try:
        dec_bytes = decode_address(address)
    except (error.WrongChecksumError, error.WrongKeyLengthError, ValueError) as e:
        raise AddressDecodeError(
            f"Invalid reserve address {address}: {type(e).__name__}", address
        ) from e

    if len(dec_bytes) != RESERVE_LENGTH:
        raise AddressDecodeError(
            f"Reserve address decoded to {len(dec_bytes)} bytes, expected {RESERVE_LENGTH}",
            address,
        )
    return dec_bytes


def digest_size(hash_type):
    """Byte length of the digest produced by ``hash_type``, None if unknown"""
    if hash_type in DIGEST_SIZES:
        return DIGEST_SIZES[hash_type]
    match = _BITS_SUFFIX.search(hash_type)
    if match and int(match.group(1)) % 8 == 0:
        return int(match.group(1)) // 8
    return None


def hash_code(hash_type):
    """Multihash code registered for ``hash_type``"""
    try:
        return multihash.coerce_code(hash_type)
    except (TypeError, ValueError) as e:
        raise UnsupportedHashError(f"Unsupported hash type: {hash_type}", hash_type) from e


@traced("multihash")
def encode_multihash(digest, hash_type):
    """
    Tags ``digest`` as a multihash of ``hash_type``. Nothing is hashed, the
    bytes are taken to be an already computed digest.

    :raises UnsupportedHashError: unknown hash name, or one without a known digest size
    :raises DigestLengthMismatchError: digest size doesn't fit the hash function
    """
    code = hash_code(hash_type)
    if hash_type in ANY_LENGTH_HASHES:
        return multihash.encode(digest, code)

    expected = digest_size(hash_type)
    if expected is None:
        raise UnsupportedHashError(
            f"Digest size of {hash_type} is unknown, can't check the reserve against it",
            hash_type,
        )
    if len(digest) != expected:
        raise DigestLengthMismatchError(
            f"{hash_type} digests are {expected} bytes, reserve holds {len(digest)}",
            hash_type,
        )
    return multihash.encode(digest, code)


@traced("cid")
def check_cidv0(codec, hash_type):
    """Version 0 CIDs only exist as dag-pb over sha2-256"""
    if codec != CIDV0_CODEC:
        raise InvalidCidV0Error(
            f"Invalid codec for CID v0: {codec}. Expected: {CIDV0_CODEC}", codec
        )
    if hash_type != CIDV0_HASH:
        raise InvalidCidV0Error(
            f"Invalid hash type for CID v0: {hash_type}. Expected: {CIDV0_HASH}",
            hash_type,
        )


@traced("cid")
def build_cid(version, codec, encoded_multihash):
    """
    Builds the canonical CID string. Version 0 renders as bare base58btc,
    version 1 as multibase base32 (lowercase, ``b`` prefix).
    """
    try:
        hash_type = multihash.decode(encoded_multihash).name
    except (TypeError, ValueError) as e:
        raise UnsupportedHashError("Malformed multihash", encoded_multihash) from e

    if version == 0:
        check_cidv0(codec, hash_type)
        return CIDv0(encoded_multihash).encode().decode()
    elif version == 1:
        if not multicodec.is_codec(codec):
            raise UnsupportedCodecError(f"Unsupported codec: {codec}", codec)
        return CIDv1(codec, encoded_multihash).encode(CIDV1_BASE).decode()
    else:
        raise UnsupportedCidVersionError(f"Unsupported CID version: {version}", version)


def decode_template(url, reserve, tracer=None):
    """
    Runs the offline part of the pipeline: template, reserve, multihash, cid.

    :returns: (ParsedTemplate, cid string)
    """
    template = parse_template(url, tracer=tracer)
    if template.version == 0:
        # v0 rules come before the digest length check of the hash type
        check_cidv0(template.codec, template.hash_type, tracer=tracer)
    dec_bytes = decode_reserve(reserve, tracer=tracer)
    encoded = encode_multihash(dec_bytes, template.hash_type, tracer=tracer)
    return template, build_cid(template.version, template.codec, encoded, tracer=tracer)


def address2cid(address):
    """
    Converts algorand address to ipfs cid for arc19 asset parsing.
    """
    return decode_template(
        f"template-ipfs://{{ipfscid:0:{CIDV0_CODEC}:reserve:{CIDV0_HASH}}}", address
    )[1]


def cid2address(cid):
    """
    Converts an ipfs cid back to the reserve address that encodes it.
    """
    try:
        digest = multihash.decode(make_cid(cid).multihash).digest
    except (TypeError, ValueError, KeyError) as e:
        raise AddressDecodeError(f"Not a valid CID: {cid}", cid) from e

    if len(digest) != RESERVE_LENGTH:
        raise AddressDecodeError(
            f"CID digest is {len(digest)} bytes, a reserve address holds {RESERVE_LENGTH}",
            cid,
        )
    return encode_address(digest)


def cid_from_asset(params, tracer=None):
    """
    Converts and parses algorand asset params (url and reserve) to ipfs cid
    for arc19 asset parsing.

    :param params: AssetParams, or the params dict from an indexer query
    """
    if not isinstance(params, AssetParams):
        params = AssetParams.from_indexer(params)
    if not is_arc19_url(params.url):
        raise FormatError(
            f"Not an arc19 asset, or check that the url is structured: {TEMPLATE_FORMAT}",
            params.url,
        )
    return decode_template(params.url, params.reserve, tracer=tracer)[1]
