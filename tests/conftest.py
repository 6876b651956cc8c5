import os
import sys
import pytest

SOURCE_ROOT = os.path.normpath(os.path.join(__file__, "../.."))
TEST_ROOT = os.path.normpath(os.path.join(__file__, ".."))

sys.path.insert(0, SOURCE_ROOT)

# ARC-19 example asset, https://arc.algorand.foundation/ARCs/arc-0019
ARC19_ASSET_ID = 812520710
ARC19_RESERVE = "EEQYWGGBHRDAMTEVDPVOSDVX3HJQIG6K6IVNR3RXHYOHV64ZWAEISS4CTI"
ARC19_TEMPLATE = "template-ipfs://{ipfscid:0:dag-pb:reserve:sha2-256}"
ARC19_CID_V0 = "QmQZyq4b89RfaUw8GESPd2re4hJqB8bnm4kVHNtyQrHnnK"
ARC19_CID_V1_RAW = "bafkreibbegfrrqj4iydezfi35luq5n6z2mcbxsxsflmo4nz6dr5pxgnqba"
ARC19_RESERVE_HEX = "21218b18c13c46064c951beae90eb7d9d3041bcaf22ad8ee373e1c7afb99b008"

GATEWAY = "https://ipfs.example.test/ipfs/"


class FakeIndexer:
    """Stands in for algosdk's IndexerClient"""

    def __init__(self, assets=None, exc=None):
        self.assets = assets or {}
        self.exc = exc
        self.calls = []

    def lookup_asset_by_id(self, asset_id, **kwargs):
        self.calls.append(asset_id)
        if self.exc is not None:
            raise self.exc
        return {"asset": {"index": asset_id, "params": self.assets.get(asset_id, {})}}


class FakeResponse:
    """Streamed requests response, the body comes back in ``chunks`` when given"""

    def __init__(self, content=b"", status_code=200, headers=None, chunks=None):
        self.content = content
        self.chunks = chunks if chunks is not None else [content]
        self.status_code = status_code
        self.headers = headers or {"Content-Type": "application/json"}

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    @property
    def text(self):
        return self.content.decode("utf-8", "replace")

    def iter_content(self, chunk_size=1):
        yield from self.chunks

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


@pytest.fixture
def config():
    from arc19utils.core.config import ResolverConfig

    return ResolverConfig(gateway=GATEWAY, indexer_url="https://idx.example.test", timeout=5)


@pytest.fixture
def fake_indexer():
    return FakeIndexer(
        {ARC19_ASSET_ID: {"url": ARC19_TEMPLATE, "reserve": ARC19_RESERVE, "name": "ARC19 example"}}
    )


@pytest.fixture
def gateway_get(monkeypatch):
    """Replaces requests.get in the ipfs module, recording every call"""
    from arc19utils.utils import ipfs

    calls = []
    state = {"response": FakeResponse(b'{"name": "x", "image": "ipfs://QmImage"}')}

    def mock_get(url, timeout, stream=False):
        calls.append({"url": url, "timeout": timeout})
        response = state["response"]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(ipfs.requests, "get", mock_get)

    def respond(response):
        state["response"] = response

    mock_get.calls = calls
    mock_get.respond = respond
    return mock_get
