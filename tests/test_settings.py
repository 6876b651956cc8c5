import pytest
from pydantic import ValidationError

from arc19utils.core.config import ResolverConfig
from arc19utils.core.settings import Settings


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("ALGORAND_INDEXER_HOST", "https://mainnet-idx.example.test/")
    monkeypatch.setenv("TESTNET_ALGORAND_INDEXER_HOST", "https://testnet-idx.example.test")
    monkeypatch.setenv("IPFS_GATEWAY", "https://gw.example.test/ipfs")
    monkeypatch.setenv("IPFS_IMAGE_PARAMS", "?optimizer=image&width=1152&quality=70")
    monkeypatch.setenv("IPFS_FETCH_TIMEOUT", "2.5")
    monkeypatch.delenv("ALGORAND_NETWORK", raising=False)
    monkeypatch.delenv("ALGORAND_INDEXER_API_KEY", raising=False)
    return monkeypatch


def test_defaults(monkeypatch):
    for name in Settings.model_fields:
        monkeypatch.delenv(name, raising=False)
    config = ResolverConfig.from_settings(Settings(_env_file=None))
    assert config.network == "mainnet"
    assert config.indexer_url == "https://mainnet-idx.4160.nodely.dev"
    assert config.gateway == "https://ipfs.algonode.dev/ipfs/"
    assert config.image_params == ""
    assert config.timeout == 10


def test_from_env(env):
    config = ResolverConfig.from_settings(Settings())
    assert config.indexer_url == "https://mainnet-idx.example.test"
    assert config.gateway == "https://gw.example.test/ipfs/"
    assert config.image_params.startswith("?optimizer=image")
    assert config.timeout == 2.5


def test_testnet_selects_indexer(env):
    config = ResolverConfig.from_settings(Settings(), network="testnet")
    assert config.network == "testnet"
    assert config.indexer_url == "https://testnet-idx.example.test"


def test_network_from_env(env):
    env.setenv("ALGORAND_NETWORK", "testnet")
    assert ResolverConfig.from_settings(Settings()).network == "testnet"


def test_overrides(env):
    config = ResolverConfig.from_settings(Settings(), gateway="https://ipfs.io/ipfs", timeout=None)
    assert config.gateway == "https://ipfs.io/ipfs/"
    assert config.timeout == 2.5


def test_config_is_frozen():
    config = ResolverConfig()
    with pytest.raises(ValidationError):
        config.gateway = "https://other/"


@pytest.mark.parametrize("timeout", [0, -1])
def test_timeout_must_be_positive(timeout):
    with pytest.raises(ValidationError):
        ResolverConfig(timeout=timeout)


def test_unknown_network_rejected():
    with pytest.raises(ValidationError):
        ResolverConfig(network="betanet")
