from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from arc19utils.core.settings import Settings, settings as default_settings


class ResolverConfig(BaseModel):
    """Read-only settings for a single decode call.

    Every network facing function takes one of these explicitly, so two
    resolutions against different networks or gateways can run side by side.
    """

    model_config = ConfigDict(frozen=True)

    network: Literal["mainnet", "testnet"] = "mainnet"
    indexer_url: str = "https://mainnet-idx.4160.nodely.dev"
    indexer_api_key: Optional[str] = None
    gateway: str = "https://ipfs.algonode.dev/ipfs/"
    image_params: str = ""
    timeout: float = 10.0

    @field_validator("gateway")
    @classmethod
    def gateway_trailing_slash(cls, v):
        return v if v.endswith("/") else v + "/"

    @field_validator("indexer_url")
    @classmethod
    def indexer_no_trailing_slash(cls, v):
        return v.rstrip("/")

    @field_validator("timeout")
    @classmethod
    def timeout_positive(cls, v):
        if v <= 0:
            raise ValueError("timeout must be a positive number of seconds")
        return v

    @classmethod
    def from_settings(cls, conf: Settings = None, network=None, **overrides):
        """Builds a config from environment settings.

        :param conf: settings to read, defaults to the module level settings
        :param network: ``mainnet`` or ``testnet``, defaults to ALGORAND_NETWORK
        :param overrides: any field of the config, taking precedence
        """
        if conf is None:
            conf = default_settings
        if network is None:
            network = conf.ALGORAND_NETWORK

        indexer_url = (
            conf.TESTNET_ALGORAND_INDEXER_HOST
            if network == "testnet"
            else conf.ALGORAND_INDEXER_HOST
        )
        values = {
            "network": network,
            "indexer_url": str(indexer_url),
            "indexer_api_key": conf.ALGORAND_INDEXER_API_KEY,
            "gateway": str(conf.IPFS_GATEWAY),
            "image_params": conf.IPFS_IMAGE_PARAMS,
            "timeout": conf.IPFS_FETCH_TIMEOUT,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
