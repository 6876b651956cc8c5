from dotenv import load_dotenv
from pydantic import AnyHttpUrl
from pydantic_settings import BaseSettings
from typing import Literal, Optional

load_dotenv()

class Settings(BaseSettings):
    ALGORAND_NETWORK: Literal["mainnet", "testnet"] = "mainnet"
    ALGORAND_INDEXER_API_KEY: Optional[str] = None

    ALGORAND_INDEXER_HOST: AnyHttpUrl = "https://mainnet-idx.4160.nodely.dev"
    TESTNET_ALGORAND_INDEXER_HOST: AnyHttpUrl = "https://testnet-idx.4160.nodely.dev"

    IPFS_GATEWAY: AnyHttpUrl = "https://ipfs.algonode.dev/ipfs/"
    IPFS_IMAGE_PARAMS: str = ""
    IPFS_FETCH_TIMEOUT: float = 10.0


settings = Settings()
