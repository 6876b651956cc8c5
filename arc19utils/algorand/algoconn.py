from algosdk.v2client import indexer

from arc19utils.core.config import ResolverConfig


def get_indexer(config: ResolverConfig = None):
    """Indexer client for the network selected in ``config``"""
    if config is None:
        config = ResolverConfig.from_settings()

    if config.indexer_api_key:
        key = config.indexer_api_key
        header = {"X-Api-key": key}
    else:
        key = ""
        header = None

    return indexer.IndexerClient(
        indexer_token=key, indexer_address=config.indexer_url, headers=header
    )
