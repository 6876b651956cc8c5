from algosdk import error

from arc19utils.algorand.algoconn import get_indexer
from arc19utils.algorand.schemas import AssetParams
from arc19utils.core.config import ResolverConfig
from arc19utils.core.errors import AssetLookupError
from arc19utils.decorators import traced


def validate_asset_id(asset_id):
    if isinstance(asset_id, bool) or not isinstance(asset_id, int) or asset_id <= 0:
        raise AssetLookupError(f"Asset id must be a positive integer, got {asset_id!r}", asset_id)
    return asset_id


class IndexParser:
    """
    For indexer queries related to ARC-19 assets.
    """

    def __init__(self, config: ResolverConfig = None, indexer=None):
        if indexer is None:
            self.indexer = get_indexer(config)
        else:
            self.indexer = indexer

    def lookup_asset(self, asset_id: int, tracer=None) -> AssetParams:
        """
        Fetches the url and reserve address of an asset.

        :param asset_id: positive asset id
        :raises AssetLookupError: invalid id, or the indexer request failed
        :raises MissingAssetParamsError: the asset has no url or reserve
        """
        return _lookup_asset(self.indexer, asset_id, tracer=tracer)


@traced("lookup")
def _lookup_asset(idxr, asset_id):
    validate_asset_id(asset_id)
    try:
        response = idxr.lookup_asset_by_id(asset_id)
    except error.IndexerHTTPError as e:
        raise AssetLookupError(f"Indexer lookup of asset {asset_id} failed: {e}", asset_id) from e
    except OSError as e:
        # urllib transport errors (URLError, timeouts) aren't wrapped by algosdk
        raise AssetLookupError(
            f"Indexer unreachable for asset {asset_id}: {type(e).__name__}", asset_id
        ) from e

    params = (response or {}).get("asset", {}).get("params")
    return AssetParams.from_indexer(params)
