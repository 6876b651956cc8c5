from dataclasses import dataclass, field
from typing import Optional, Union

from pydantic import BaseModel

from arc19utils.core.errors import Arc19Error, MissingAssetParamsError


@dataclass(frozen=True)
class AssetParams:
    url: str
    reserve: str

    @classmethod
    def from_indexer(cls, params):
        """Builds from the ``params`` dict of an indexer asset lookup"""
        params = params or {}
        missing = [key for key in ("url", "reserve") if not params.get(key)]
        if missing:
            raise MissingAssetParamsError(
                f"Asset parameters missing {', '.join(missing)}. Make sure the "
                "asset id is correct and the asset conforms to ARC19.",
                missing,
            )
        return cls(url=params["url"], reserve=params["reserve"])


@dataclass(frozen=True)
class ParsedTemplate:
    version: int
    codec: str
    hash_type: str
    suffix: str = ""
    raw_version: str = field(default=None, compare=False, repr=False)

    @property
    def path_suffix(self):
        """Template suffix usable in a gateway url, fragment removed"""
        return self.suffix.split("#")[0]

    def to_template(self):
        return (
            f"template-ipfs://{{ipfscid:{self.raw_version or self.version}:{self.codec}"
            f":reserve:{self.hash_type}}}{self.suffix}"
        )


class DecodeResult(BaseModel):
    asset_id: Optional[int] = None
    cid: str
    metadata_url: str
    image_url: Optional[str] = None
    metadata: Optional[dict] = None
    degraded: bool = False


@dataclass(frozen=True)
class DecodeSuccess:
    result: DecodeResult
    ok = True


@dataclass(frozen=True)
class DecodeFailure:
    error: Arc19Error
    ok = False

    @property
    def kind(self):
        return self.error.kind

    @property
    def stage(self):
        return self.error.stage

    @property
    def message(self):
        return self.error.message


Decoded = Union[DecodeSuccess, DecodeFailure]
