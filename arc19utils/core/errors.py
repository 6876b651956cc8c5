class Arc19Error(Exception):
    """Base class for every failure of an ARC-19 resolution.

    ``stage`` names the pipeline step that failed and ``value`` holds the
    input it failed on, so callers can report without parsing messages.
    """

    stage = None

    def __init__(self, message, value=None):
        super().__init__(message)
        self.value = value

    @property
    def kind(self):
        return type(self).__name__

    @property
    def message(self):
        return str(self)

    def to_dict(self):
        return {
            "kind": self.kind,
            "stage": self.stage,
            "message": self.message,
            "value": self.value,
        }


class AssetLookupError(Arc19Error):
    stage = "lookup"


class MissingAssetParamsError(Arc19Error):
    stage = "lookup"


class FormatError(Arc19Error):
    stage = "template"


class AddressDecodeError(Arc19Error):
    stage = "reserve"


class UnsupportedHashError(Arc19Error):
    stage = "multihash"


class DigestLengthMismatchError(UnsupportedHashError):
    pass


class UnsupportedCodecError(Arc19Error):
    stage = "cid"


class InvalidCidV0Error(Arc19Error):
    stage = "cid"


class UnsupportedCidVersionError(Arc19Error):
    stage = "cid"


class MetadataFetchError(Arc19Error):
    stage = "metadata"


class MetadataParseDegraded(UserWarning):
    """Gateway content was not a JSON object and was wrapped as a fallback."""

    pass
