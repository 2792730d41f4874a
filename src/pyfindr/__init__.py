"""pyfindr - Decrypt offline finding location reports and fuse them into a best location."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfindr")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfindr._crypto.keys import advertisement_key_b64, derive_advertisement_key, load_private_key
from pyfindr.client import FindrClient
from pyfindr.config import Accessory, FindrConfig
from pyfindr.decrypt import (
    async_decrypt_batch,
    decrypt_batch,
    decrypt_payload,
    decrypt_report,
    decrypt_report_outcome,
    latest_report,
    merge_reports,
)
from pyfindr.exceptions import (
    AuthenticationFailedError,
    FailureKind,
    FindrApiError,
    FindrConfigError,
    FindrCryptoError,
    FindrError,
    FindrTransportError,
    InvalidKeyError,
    InvalidPointError,
    MalformedPayloadError,
    ReportDecodeError,
)
from pyfindr.export import reports_to_kml, write_kml
from pyfindr.fusion import fuse_best_location, haversine_meters
from pyfindr.models import (
    BatteryStatus,
    DecodedLocation,
    DecodedReport,
    DecryptedPayload,
    DecryptionFailure,
    FusedLocation,
    RawReport,
    ReportOutcome,
)

__all__ = [
    "__version__",
    "Accessory",
    "AuthenticationFailedError",
    "BatteryStatus",
    "DecodedLocation",
    "DecodedReport",
    "DecryptedPayload",
    "DecryptionFailure",
    "FailureKind",
    "FindrApiError",
    "FindrClient",
    "FindrConfig",
    "FindrConfigError",
    "FindrCryptoError",
    "FindrError",
    "FindrTransportError",
    "FusedLocation",
    "InvalidKeyError",
    "InvalidPointError",
    "MalformedPayloadError",
    "RawReport",
    "ReportDecodeError",
    "ReportOutcome",
    "advertisement_key_b64",
    "async_decrypt_batch",
    "decrypt_batch",
    "decrypt_payload",
    "decrypt_report",
    "decrypt_report_outcome",
    "derive_advertisement_key",
    "fuse_best_location",
    "haversine_meters",
    "latest_report",
    "load_private_key",
    "merge_reports",
    "reports_to_kml",
    "write_kml",
]
