# Common utilities
from .config_loader import (
    ImageProfile,
    Settings,
    build_settings,
    load_config,
    load_settings,
)
from .errors import (
    DocumentParseError,
    EncodingError,
    IngestionBusyError,
    MinistoreError,
    NetworkError,
    PersistenceError,
    UploadError,
    ValidationError,
)
from .log_config import setup_logging
from .text_utils import (
    format_price,
    normalize_category,
    normalize_handle,
    parse_timestamp,
    strip_extension,
    to_iso,
    utc_now,
)
