"""IntelX client - typed Python bindings for the IntelX REST API."""

__version__ = "0.1.0"

from .analyzer import AnalyzerService
from .client import IntelXClient, SuccessResponse
from .config import ClientConfig, ProxyConfig
from .context import Context
from .errors import (
    APITimeoutError,
    ConfigurationError,
    ContextCancelled,
    DeadlineExceeded,
    DecodeError,
    HTTPStatusError,
    IntelXError,
    NetworkError,
    RequestConstructionError,
)
from .types import AnalyzerConfig, BaseConfiguration, StatusResponse

__all__ = [
    "__version__",
    "AnalyzerService",
    "IntelXClient",
    "SuccessResponse",
    "ClientConfig",
    "ProxyConfig",
    "Context",
    "APITimeoutError",
    "ConfigurationError",
    "ContextCancelled",
    "DeadlineExceeded",
    "DecodeError",
    "HTTPStatusError",
    "IntelXError",
    "NetworkError",
    "RequestConstructionError",
    "AnalyzerConfig",
    "BaseConfiguration",
    "StatusResponse",
]
