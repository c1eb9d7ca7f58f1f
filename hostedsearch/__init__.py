from __future__ import annotations

"""Client library for the hosted search REST API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("hostedsearch")
except PackageNotFoundError:  # pragma: no cover - package not installed
    __version__ = "1.7.6"

from .analytics import AnalyticsClient
from .client import SearchClient
from .config import ClientConfig, load_config
from .errors import SearchApiError
from .index import Index
from .security import generate_secured_api_key
from .transport import Outcome

__all__ = [
    "__version__",
    "AnalyticsClient",
    "ClientConfig",
    "Index",
    "Outcome",
    "SearchApiError",
    "SearchClient",
    "generate_secured_api_key",
    "load_config",
]
