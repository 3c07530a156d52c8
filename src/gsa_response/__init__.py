"""GSA-compatible search result writer package."""

from .config import EngineConfig, ServiceSettings, WriterConfig

__version__ = "0.1.0"

__all__ = ["EngineConfig", "ServiceSettings", "WriterConfig", "__version__"]
