"""Hub configuration models and loader."""

from fhevm_hub.kernel.config.loader import ConfigLoader, load_config
from fhevm_hub.kernel.config.models import HubConfig, LoggingConfig

__all__ = ["ConfigLoader", "HubConfig", "LoggingConfig", "load_config"]
