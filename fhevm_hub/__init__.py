"""fhEVM example hub.

Builds a registry of annotated Solidity examples and turns it into
documentation pages and standalone Hardhat repositories.
"""

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("fhevm-hub")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts

from fhevm_hub.kernel.config import HubConfig, load_config
from fhevm_hub.kernel.exceptions import HubError
from fhevm_hub.registry import ExampleRecord, Registry, build_registry

__all__ = [
    "ExampleRecord",
    "HubConfig",
    "HubError",
    "Registry",
    "__version__",
    "build_registry",
    "load_config",
]
