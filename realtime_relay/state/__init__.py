from .runtime import RuntimeDeps
from .settings import AppSettings
from .relay import RelayInput, RelayState, RelayInputKind

__all__ = ["AppSettings", "RelayInput", "RelayInputKind", "RelayState", "RuntimeDeps"]
