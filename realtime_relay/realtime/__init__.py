from .bridge import UpstreamBridge
from .handle import UpstreamState, UpstreamSessionHandle
from .session import RealtimeUpstreamSession

__all__ = ["RealtimeUpstreamSession", "UpstreamBridge", "UpstreamSessionHandle", "UpstreamState"]
