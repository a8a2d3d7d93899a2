from .bus import EventBus
from .state import SessionState
from .events import RealtimeEvent
from .client import UpstreamSession
from .tools import ToolSpec, ToolRegistry

__all__ = ["EventBus", "RealtimeEvent", "SessionState", "ToolRegistry", "ToolSpec", "UpstreamSession"]
