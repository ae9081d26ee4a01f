from .broadcast_hub import BroadcastHub, DuplexObserver, PushSubscription
from .store import SessionStore

__all__ = ["BroadcastHub", "DuplexObserver", "PushSubscription", "SessionStore"]
