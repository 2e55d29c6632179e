from .sync_cache import ClientSyncCache, add_unique, merge_unique, risk_band, MAX_ITEMS
from .session import RealtimeSession
