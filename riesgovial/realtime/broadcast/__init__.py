from .realtime_broadcaster import RealtimeBroadcaster
