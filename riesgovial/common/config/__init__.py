from .models import (
    AppConfig,
    ServerConfig,
    ReportsConfig,
    FeedConfig,
    SyntheticFeedConfig,
    ArcgisConfig,
    StreamingConfig,
    ClientConfig,
    FEED_MODES,
)
from .manager import ConfigManager
