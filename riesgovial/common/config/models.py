from dataclasses import dataclass, field
from typing import Optional, List

FEED_MODES = ("synthetic", "arcgis")

@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 4000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

@dataclass
class ReportsConfig:
    max_reports: int = 50

@dataclass
class SyntheticFeedConfig:
    initial_size: int = 15
    max_predictions: int = 200
    snapshot_size: int = 30
    interval_seconds: float = 60.0
    max_offset_hours: int = 5
    center_latitude: float = 14.6349
    center_longitude: float = -90.5069
    spread_degrees: float = 0.2

@dataclass
class ArcgisConfig:
    url: Optional[str] = None
    token: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_seconds: float = 10.0
    broadcast_on_query: bool = True # Every proxied query is re-broadcast as prediction:new

@dataclass
class FeedConfig:
    mode: str = "synthetic"
    synthetic: SyntheticFeedConfig = field(default_factory=SyntheticFeedConfig)
    arcgis: ArcgisConfig = field(default_factory=ArcgisConfig)

@dataclass
class StreamingConfig:
    queue_size: int = 50
    ping_seconds: int = 15

@dataclass
class ClientConfig:
    api_url: str = "http://localhost:4000"
    max_items: int = 120
    timeout_seconds: float = 10.0

@dataclass
class AppConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    reports: ReportsConfig = field(default_factory=ReportsConfig)
    feed: FeedConfig = field(default_factory=FeedConfig)
    streaming: StreamingConfig = field(default_factory=StreamingConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    log_level: str = "INFO"
