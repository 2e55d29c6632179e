from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pathlib import Path
from typing import Optional, Any

from .models import AppConfig, FEED_MODES
from ..exceptions import ConfigurationError

class ConfigManager:
    """Loads, merges and validates the application configuration."""
    
    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = Path(config_dir)
    
    def defaults(self) -> DictConfig:
        """Defaults taken from the typed schema."""
        return OmegaConf.structured(AppConfig)

    def load(self, profile: str = "config") -> DictConfig:
        """Loads a YAML profile and merges it over the typed schema."""
        config_path = self.config_dir / f"{profile}.yaml"
        
        if not config_path.exists():
            raise FileNotFoundError(f"Config not found: {config_path}")
        
        return self.merge(OmegaConf.load(config_path))

    def merge(self, cfg: Optional[Any] = None) -> DictConfig:
        """
        Merges a config (e.g. the one composed by Hydra) over the defaults
        and validates the result.
        """
        merged = self.defaults()
        if cfg is not None:
            try:
                merged = OmegaConf.merge(merged, cfg)
            except OmegaConfBaseException as e:
                raise ConfigurationError(f"Invalid configuration: {e}") from e
        self.validate(merged)
        return merged

    def validate(self, cfg: DictConfig):
        """Basic sanity checks."""
        if cfg.feed.mode not in FEED_MODES:
            raise ConfigurationError(
                f"Unknown feed mode '{cfg.feed.mode}', expected one of {FEED_MODES}"
            )
        if cfg.reports.max_reports <= 0:
            raise ConfigurationError("reports.max_reports must be positive")
        synthetic = cfg.feed.synthetic
        if synthetic.max_predictions <= 0 or synthetic.snapshot_size < 0:
            raise ConfigurationError("Invalid synthetic feed bounds")
        if synthetic.interval_seconds <= 0:
            raise ConfigurationError("feed.synthetic.interval_seconds must be positive")
