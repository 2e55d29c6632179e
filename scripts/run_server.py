import os
import sys
import hydra
import uvicorn
from omegaconf import DictConfig

# Add repo root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from riesgovial.common.config import ConfigManager
from riesgovial.common.logging import setup_logger
from riesgovial.presentation.api import create_app

logger = setup_logger("riesgovial.server")

@hydra.main(version_base=None, config_path="../conf", config_name="config")
def main(cfg: DictConfig):
    cfg = ConfigManager().merge(cfg)
    app = create_app(cfg)

    server_cfg = cfg.server
    logger.info(f"Traffic risk server on http://{server_cfg.host}:{server_cfg.port}")
    uvicorn.run(app, host=server_cfg.host, port=server_cfg.port)

if __name__ == "__main__":
    main()
