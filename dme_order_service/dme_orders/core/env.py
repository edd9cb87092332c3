import os
from pathlib import Path
from dotenv import load_dotenv

SERVICE_ROOT = Path(__file__).resolve().parents[2]  # dme_order_service/


def load_env() -> bool:
    """Load config.env (or the file named by DME_CONFIG_ENV); real env vars always win."""
    env_path = Path(os.getenv("DME_CONFIG_ENV") or SERVICE_ROOT / "config.env")
    return load_dotenv(dotenv_path=env_path, override=False)
