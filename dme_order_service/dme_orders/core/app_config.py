import os

from dme_orders.core.env import load_env

load_env()

ORDER_API_URL = os.getenv("ORDER_API_URL", "")
ORDER_TIMEOUT_S = int(os.getenv("ORDER_TIMEOUT_S", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("LOG_JSON", "false").lower() == "true"
