"""
Centralized constants and configuration loader.
Loads user settings from config.json with safe defaults if missing or invalid.
Endpoints, polling cadence, history size, display and color constants are defined here.
"""
import json
import logging
import os

logger = logging.getLogger(__name__)

# Determine config file path relative to project root
config_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config.json")

# Load configuration or fall back to empty dict
try:
    with open(config_path, "r") as f:
        config_data = json.load(f)
except FileNotFoundError:
    config_data = {}
except (OSError, ValueError) as e:
    config_data = {}
    logger.warning(f"Failed to load config.json: {e}. Using default values.")

# Endpoints
POOL_API_URL = config_data.get("pool_api_url", "http://15.204.211.130:4000/api/pools/ErgoSigmanauts")
PRICE_FEED_URL = config_data.get("price_feed_url", "https://api.spectrum.fi/v1/price-tracking/markets")
NETWORK_HASHRATE_URL = config_data.get("network_hashrate_url", "https://api.ergoplatform.com/info")

# Market pair used for the coin price (base priced in quote, inverted)
NATIVE_COIN = config_data.get("native_coin", "ERG")
STABLE_COIN = config_data.get("stable_coin", "SigUSD")

# Polling and history behavior
POLL_INTERVAL = config_data.get("poll_interval", 60.0)
HISTORY_CAPACITY = config_data.get("history_capacity", 720)

# Static network placeholders (not sourced from any feed)
BLOCK_REWARD = config_data.get("block_reward", 0)
REWARD_REDUCTION = config_data.get("reward_reduction", 0)

MINER_ADDRESS = config_data.get("miner_address", "")
POOL_NAME = config_data.get("pool_name", "Sigmanauts Mining Pool")
VERSION = "0.1.0"

USER_AGENT = f"pooldash/{VERSION}"

# Display
FPS = config_data.get("fps", 10)
SCREEN_WIDTH = 800
SCREEN_HEIGHT = 480

BLACK      = (6,   6,   10)
GRID_COLOR = (30,  60,  40)
WHITE      = (240, 240, 255)
GREEN      = (0,   230, 140)
LIGHT_GREEN = (120, 255, 170)
RED        = (255, 90,  90)
GRAY       = (130, 130, 160)
ORANGE     = (255, 180, 0)

HEADER_HEIGHT = 24
FOOTER_HEIGHT = 20
PANEL_MARGIN = 6
