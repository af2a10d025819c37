from pathlib import Path


# Base directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent

# Log directory
LOG_DIR = BASE_DIR / 'logs'

# Lua scripts for the Redis seat map store
LUA_SCRIPT_DIR = (
    BASE_DIR / 'tourbus' / 'service' / 'seating' / 'driven_adapter' / 'state' / 'lua_script'
)
