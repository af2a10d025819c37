"""
Lua Scripts for Redis

Uses redis-py's built-in register_script(); every seat map mutation runs as one
script against one hash key, which makes it atomic with respect to all other
clients.
"""

from pathlib import Path
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import NoScriptError

from tourbus.platform.constant.path import LUA_SCRIPT_DIR
from tourbus.platform.logging.loguru_io import Logger


SCRIPT_NAMES = ('replace_reservation', 'hold_for_booking', 'settle_booking', 'purge_lapsed')


class LuaScripts:
    """Manages Lua scripts using redis-py's register_script()"""

    def __init__(self, *, script_dir: Path = LUA_SCRIPT_DIR) -> None:
        self._script_dir = script_dir
        self._sources: dict[str, str] = {}
        self._scripts: dict[str, Any] = {}
        self._initialized: bool = False

    async def initialize(self, *, client: Redis) -> None:
        """Load Lua scripts (idempotent)"""
        if self._initialized:
            return

        for name in SCRIPT_NAMES:
            path = self._script_dir / f'{name}.lua'
            if not path.exists():
                raise FileNotFoundError(f'Lua script not found: {path}')
            self._sources[name] = path.read_text()
            self._scripts[name] = client.register_script(self._sources[name])
            Logger.base.info(f'🔥 [LUA] Registered {name}')

        self._initialized = True

    async def run(self, name: str, *, client: Redis, keys: list[str], args: list[Any]) -> Any:
        """Execute a registered script with auto-retry on NoScriptError"""
        script = self._scripts.get(name)
        if script is None:
            raise RuntimeError(f'Lua script {name!r} not initialized')

        try:
            return await script(keys=keys, args=args, client=client)
        except NoScriptError:
            Logger.base.warning(f'⚠️ [LUA] {name} not found, re-registering...')
            self._scripts[name] = client.register_script(self._sources[name])
            return await self._scripts[name](keys=keys, args=args, client=client)


# Global singleton
lua_script_executor = LuaScripts()
