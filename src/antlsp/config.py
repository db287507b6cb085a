"""
Server settings.

Settings are layered, later sources overriding earlier ones:

1. Built-in defaults.
2. A ``.antlsp.toml`` file in the workspace root.
3. ``initializationOptions`` sent by the client with ``initialize``.
4. The ``antlsp`` section of ``workspace/didChangeConfiguration``.

Recognised keys (TOML uses snake_case, clients may send camelCase):

``log_level`` / ``logLevel``
    Root logger level, e.g. ``"debug"``.
``include_builtins`` / ``includeBuiltins``
    Offer built-in functions (``print``, ``len`` …) as completions.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)

PROJECT_CONFIG = '.antlsp.toml'

_KEYS = {
    'log_level': 'log_level',
    'logLevel': 'log_level',
    'include_builtins': 'include_builtins',
    'includeBuiltins': 'include_builtins',
}

_TRUE = frozenset({'true', '1', 'yes', 'on'})
_FALSE = frozenset({'false', '0', 'no', 'off'})


def _as_bool(value) -> bool | None:
    """Real booleans pass through; strings like "false" are parsed; else None."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    return None


@dataclass(frozen=True)
class ServerSettings:
    log_level: str | None = None
    include_builtins: bool = True

    def merged(self, options) -> ServerSettings:
        """Return a copy with any recognised keys from *options* applied.

        *options* may be a dict or an attribute-style object; unknown keys,
        ``None`` values and unparseable booleans are ignored.
        """
        if options is None:
            return self
        changes = {}
        for key, field_name in _KEYS.items():
            if isinstance(options, dict):
                value = options.get(key)
            else:
                value = getattr(options, key, None)
            if value is None:
                continue
            if field_name == 'include_builtins':
                flag = _as_bool(value)
                if flag is None:
                    logger.warning('ServerSettings: ignoring non-boolean %s=%r', key, value)
                    continue
                value = flag
            else:
                value = str(value)
            changes[field_name] = value
        return replace(self, **changes) if changes else self


def read_project_config(workspace_root: str | None) -> dict:
    """Parse ``.antlsp.toml`` in *workspace_root*; ``{}`` if absent or invalid."""
    if not workspace_root:
        return {}
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib

    config_path = Path(workspace_root) / PROJECT_CONFIG
    if not config_path.is_file():
        return {}
    try:
        return tomllib.loads(config_path.read_text(encoding='utf-8'))
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning('read_project_config: ignoring unreadable %s', config_path, exc_info=True)
        return {}


def load_settings(workspace_root: str | None = None, init_options=None) -> ServerSettings:
    return ServerSettings().merged(read_project_config(workspace_root)).merged(init_options)


def apply_log_level(raw: str | None) -> None:
    """Set the root logger level from a string like 'debug', 'warning', etc."""
    if not raw:
        return
    level = getattr(logging, raw.upper(), None)
    if isinstance(level, int):
        logging.getLogger().setLevel(level)
    else:
        logger.warning('apply_log_level: unknown level %r', raw)
