from backend.engine.levelloader.loader import (
    Level,
    LoadError,
    discover_levels,
    dump_level,
    load_level,
    parse_level,
)

__all__ = [
    "Level",
    "LoadError",
    "discover_levels",
    "dump_level",
    "load_level",
    "parse_level",
]
