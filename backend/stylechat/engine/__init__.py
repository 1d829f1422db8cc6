"""Style edit engine."""

from stylechat.engine.config import EditConfig
from stylechat.engine.errors import StyleEditError

__all__ = [
    "EditConfig",
    "StyleEditError",
]
