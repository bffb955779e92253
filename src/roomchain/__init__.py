from importlib.metadata import version, PackageNotFoundError

from .errors import ConfigurationError, GenerationFailedError, OutOfBoundsError, RoomchainError
from .generator import Layout, LayoutGenerator
from .geometry import Corridor, Direction, Room
from .grid import TileGrid, TileType
from .random_source import IntRange, RandomSource, SeededRandom
from .templates import RoomTemplate, TemplatePool, load_templates

__all__ = [
    "__version__",
    "ConfigurationError",
    "Corridor",
    "Direction",
    "GenerationFailedError",
    "IntRange",
    "Layout",
    "LayoutGenerator",
    "OutOfBoundsError",
    "RandomSource",
    "Room",
    "RoomTemplate",
    "RoomchainError",
    "SeededRandom",
    "TemplatePool",
    "TileGrid",
    "TileType",
    "load_templates",
]

try:
    __version__ = version("roomchain")
except PackageNotFoundError:  # pragma: no cover - during tests without packaging
    __version__ = "0.0.0"
