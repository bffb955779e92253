from __future__ import annotations

import argparse
import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from platformdirs import user_config_dir

from .errors import ConfigurationError
from .generator import DEFAULT_MAX_ATTEMPTS, LayoutGenerator
from .random_source import IntRange, SeededRandom
from .templates import TemplatePool, load_templates

logger = logging.getLogger(__name__)

APP_NAME = "roomchain"
CONFIG_ENV = "ROOMCHAIN_CONFIG"
CONFIG_FILENAME = "roomchain.yaml"

# Environment variable -> (field name, converter)
ENV_FIELDS = {
    "ROOMCHAIN_COLUMNS": ("columns", int),
    "ROOMCHAIN_ROWS": ("rows", int),
    "ROOMCHAIN_ROOMS": ("number_of_rooms", int),
    "ROOMCHAIN_SEED": ("seed", int),
    "ROOMCHAIN_MAX_ATTEMPTS": ("max_attempts", int),
    "ROOMCHAIN_TEMPLATES": ("templates_path", str),
}

# Settings field -> converter applied to config file values
FIELD_TYPES = {
    "columns": int,
    "rows": int,
    "number_of_rooms": int,
    "corridor_min": int,
    "corridor_max": int,
    "seed": int,
    "max_attempts": int,
    "deadline_seconds": float,
    "templates_path": str,
}
OPTIONAL_FIELDS = {"seed", "deadline_seconds", "templates_path"}


def _coerce(name: str, value: Any) -> Any:
    if value is None:
        if name in OPTIONAL_FIELDS:
            return None
        raise ConfigurationError(f"Setting {name!r} must not be empty")
    convert = FIELD_TYPES[name]
    if isinstance(value, (bool, list, dict)):
        raise ConfigurationError(f"Invalid value for {name}: {value!r}")
    if convert is int and isinstance(value, float) and not value.is_integer():
        raise ConfigurationError(f"Invalid value for {name}: {value!r} is not a whole number")
    try:
        return convert(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid value for {name}: {value!r}") from e


@dataclass
class GenerationSettings:
    """Inputs for one layout generation run.

    Sources, lowest priority first:
    - dataclass defaults
    - a YAML config file (``--config``, ROOMCHAIN_CONFIG, or roomchain.yaml in
      the user config directory when present)
    - environment variables (prefix: ROOMCHAIN_)
    - command-line flags

    Without a templates file the pool is a single 5x5 template that can fill
    every requested room.
    """

    columns: int = 100
    rows: int = 100
    number_of_rooms: int = 10
    corridor_min: int = 3
    corridor_max: int = 10
    seed: Optional[int] = None
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    deadline_seconds: Optional[float] = None
    templates_path: Optional[str] = None

    # ------------------------ Validation ------------------------
    def validate(self) -> None:
        if self.columns <= 0 or self.rows <= 0:
            raise ConfigurationError(f"Board must be at least 1x1, got {self.columns}x{self.rows}")
        if self.number_of_rooms <= 0:
            raise ConfigurationError(f"number_of_rooms must be positive, got {self.number_of_rooms}")
        if self.corridor_min > self.corridor_max:
            raise ConfigurationError(
                f"corridor_min {self.corridor_min} is greater than corridor_max {self.corridor_max}"
            )
        if self.corridor_max < 1:
            raise ConfigurationError(f"corridor_max must be at least 1, got {self.corridor_max}")
        if self.max_attempts <= 0:
            raise ConfigurationError(f"max_attempts must be positive, got {self.max_attempts}")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ConfigurationError(f"deadline_seconds must be positive, got {self.deadline_seconds}")

    # ------------------------ Construction ------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GenerationSettings":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(str(k) for k in data if k not in known)
        if unknown:
            logger.warning("Ignoring unknown settings keys: %s", ", ".join(unknown))
        return cls(**{k: _coerce(k, v) for k, v in data.items() if k in known})

    def with_overrides(self, overrides: Mapping[str, Any]) -> "GenerationSettings":
        values = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **values)

    @classmethod
    def from_env(cls, base: Optional["GenerationSettings"] = None, environ: Optional[Mapping[str, str]] = None) -> "GenerationSettings":
        env = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for var, (name, convert) in ENV_FIELDS.items():
            raw = env.get(var)
            if raw is None or raw == "":
                continue
            try:
                overrides[name] = convert(raw)
            except ValueError as e:
                raise ConfigurationError(f"Invalid value for {var}: {raw!r}") from e
        return (base or cls()).with_overrides(overrides)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "GenerationSettings":
        """Defaults overlaid with the YAML config file, if one is found."""
        config_path = path if path is not None else default_config_path()
        if config_path is None:
            return cls()
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")
        with config_path.open("r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Config file {config_path} is not valid YAML: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file {config_path} must contain a mapping")
        logger.info("Loaded settings from %s", config_path)
        return cls.from_dict(raw)

    # ------------------------ Wiring ------------------------
    def corridor_range(self) -> IntRange:
        return IntRange(self.corridor_min, self.corridor_max)

    def template_pool(self) -> TemplatePool:
        if self.templates_path:
            return load_templates(self.templates_path)
        return TemplatePool.uniform(width=5, height=5, multiplicity=self.number_of_rooms)

    def build_generator(self) -> LayoutGenerator:
        self.validate()
        return LayoutGenerator(
            columns=self.columns,
            rows=self.rows,
            number_of_rooms=self.number_of_rooms,
            corridor_length=self.corridor_range(),
            pool=self.template_pool(),
            rng=SeededRandom(self.seed),
            max_attempts=self.max_attempts,
            deadline_seconds=self.deadline_seconds,
        )


def default_config_path() -> Optional[Path]:
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        return Path(env_path)
    user_path = Path(user_config_dir(appname=APP_NAME)) / CONFIG_FILENAME
    if user_path.exists():
        return user_path
    return None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="roomchain",
        description="Generate a rooms-and-corridors dungeon layout",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML settings file")
    parser.add_argument("--templates", dest="templates_path", default=None, help="YAML room template file")
    parser.add_argument("--columns", type=int, default=None, help="Board width in tiles")
    parser.add_argument("--rows", type=int, default=None, help="Board height in tiles")
    parser.add_argument("--rooms", dest="number_of_rooms", type=int, default=None, help="Number of rooms")
    parser.add_argument("--corridor-min", dest="corridor_min", type=int, default=None, help="Shortest corridor")
    parser.add_argument(
        "--corridor-max", dest="corridor_max", type=int, default=None, help="Corridor length upper bound (exclusive)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible layouts")
    parser.add_argument("--max-attempts", dest="max_attempts", type=int, default=None, help="Attempt cap")
    parser.add_argument(
        "--deadline", dest="deadline_seconds", type=float, default=None, help="Give up after this many seconds"
    )
    parser.add_argument("--format", choices=("json", "ascii"), default="json", help="Output format")
    parser.add_argument("--debug", action="store_true", help="Enable verbose debug logging")
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> GenerationSettings:
    """Merge config file, environment and CLI flags, highest priority last."""
    settings = GenerationSettings.load(args.config)
    settings = GenerationSettings.from_env(settings)
    settings = settings.with_overrides(
        {
            "columns": args.columns,
            "rows": args.rows,
            "number_of_rooms": args.number_of_rooms,
            "corridor_min": args.corridor_min,
            "corridor_max": args.corridor_max,
            "seed": args.seed,
            "max_attempts": args.max_attempts,
            "deadline_seconds": args.deadline_seconds,
            "templates_path": args.templates_path,
        }
    )
    settings.validate()
    logger.debug("Settings merged: %s", settings)
    return settings
