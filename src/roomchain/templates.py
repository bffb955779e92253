from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .random_source import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoomTemplate:
    """Reusable room blueprint: fixed bounds and how many copies one layout may use."""

    name: str
    width: int
    height: int
    multiplicity: int = 1

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ConfigurationError(f"Template {self.name!r} must have positive size, got {self.width}x{self.height}")
        if self.multiplicity < 0:
            raise ConfigurationError(f"Template {self.name!r} multiplicity must be >= 0, got {self.multiplicity}")


@dataclass
class TemplatePool:
    """Ordered room templates plus optional distinguished start and end templates.

    Start and end templates are consumed once each and are not bounded by a
    multiplicity of their own.
    """

    templates: List[RoomTemplate] = field(default_factory=list)
    start: Optional[RoomTemplate] = None
    end: Optional[RoomTemplate] = None

    def capacity(self) -> int:
        """Number of rooms the pool can supply in one layout."""
        size = sum(t.multiplicity for t in self.templates if t.multiplicity > 0)
        if self.start is not None:
            size += 1
        if self.end is not None:
            size += 1
        return size

    def counters(self) -> List[int]:
        """Fresh per-attempt remaining multiplicities, indexed like ``templates``."""
        return [max(0, t.multiplicity) for t in self.templates]

    def draw(self, remaining: List[int], rng: RandomSource) -> Optional[RoomTemplate]:
        """Pick a random template with copies left and consume one copy.

        Returns None when every template is used up.
        """
        available = [i for i, n in enumerate(remaining) if n > 0]
        if not available:
            return None
        index = rng.choice(available)
        remaining[index] -= 1
        return self.templates[index]

    @classmethod
    def uniform(cls, width: int, height: int, multiplicity: int, name: str = "room") -> "TemplatePool":
        return cls(templates=[RoomTemplate(name=name, width=width, height=height, multiplicity=multiplicity)])


# ---- File schema -----------------------------------------------------------


class TemplateModel(BaseModel):
    """Schema of a single template entry in a templates YAML file."""

    name: str = Field(..., description="Template identifier")
    width: int = Field(..., gt=0, description="Bounding width in tiles")
    height: int = Field(..., gt=0, description="Bounding height in tiles")
    multiplicity: int = Field(1, ge=0, description="How many copies one layout may use")

    def to_template(self) -> RoomTemplate:
        return RoomTemplate(name=self.name, width=self.width, height=self.height, multiplicity=self.multiplicity)


class TemplateFileModel(BaseModel):
    """Schema of a templates YAML file."""

    start: Optional[TemplateModel] = Field(default=None, description="Distinguished first room")
    end: Optional[TemplateModel] = Field(default=None, description="Distinguished last room")
    templates: List[TemplateModel] = Field(default_factory=list, description="Room pool")

    @field_validator("templates")
    @classmethod
    def unique_names(cls, v: List[TemplateModel]) -> List[TemplateModel]:
        seen: Dict[str, int] = {}
        for t in v:
            seen[t.name] = seen.get(t.name, 0) + 1
        dupes = sorted(name for name, n in seen.items() if n > 1)
        if dupes:
            raise ValueError(f"Duplicate template names: {', '.join(dupes)}")
        return v

    def to_pool(self) -> TemplatePool:
        return TemplatePool(
            templates=[t.to_template() for t in self.templates],
            start=self.start.to_template() if self.start else None,
            end=self.end.to_template() if self.end else None,
        )


def pool_from_dict(raw: dict) -> TemplatePool:
    try:
        model = TemplateFileModel.model_validate(raw or {})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid template definition: {e}") from e
    return model.to_pool()


def load_templates(path: Union[str, Path]) -> TemplatePool:
    """Load a template pool from YAML.

    Expected layout::

        start: {name: entrance, width: 7, height: 7}
        end: {name: exit, width: 7, height: 7}
        templates:
          - {name: small, width: 5, height: 5, multiplicity: 4}
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Template file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Template file {path} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Template file {path} must contain a mapping")
    pool = pool_from_dict(raw)
    logger.info(
        "Loaded %d templates from %s (start=%s, end=%s, capacity=%d)",
        len(pool.templates),
        path,
        pool.start.name if pool.start else None,
        pool.end.name if pool.end else None,
        pool.capacity(),
    )
    return pool
