"""Configuration models for the layout engine and the tabular transform.

All models are frozen pydantic models. Hosts usually pass option objects
with camelCase keys (``nodeWidth``, ``nodeAlign``); those aliases are
accepted alongside the snake_case field names.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

NodeAlign = Literal["left", "right", "center", "justify"]

DEFAULT_PALETTE: tuple[str, ...] = (
    "#5b8fc9",
    "#6bb89c",
    "#c07eb5",
    "#e8a952",
    "#7c8cbf",
    "#6aada8",
    "#d4896a",
    "#8e85c2",
    "#73b475",
    "#b5876e",
    "#7facc4",
    "#c4a55a",
)

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


class Padding(BaseModel):
    """Space between the canvas edge and the drawable area, in pixels."""

    model_config = _MODEL_CONFIG

    top: float = Field(default=20, ge=0)
    right: float = Field(default=120, ge=0)
    bottom: float = Field(default=20, ge=0)
    left: float = Field(default=20, ge=0)


class LayoutConfig(BaseModel):
    """Canvas and spacing settings consumed by ``SankeyLayout``."""

    model_config = _MODEL_CONFIG

    width: float = Field(default=800, ge=0, description="Canvas width in pixels")
    height: float = Field(default=500, ge=0, description="Canvas height in pixels")
    padding: Padding = Field(default_factory=Padding)
    node_width: float = Field(default=18, ge=0, description="Rendered width of every node")
    node_padding: float = Field(default=14, ge=0, description="Vertical gap between nodes in a column")
    node_align: NodeAlign = Field(default="justify")
    iterations: int = Field(default=32, ge=0, description="Relaxation iterations")

    @property
    def inner_height(self) -> float:
        return self.height - self.padding.top - self.padding.bottom

    @property
    def inner_bottom(self) -> float:
        """Lowest y a node may reach before collision resolution pulls it up."""
        return self.height - self.padding.bottom

    def merged(self, overrides: Mapping[str, Any]) -> LayoutConfig:
        """Return a new config with ``overrides`` applied.

        A partial ``padding`` mapping is merged into the current padding
        instead of replacing it. Keys may be snake_case or camelCase.
        """
        names = {to_camel(name): name for name in LayoutConfig.model_fields}
        data = self.model_dump()
        for key, value in overrides.items():
            name = names.get(key, key)
            if name == "padding" and isinstance(value, Mapping):
                data["padding"] = {**data["padding"], **value}
            else:
                data[name] = value
        return LayoutConfig.model_validate(data)


class TransformConfig(BaseModel):
    """Which row fields hold the source, target, value and optional colors."""

    model_config = _MODEL_CONFIG

    source_field: str
    target_field: str
    value_field: str
    source_color_field: str | None = None
    target_color_field: str | None = None
