from dataclasses import dataclass
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from graphstats.models import LinkStatFunction, NodeStatFunction


@dataclass
class StatsSettings:
    """Which functions drive node and link statistics and how they render."""

    nodes_size_function: str = NodeStatFunction.DEFAULT.value
    nodes_color_function: str = NodeStatFunction.DEFAULT.value
    links_size_function: str = LinkStatFunction.DEFAULT.value
    links_color_function: str = LinkStatFunction.DEFAULT.value
    invert_node_stats: bool = False
    invert_link_stats: bool = False
    nodes_color_colormap: str = "viridis"
    links_color_colormap: str = "viridis"
    recompute_stats_on_graph_change: bool = True
    eigenvector_max_iter: int = 1000
    hits_max_iter: int = 1000

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatsSettings":
        """Create ``StatsSettings`` from a raw dictionary."""
        defaults = cls()
        return cls(**{k: data.get(k, getattr(defaults, k)) for k in cls.__dataclass_fields__})

    def update(self, overrides: Dict[str, Any]) -> None:
        """Update fields from a dictionary of overrides."""
        for key, value in overrides.items():
            if hasattr(self, key) and value is not None:
                setattr(self, key, value)


class StatsSettingsModel(BaseModel):
    """Pydantic model for validating statistics settings."""

    model_config = ConfigDict(extra="ignore")

    nodes_size_function: str = NodeStatFunction.DEFAULT.value
    nodes_color_function: str = NodeStatFunction.DEFAULT.value
    links_size_function: str = LinkStatFunction.DEFAULT.value
    links_color_function: str = LinkStatFunction.DEFAULT.value
    invert_node_stats: bool = False
    invert_link_stats: bool = False
    nodes_color_colormap: str = "viridis"
    links_color_colormap: str = "viridis"
    recompute_stats_on_graph_change: bool = True
    eigenvector_max_iter: int = Field(1000, gt=0)
    hits_max_iter: int = Field(1000, gt=0)

    @field_validator("nodes_size_function", "nodes_color_function")
    @classmethod
    def _known_node_function(cls, value: str) -> str:
        return NodeStatFunction(value).value

    @field_validator("links_size_function", "links_color_function")
    @classmethod
    def _known_link_function(cls, value: str) -> str:
        return LinkStatFunction(value).value

    def to_settings(self) -> StatsSettings:
        """Convert to :class:`StatsSettings`."""
        return StatsSettings.from_dict(self.model_dump())
