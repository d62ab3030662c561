from enum import Enum


class StatPurpose(str, Enum):
    """Visual channel driven by a computed statistic."""

    SIZE = "size"
    COLOR = "color"


class EntityKind(str, Enum):
    """Graph element a calculator produces statistics for."""

    NODE = "node"
    LINK = "link"
