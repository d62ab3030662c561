from .computed_stat import ComputedStat
from .stat_function import (
    LINK_FUNCTIONS_NEEDING_ALGORITHMS,
    LINK_FUNCTIONS_NEEDING_DOCUMENTS,
    LinkStatFunction,
    NodeStatFunction,
    link_stat_function_labels,
    node_stat_function_labels,
)
from .stat_purpose import EntityKind, StatPurpose

__all__ = [
    "ComputedStat",
    "EntityKind",
    "LinkStatFunction",
    "NodeStatFunction",
    "StatPurpose",
    "LINK_FUNCTIONS_NEEDING_ALGORITHMS",
    "LINK_FUNCTIONS_NEEDING_DOCUMENTS",
    "link_stat_function_labels",
    "node_stat_function_labels",
]
