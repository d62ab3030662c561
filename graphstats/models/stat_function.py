from enum import Enum
from typing import Dict, FrozenSet


class NodeStatFunction(str, Enum):
    """Identifiers of the metrics available for nodes."""

    DEFAULT = "default"
    CONSTANT = "constant"
    BACKLINKS_COUNT = "backlinksCount"
    BACK_UNIQUE_LINKS_COUNT = "backUniquelinksCount"
    FORWARD_LINKS_COUNT = "forwardlinksCount"
    FORWARD_UNIQUE_LINKS_COUNT = "forwardUniquelinksCount"
    TOTAL_LINKS_COUNT = "totallinksCount"
    TOTAL_UNIQUE_LINKS_COUNT = "totalUniquelinksCount"
    FILENAME_LENGTH = "filenameLength"
    TAGS_COUNT = "tagsCount"
    CREATION_TIME = "creationTime"
    MODIFIED_TIME = "modifiedTime"
    ECCENTRICITY = "eccentricity"
    BETWEENNESS = "betweenness"
    CLOSENESS = "closeness"
    DEGREE = "degree"
    EIGENVECTOR = "eigenvector"
    HUB = "hub"
    AUTHORITY = "authority"
    TOPOLOGICAL = "topological"
    SENTIMENT = "sentiment"


class LinkStatFunction(str, Enum):
    """Identifiers of the metrics available for links."""

    DEFAULT = "default"
    ADAMIC_ADAR = "Adamic Adar"
    BOW = "BoW"
    CLUSTERING_COEFFICIENT = "Clustering Coefficient"
    CO_CITATIONS = "Co-Citations"
    JACCARD = "Jaccard"
    OCCURRENCES = "Occurrences"
    OTSUKA_OCHIAI = "Otsuka-Ochiai"
    OVERLAP = "Overlap"
    SENTIMENT = "Sentiment"


node_stat_function_labels: Dict[NodeStatFunction, str] = {
    NodeStatFunction.DEFAULT: "Default",
    NodeStatFunction.CONSTANT: "Constant",
    NodeStatFunction.BACKLINKS_COUNT: "Number of backlinks",
    NodeStatFunction.BACK_UNIQUE_LINKS_COUNT: "Number of unique backlinks",
    NodeStatFunction.FORWARD_LINKS_COUNT: "Number of forward links",
    NodeStatFunction.FORWARD_UNIQUE_LINKS_COUNT: "Number of unique forward links",
    NodeStatFunction.TOTAL_LINKS_COUNT: "Number of links",
    NodeStatFunction.TOTAL_UNIQUE_LINKS_COUNT: "Number of unique links",
    NodeStatFunction.FILENAME_LENGTH: "Filename length",
    NodeStatFunction.TAGS_COUNT: "Number of tags",
    NodeStatFunction.CREATION_TIME: "Time since creation",
    NodeStatFunction.MODIFIED_TIME: "Time since last modification",
    NodeStatFunction.ECCENTRICITY: "Eccentricity",
    NodeStatFunction.BETWEENNESS: "Betweenness centrality",
    NodeStatFunction.CLOSENESS: "Closeness centrality",
    NodeStatFunction.DEGREE: "Degree centrality",
    NodeStatFunction.EIGENVECTOR: "Eigenvector centrality",
    NodeStatFunction.HUB: "Hub (HITS)",
    NodeStatFunction.AUTHORITY: "Authority (HITS)",
    NodeStatFunction.TOPOLOGICAL: "Topological weight",
    NodeStatFunction.SENTIMENT: "Sentiment",
}

link_stat_function_labels: Dict[LinkStatFunction, str] = {
    LinkStatFunction.DEFAULT: "Default",
    LinkStatFunction.ADAMIC_ADAR: "Adamic Adar",
    LinkStatFunction.BOW: "Bag of words",
    LinkStatFunction.CLUSTERING_COEFFICIENT: "Clustering coefficient",
    LinkStatFunction.CO_CITATIONS: "Co-citations",
    LinkStatFunction.JACCARD: "Jaccard",
    LinkStatFunction.OCCURRENCES: "Occurrences",
    LinkStatFunction.OTSUKA_OCHIAI: "Otsuka-Ochiai",
    LinkStatFunction.OVERLAP: "Overlap",
    LinkStatFunction.SENTIMENT: "Sentiment",
}

# Link functions served by an algorithms provider; the factory reports them
# unavailable while no provider is loaded.
LINK_FUNCTIONS_NEEDING_ALGORITHMS: FrozenSet[LinkStatFunction] = frozenset(
    fn
    for fn in LinkStatFunction
    if fn not in (LinkStatFunction.DEFAULT, LinkStatFunction.OCCURRENCES)
)

# Link functions reading node documents; they yield NaN without a provider.
LINK_FUNCTIONS_NEEDING_DOCUMENTS: FrozenSet[LinkStatFunction] = frozenset(
    {
        LinkStatFunction.BOW,
        LinkStatFunction.OTSUKA_OCHIAI,
        LinkStatFunction.SENTIMENT,
    }
)
