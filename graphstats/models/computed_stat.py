from dataclasses import dataclass


@dataclass(frozen=True)
class ComputedStat:
    """Raw measure of one entity together with its encoded value.

    ``measure`` is the unnormalized metric output, ``normalized`` the rescaled
    number before any gradient lookup and ``value`` what the renderer
    consumes: a size multiplier or a packed ``0xRRGGBB`` integer.
    """

    measure: float
    value: float
    normalized: float
