"""
Points-gated search radius.

Users unlock a wider search radius as they accumulate points. The tiers are a
fixed lookup table; nothing is interpolated between breakpoints.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import InvalidArgumentError

# Stand-in for the "unlimited" tier in distance computations
UNLIMITED_RADIUS_M = 10_000_000


@dataclass(frozen=True)
class RadiusTier:
    points: int
    radius: int
    label: str

    @property
    def unlimited(self) -> bool:
        return self.radius >= UNLIMITED_RADIUS_M


# Ascending, inclusive lower bounds
RADIUS_TIERS: Tuple[RadiusTier, ...] = (
    RadiusTier(points=0, radius=500, label="500m"),
    RadiusTier(points=50, radius=1000, label="1 km"),
    RadiusTier(points=150, radius=2000, label="2 km"),
    RadiusTier(points=500, radius=5000, label="5 km"),
    RadiusTier(points=1000, radius=UNLIMITED_RADIUS_M, label="Unlimited"),
)


@dataclass(frozen=True)
class RadiusStatus:
    """What a user's points unlock, and how far the next tier is"""
    points: int
    tier: RadiusTier
    next_tier: Optional[RadiusTier]
    progress: float

    @property
    def radius(self) -> int:
        return self.tier.radius

    @property
    def points_needed(self) -> int:
        return self.next_tier.points - self.points if self.next_tier else 0


def _check_points(points) -> int:
    # bool is an int subclass but never a points total
    if isinstance(points, bool) or not isinstance(points, int):
        raise InvalidArgumentError(f"points must be an integer, got {points!r}")
    if points < 0:
        raise InvalidArgumentError(f"points must be non-negative, got {points}")
    return points


def tier_for(points: int) -> Tuple[RadiusTier, Optional[RadiusTier]]:
    """Highest tier met by points, plus the tier after it (None at the top)"""
    points = _check_points(points)
    current, following = RADIUS_TIERS[0], None
    for index, tier in enumerate(RADIUS_TIERS):
        if points >= tier.points:
            current = tier
            following = RADIUS_TIERS[index + 1] if index + 1 < len(RADIUS_TIERS) else None
    return current, following


def allowed_radius(points: int) -> int:
    """Maximum search radius in meters for a points total"""
    tier, _ = tier_for(points)
    return tier.radius


def radius_status(points: int) -> RadiusStatus:
    tier, next_tier = tier_for(points)
    if next_tier is None:
        progress = 100.0
    else:
        progress = (points - tier.points) / (next_tier.points - tier.points) * 100
    return RadiusStatus(
        points=points,
        tier=tier,
        next_tier=next_tier,
        progress=round(min(progress, 100.0), 1),
    )
