"""Heatmap color derived from the occupancy ratio of a location."""

UNKNOWN_COLOR = "#cccccc"

# (upper ratio bound, color), evaluated in order
_RATIO_COLORS = (
    (0.2, "#22c55e"),
    (0.5, "#eab308"),
    (0.8, "#f97316"),
)
FULL_COLOR = "#ef4444"


def heatmap_color(current: int, capacity: int) -> str:
    if capacity <= 0:
        return UNKNOWN_COLOR

    ratio = current / capacity
    for upper, color in _RATIO_COLORS:
        if ratio < upper:
            return color
    return FULL_COLOR


def occupancy_percentage(current: int, capacity: int) -> int:
    """Occupancy as a whole percentage of capacity, 0 for unknown capacity."""
    if capacity <= 0:
        return 0
    return int(round(current / capacity * 100))
