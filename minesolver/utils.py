"""Adjacency helpers shared by the board model and the solver."""

from typing import Dict, Tuple

Coord = Tuple[int, int]
Neighborhoods = Dict[Coord, Tuple[Coord, ...]]

# Column by column: dx outer, dy inner. Strategies take "the first hidden
# neighbor" in this order.
_OFFSETS: Tuple[Coord, ...] = tuple(
    (dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)
)

# (width, height) -> neighborhoods of every cell on a grid of that size
_NEIGHBORHOODS_CACHE: Dict[Coord, Neighborhoods] = {}


def get_neighborhoods(width: int, height: int) -> Neighborhoods:
    """
    Return the clipped 8-neighborhood of every cell on a width x height grid.

    Tables are built once per grid size and shared afterwards, so callers
    must treat the result as read-only.

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    table = _NEIGHBORHOODS_CACHE.get((width, height))
    if table is None:
        table = {
            (x, y): tuple(
                (x + dx, y + dy)
                for dx, dy in _OFFSETS
                if 0 <= x + dx < width and 0 <= y + dy < height
            )
            for x in range(width)
            for y in range(height)
        }
        _NEIGHBORHOODS_CACHE[(width, height)] = table
    return table


def neighbors_of(x: int, y: int, width: int, height: int) -> Tuple[Coord, ...]:
    """Neighbors of (x, y); empty when (x, y) is off the grid."""
    return get_neighborhoods(width, height).get((x, y), ())
