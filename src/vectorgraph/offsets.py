"""
Parallel edge curve offsets.

Parallel edges between the same two nodes are fanned out by giving each
one a signed perpendicular displacement of its quadratic control point.
Both the "next edge" preview and the full-family recomputation use one
canonical sequence, indexed by an edge's position in the family:

    position:  0    1    2    3    4    5   ...
    offset:    0  -25  +50  -50  +75  -75   ...

so a family built edge by edge and a family recomputed after a deletion
end up with identical offsets.
"""

import math
from typing import Dict, Sequence

# =============================================================================
# OFFSET CONFIGURATION
# =============================================================================

# Distance (canvas units) between successive fan-out positions
PARALLEL_EDGE_STEP = 25


def offset_for_position(position: int, step: float = PARALLEL_EDGE_STEP) -> float:
    """
    Canonical curve offset of the edge at a 0-based family position.

    Position 0 is the straight edge. After that, even positions bend to
    the positive side and odd positions to the negative side, with the
    magnitude growing by one step every two positions.
    """
    if position <= 0:
        return 0
    multiplier = math.ceil((position + 1) / 2)
    sign = 1 if position % 2 == 0 else -1
    return sign * multiplier * step


class ParallelEdgeOffsetAssigner:
    """Assigns deterministic curve offsets within a parallel-edge family."""

    def __init__(self, step: float = PARALLEL_EDGE_STEP):
        """
        Args:
            step: Distance between successive fan-out positions.

        Raises:
            ValueError: If step is not positive.
        """
        if step <= 0:
            raise ValueError("step must be positive")
        self.step = step

    def preview_offset_for_next_edge(self, existing_edge_ids: Sequence[str]) -> float:
        """
        Offset for an edge about to be added to a family.

        Existing edges keep their offsets; only the newcomer is placed.

        Args:
            existing_edge_ids: Edges already between the two nodes, before
                the new one is registered.
        """
        return offset_for_position(len(existing_edge_ids), self.step)

    def recompute_all_offsets(self, edge_ids: Sequence[str]) -> Dict[str, float]:
        """
        Offsets for a whole family, in the given iteration order.

        The first edge always gets 0. Used to re-fan a family from the
        straight line, e.g. after one of its edges was deleted.
        """
        return {
            edge_id: offset_for_position(position, self.step)
            for position, edge_id in enumerate(edge_ids)
        }
