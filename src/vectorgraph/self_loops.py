"""
Angular slots for self-loops.

Each new self-loop on a node is drawn at the next free angle around the
node's boundary: first the four cardinal directions, then the four
diagonals, then a pi/6 stride that may land on an already-used slot once
a node carries more than eight loops.
"""

import math
from typing import Optional

from .topology import GraphTopology

# =============================================================================
# SLOT CONFIGURATION
# =============================================================================

# Slots 0-3: right, down, left, up (canvas y grows downwards)
SELF_LOOP_CARDINAL_ANGLES = (0.0, math.pi / 2, math.pi, 3 * math.pi / 2)

# Slots 4-7: the diagonals between them
SELF_LOOP_DIAGONAL_ANGLES = (
    math.pi / 4,
    3 * math.pi / 4,
    5 * math.pi / 4,
    7 * math.pi / 4,
)

# Stride used once both tables are exhausted
SELF_LOOP_FALLBACK_STEP = math.pi / 6


def angle_for_slot(index: int) -> float:
    """Angle (radians) of the 0-based self-loop slot index."""
    cardinal = len(SELF_LOOP_CARDINAL_ANGLES)
    if index < cardinal:
        return SELF_LOOP_CARDINAL_ANGLES[index]
    if index < cardinal + len(SELF_LOOP_DIAGONAL_ANGLES):
        return SELF_LOOP_DIAGONAL_ANGLES[index - cardinal]
    return (index * SELF_LOOP_FALLBACK_STEP) % (2 * math.pi)


class SelfLoopSlotAllocator:
    """Picks the angle for the next self-loop on a node."""

    def __init__(self, topology: GraphTopology):
        self.topology = topology

    def self_loop_count(self, node_id: str) -> int:
        return len(self.topology.get_self_loop_ids(node_id))

    def next_angle(self, node_id: str, exclude: Optional[str] = None) -> float:
        """
        Angle for a self-loop about to be added to node_id.

        Call before registering the loop. Unknown nodes get slot 0.

        Args:
            node_id: Node the loop is attached to.
            exclude: Loop id left out of the count, for a loop that is
                being re-added.
        """
        if not self.topology.has_node(node_id):
            return 0.0
        loops = self.topology.get_self_loop_ids(node_id)
        count = len([loop_id for loop_id in loops if loop_id != exclude])
        return angle_for_slot(count)
