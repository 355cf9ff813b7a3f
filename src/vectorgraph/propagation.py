"""
Edge geometry update propagation.

When a node moves or is resized, every edge attached to it has to
recompute its path. The propagator relays that fact to exactly one
subscriber (normally the shape layer), synchronously and in the node's
incident-set order.
"""

import logging
from typing import Callable, Optional

from .topology import GraphTopology

logger = logging.getLogger(__name__)

EdgeUpdateCallback = Callable[[str], None]


class EdgeGeometryUpdatePropagator:
    """
    Single-subscriber relay from node movement to edge redraws.

    Only one callback is held at a time. set_update_callback() replaces
    the current one and hands the old one back, so a caller that needs
    fan-out can chain it explicitly.
    """

    def __init__(self, topology: GraphTopology):
        self.topology = topology
        self._callback: Optional[EdgeUpdateCallback] = None

    @property
    def update_callback(self) -> Optional[EdgeUpdateCallback]:
        return self._callback

    def set_update_callback(
        self, callback: EdgeUpdateCallback
    ) -> Optional[EdgeUpdateCallback]:
        """
        Register the subscriber, replacing any previous one.

        Returns:
            The replaced callback, or None if there was none.
        """
        previous = self._callback
        if previous is not None and previous is not callback:
            logger.debug("Replacing edge update callback %r", previous)
        self._callback = callback
        return previous

    def clear_update_callback(self) -> None:
        self._callback = None

    def notify_node_moved(self, node_id: str) -> int:
        """
        Ask the subscriber to redraw every edge attached to node_id.

        Returns:
            Number of edges notified (0 without a subscriber).
        """
        if self._callback is None:
            return 0

        edge_ids = self.topology.get_edge_ids_for_node(node_id)
        for edge_id in edge_ids:
            self._callback(edge_id)
        return len(edge_ids)
