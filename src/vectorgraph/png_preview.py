"""
PNG preview module for graph sessions.

Rasterizes what the geometry core computes (node ellipses, edge paths,
direction markers) into a PNG. Used for eyeballing offsets and self-loop
slots while debugging and in bug reports; the editor's real drawing is
done by its own rendering layer.
"""

import logging
import math
import os
from typing import Dict, List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .edge_geometry import CURVE_SAMPLE_STEPS
from .geometry import points_to_bounds
from .models import Bounds, Point
from .session import GraphSession

logger = logging.getLogger(__name__)


class PNGPreviewRenderer:
    """Renders a GraphSession's computed geometry as a PNG image."""

    def __init__(
        self,
        scale: int = 2,  # For high-resolution output
        margin: int = 40,
        line_width: int = 1,
        arrow_size: int = 8,
        font_size: int = 11,
        font_path: Optional[str] = None,
        sample_steps: int = CURVE_SAMPLE_STEPS,
    ):
        self.scale = scale
        self.margin = margin
        self.line_width = line_width
        self.arrow_size = arrow_size
        self.font_size = font_size
        self.font_path = font_path
        self.sample_steps = sample_steps

        # Colors
        self.bg_color = (255, 255, 255)
        self.node_fill = (255, 255, 255)
        self.node_outline = (0, 0, 0)
        self.edge_color = (40, 40, 40)
        self.text_color = (0, 0, 0)

        self.font = None

    def _get_font(self) -> ImageFont.ImageFont:
        """Get a font for node labels."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale
        candidates = [self.font_path] if self.font_path else []
        candidates += [
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
            "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
        ]

        for path in candidates:
            if path and os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        self.font = ImageFont.load_default()
        return self.font

    def _content_bounds(self, session: GraphSession) -> Optional[Bounds]:
        """Bounding box of every drawable node and edge, or None."""
        points: List[Point] = []
        topology = session.topology

        for node_id in topology.get_all_node_ids():
            provider = topology.get_node_geometry_provider(node_id)
            if provider is None:
                continue
            center = provider.get_center()
            radii = provider.get_radii()
            points.append(Point(center.cx - radii.rx, center.cy - radii.ry))
            points.append(Point(center.cx + radii.rx, center.cy + radii.ry))

        for edge_id in topology.get_all_edge_ids():
            builder = session.edge_path(edge_id)
            if builder is None:
                continue
            box = builder.bounds()
            points.append(Point(box.x, box.y))
            points.append(Point(box.x + box.width, box.y + box.height))

        if not points:
            return None
        return points_to_bounds(points)

    def _arrow_polygon(
        self, tip: Tuple[float, float], angle: float
    ) -> List[Tuple[float, float]]:
        size = self.arrow_size * self.scale
        back = angle + math.pi
        spread = math.pi / 7
        return [
            tip,
            (
                tip[0] + size * math.cos(back - spread),
                tip[1] + size * math.sin(back - spread),
            ),
            (
                tip[0] + size * math.cos(back + spread),
                tip[1] + size * math.sin(back + spread),
            ),
        ]

    def render(
        self,
        session: GraphSession,
        output_path: str = "graph.png",
        labels: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Render the session to a PNG file.

        Nodes without a geometry provider, and edges touching them, are
        skipped.

        Args:
            session: Session to draw.
            output_path: Path to save the PNG file.
            labels: Optional node id -> label text drawn at node centers.

        Returns:
            Path to the saved PNG file
        """
        labels = labels or {}
        bounds = self._content_bounds(session)

        if bounds is None:
            # Create a small placeholder image
            img = Image.new("RGB", (200, 100), self.bg_color)
            img.save(output_path)
            logger.debug("Nothing to preview; wrote placeholder to %s", output_path)
            return output_path

        s = self.scale

        def to_px(x: float, y: float) -> Tuple[float, float]:
            return (
                (x - bounds.x + self.margin) * s,
                (y - bounds.y + self.margin) * s,
            )

        width = int(math.ceil((bounds.width + 2 * self.margin) * s))
        height = int(math.ceil((bounds.height + 2 * self.margin) * s))
        img = Image.new("RGB", (max(width, 1), max(height, 1)), self.bg_color)
        draw = ImageDraw.Draw(img)
        topology = session.topology
        stroke = max(1, self.line_width * s)

        # Edges first so node fills cover their ends
        for edge_id in topology.get_all_edge_ids():
            builder = session.edge_path(edge_id)
            if builder is None:
                continue
            samples = builder.path().sample(self.sample_steps)
            points = [to_px(p.x, p.y) for p in samples]
            draw.line(points, fill=self.edge_color, width=stroke)

        for node_id in topology.get_all_node_ids():
            provider = topology.get_node_geometry_provider(node_id)
            if provider is None:
                continue
            center = provider.get_center()
            radii = provider.get_radii()
            left, top = to_px(center.cx - radii.rx, center.cy - radii.ry)
            right, bottom = to_px(center.cx + radii.rx, center.cy + radii.ry)
            draw.ellipse(
                [left, top, right, bottom],
                fill=self.node_fill,
                outline=self.node_outline,
                width=stroke,
            )

            label = labels.get(node_id)
            if label:
                font = self._get_font()
                box = draw.textbbox((0, 0), label, font=font)
                cx, cy = to_px(center.cx, center.cy)
                draw.text(
                    (cx - (box[2] - box[0]) / 2, cy - (box[3] - box[1]) / 2),
                    label,
                    fill=self.text_color,
                    font=font,
                )

        # Markers last so they sit on top of the node outline
        for edge_id in topology.get_all_edge_ids():
            builder = session.edge_path(edge_id)
            if builder is None:
                continue
            arrow = builder.arrow_placement()
            if arrow is None:
                continue
            tip = to_px(arrow.x, arrow.y)
            draw.polygon(self._arrow_polygon(tip, arrow.angle), fill=self.edge_color)

        img.save(output_path)
        logger.debug("Wrote %dx%d preview to %s", img.width, img.height, output_path)
        return output_path


def render_to_png(
    session: GraphSession,
    output_path: str = "graph.png",
    labels: Optional[Dict[str, str]] = None,
    **kwargs,
) -> str:
    """
    Convenience function to render a session preview.

    Args:
        session: Session to draw.
        output_path: Path to save the PNG file.
        labels: Optional node id -> label text.
        **kwargs: Options passed to PNGPreviewRenderer.

    Returns:
        Path to the saved PNG file
    """
    renderer = PNGPreviewRenderer(**kwargs)
    return renderer.render(session, output_path, labels)
