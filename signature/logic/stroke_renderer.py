# signature/logic/stroke_renderer.py
from __future__ import annotations

import io
from typing import Iterable, Sequence, Tuple

from PIL import Image, ImageDraw

Point = Tuple[int, int]


def render_png_from_strokes(strokes: Iterable[Sequence[Point]], size: Tuple[int, int],
                            stroke_width: int = 3,
                            color: Tuple[int, int, int] = (0, 0, 0)) -> bytes:
    """
    Convert freehand strokes (canvas coordinates) into a transparent PNG.

    Single-point strokes (taps) become dots of ``stroke_width`` diameter.
    The result is what the pipeline receives for a drawn signature.
    """
    w, h = size
    img = Image.new("RGBA", (w, h), (0, 0, 0, 0))
    drw = ImageDraw.Draw(img)
    fill = (*color, 255)
    radius = max(1, stroke_width) / 2.0
    for poly in strokes:
        points = [(int(x), int(y)) for x, y in poly]
        if len(points) >= 2:
            drw.line(points, fill=fill, width=max(1, stroke_width), joint="curve")
        elif len(points) == 1:
            x, y = points[0]
            drw.ellipse((x - radius, y - radius, x + radius, y + radius), fill=fill)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
