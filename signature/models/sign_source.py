# signature/models/sign_source.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .signature_enums import SignSourceMode

Stroke = List[Tuple[int, int]]


@dataclass(frozen=True)
class SignSource:
    """
    Signature input chosen in the sign dialog.

    - STORED: reuse the user's stored signature
    - DRAW:   freehand strokes on a canvas of ``canvas_size``
    - UPLOAD: raw file bytes with their declared MIME type
    """
    mode: SignSourceMode
    strokes: List[Stroke] = field(default_factory=list)
    canvas_size: Tuple[int, int] = (600, 200)
    stroke_width: int = 3
    data: Optional[bytes] = None
    mime_type: Optional[str] = None

    @classmethod
    def stored(cls) -> "SignSource":
        return cls(mode=SignSourceMode.STORED)

    @classmethod
    def draw(cls, strokes: List[Stroke], canvas_size: Tuple[int, int] = (600, 200),
             stroke_width: int = 3) -> "SignSource":
        return cls(mode=SignSourceMode.DRAW, strokes=list(strokes),
                   canvas_size=canvas_size, stroke_width=stroke_width)

    @classmethod
    def upload(cls, data: bytes, mime_type: str) -> "SignSource":
        return cls(mode=SignSourceMode.UPLOAD, data=data, mime_type=mime_type)
