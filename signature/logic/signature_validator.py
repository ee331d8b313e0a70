# signature/logic/signature_validator.py
"""
Signature validation & sanitization pipeline.

Every step is a hard gate; the first failing one raises
:class:`SignatureValidationError` with its own code:

    1. type       declared MIME must be PNG or JPEG        invalid-type
    2. size       byte length <= max_bytes                 file-too-large
    3. decode     oriented size, first frame, RGBA         invalid-type / invalid-dimensions
    4. trim       crop to the ink bounding box             empty-image
    5. aspect     min_aspect <= w / h <= max_aspect        invalid-aspect
    6. resize     fit into max_width x max_height (down only)
    7. ink ratio  min_ink <= sampled ink ratio <= max_ink  invalid-ink
    8. encode     PNG, alpha preserved

No partial result is ever returned. Same bytes + same options always give
the same artifact.
"""
from __future__ import annotations

import io
import logging
import math
from typing import Any, Optional, Tuple, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..exceptions.errors import SignatureValidationError
from ..models.signature_artifact import SignatureArtifact
from ..models.signature_enums import SignatureValidationErrorCode as Code
from ..models.validation_options import SignatureValidationOptions
from .ink_metrics import ink_bounds, ink_ratio

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "image/png": "PNG",
    "image/jpeg": "JPEG",
    "image/jpg": "JPEG",
}
DECODABLE_FORMATS = {"PNG", "JPEG"}

BytesLike = Union[bytes, bytearray, memoryview]


def _normalize_mime(mime_type: Optional[str]) -> str:
    return (mime_type or "").split(";", 1)[0].strip().lower()


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _decode(data: bytes, opts: SignatureValidationOptions) -> Image.Image:
    """Load the first frame as RGBA at its natural (EXIF-oriented) size."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.format not in DECODABLE_FORMATS:
                raise SignatureValidationError(Code.INVALID_TYPE)
            width, height = img.size
            if width <= 0 or height <= 0:
                raise SignatureValidationError(Code.INVALID_DIMENSIONS)
            if width * height > opts.max_pixels:
                raise SignatureValidationError(
                    Code.INVALID_DIMENSIONS,
                    f"Imagen demasiado grande ({width}×{height} px).",
                )
            img.seek(0)
            return ImageOps.exif_transpose(img).convert("RGBA")
    except Image.DecompressionBombError as exc:
        raise SignatureValidationError(Code.INVALID_DIMENSIONS) from exc
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        raise SignatureValidationError(
            Code.INVALID_TYPE, "No se pudo leer la imagen (solo PNG/JPG)."
        ) from exc


def trim_to_ink(image: Image.Image) -> Image.Image:
    """Crop to the tight bounding box of ink pixels; ``empty-image`` if there are none."""
    bounds = ink_bounds(np.asarray(image, dtype=np.uint8))
    if bounds is None:
        raise SignatureValidationError(Code.EMPTY_IMAGE)
    left, top, right, bottom = bounds
    if right <= left or bottom <= top:
        raise SignatureValidationError(Code.EMPTY_IMAGE)
    return image.crop(bounds)


def fit_size(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """Target size after a uniform downscale into ``max_width x max_height`` (never up)."""
    scale = min(1.0, max_width / width, max_height / height)
    if scale >= 1.0:
        return width, height
    return max(1, _round_half_up(width * scale)), max(1, _round_half_up(height * scale))


def validate_and_sanitize_signature(
    data: BytesLike,
    mime_type: Optional[str],
    options: Optional[SignatureValidationOptions] = None,
    **overrides: Any,
) -> SignatureArtifact:
    """
    Validate a drawn or uploaded signature image and return the sanitized artifact.

    Args:
        data: raw image bytes (owned by the caller, not retained)
        mime_type: declared MIME type of ``data``
        options: limits; defaults to ``SignatureValidationOptions()``
        **overrides: individual option overrides (e.g. ``max_bytes=...``)

    Raises:
        SignatureValidationError: with ``code`` set to the failing gate
    """
    opts = (options or SignatureValidationOptions()).with_overrides(**overrides)
    raw = bytes(data)

    try:
        # 1. type
        mime = _normalize_mime(mime_type)
        if mime not in ALLOWED_MIME_TYPES:
            raise SignatureValidationError(Code.INVALID_TYPE)

        # 2. size
        if len(raw) > opts.max_bytes:
            raise SignatureValidationError(
                Code.FILE_TOO_LARGE,
                f"Archivo demasiado grande (máximo {opts.max_bytes / (1024 * 1024):g} MB).",
            )

        # 3. decode
        image = _decode(raw, opts)

        # 4. trim
        trimmed = trim_to_ink(image)
        width, height = trimmed.size

        # 5. aspect
        aspect = width / height
        if aspect < opts.min_aspect or aspect > opts.max_aspect:
            raise SignatureValidationError(
                Code.INVALID_ASPECT,
                f"Relación de aspecto no válida (entre {opts.min_aspect:g}:1 y {opts.max_aspect:g}:1).",
            )

        # 6. resize
        target = fit_size(width, height, opts.max_width, opts.max_height)
        final = trimmed if target == (width, height) else trimmed.resize(target, Image.Resampling.LANCZOS)

        # 7. ink ratio
        ratio, samples = ink_ratio(np.asarray(final, dtype=np.uint8))
        if samples == 0:
            raise SignatureValidationError(Code.EMPTY_IMAGE)
        if ratio < opts.min_ink or ratio > opts.max_ink:
            raise SignatureValidationError(Code.INVALID_INK)

        # 8. encode
        buf = io.BytesIO()
        final.save(buf, format="PNG")
    except SignatureValidationError as exc:
        logger.warning(f"Signature rejected ({exc.code.value}): {exc}")
        raise

    fw, fh = final.size
    artifact = SignatureArtifact(
        image_bytes=buf.getvalue(),
        width=fw,
        height=fh,
        aspect_ratio=fw / fh,
        ink_ratio=ratio,
    )
    logger.info(
        f"Signature accepted: {fw}x{fh}px, aspect={artifact.aspect_ratio:.2f}, ink={ratio:.4f}"
    )
    return artifact
