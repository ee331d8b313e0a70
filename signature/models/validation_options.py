# signature/models/validation_options.py
from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Optional


@dataclass(frozen=True)
class SignatureValidationOptions:
    """
    Limits applied by the signature validation pipeline.

    Defaults match the ``[Signature]`` section of the embedded config;
    ``max_pixels`` bounds the full-resolution scan before decoding.
    """
    max_bytes: int = 2 * 1024 * 1024
    max_width: int = 800
    max_height: int = 400
    min_aspect: float = 2.0
    max_aspect: float = 8.0
    min_ink: float = 0.003
    max_ink: float = 0.2
    max_pixels: int = 16_000_000

    def with_overrides(self, **overrides: Any) -> "SignatureValidationOptions":
        """Copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown signature validation option(s): {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @classmethod
    def from_config(cls, service: Optional[Any] = None) -> "SignatureValidationOptions":
        if service is None:
            from core.config.config_service import config_service as service
        section = service.signature
        return cls(
            max_bytes=section.max_bytes,
            max_width=section.max_width,
            max_height=section.max_height,
            min_aspect=section.min_aspect,
            max_aspect=section.max_aspect,
            min_ink=section.min_ink,
            max_ink=section.max_ink,
            max_pixels=section.max_pixels,
        )
