from .signature_validator import validate_and_sanitize_signature

__all__ = ["validate_and_sanitize_signature"]
