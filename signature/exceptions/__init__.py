from .errors import SignatureError, SignatureValidationError

__all__ = ["SignatureError", "SignatureValidationError"]
