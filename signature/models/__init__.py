from .pending_signature import PendingSignature
from .sign_source import SignSource
from .signature_artifact import SignatureArtifact
from .signature_enums import PendingState, SignSourceMode, SignatureValidationErrorCode
from .validation_options import SignatureValidationOptions

__all__ = [
    "PendingSignature",
    "PendingState",
    "SignSource",
    "SignSourceMode",
    "SignatureArtifact",
    "SignatureValidationErrorCode",
    "SignatureValidationOptions",
]
