from .responsables import ResponsablePayload, ResponsablesPayload
from .selection import Selection, Signatory

__all__ = ["ResponsablePayload", "ResponsablesPayload", "Selection", "Signatory"]
