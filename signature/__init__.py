"""
Signature module.

Validates and sanitizes signature images (drawn or uploaded), keeps each
user's stored signature encrypted at rest and gates the pending -> signed
transition of document signing responsibilities.
"""
