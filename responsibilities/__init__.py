"""
Responsibilities feature.

Resolves which canonical role (ELABORA / REVISA / APRUEBA / ENTERADO) each
selected signatory holds on a document, learns the backend's numeric
responsibility codes along the way and builds the grouped payload the
backend expects.
"""
