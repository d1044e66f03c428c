"""
SATI Attestation Protocol Layer

Domain-separated hashing, versioned attestation layouts, blind dual-signature
workflows, deterministic commitment addressing and validity-proof assembly
for compressed attestations.
"""

__version__ = "0.1.0"
