"""
SATI CLI - Attestation protocol tooling

Commands:
- sati hash interaction/nonce/reputation/evm-link/data - Digests
- sati layout encode/decode/message - Record encoding
- sati address derive/reputation - Address derivation
- sati proof create/health - Validity proofs
"""

__version__ = "0.1.0"
