"""
Exception types for the attestation protocol layer.
"""

from typing import Optional


class SatiError(Exception):
    """Base class for all attestation protocol errors."""
    pass


class ValidationError(SatiError):
    """
    Raised when local input validation fails.

    Always detected before any network or cryptographic operation.
    `invariant` names the violated rule (e.g. "layout_version").
    """

    def __init__(self, message: str, invariant: Optional[str] = None):
        super().__init__(message)
        self.invariant = invariant


class InvalidLengthError(ValidationError):
    """Raised when a fixed-width input has the wrong length."""

    def __init__(self, message: str, invariant: str = "length"):
        super().__init__(message, invariant)


class ContentTooLargeError(ValidationError):
    """Raised when content exceeds the active size cap."""

    def __init__(self, message: str, invariant: str = "content_size"):
        super().__init__(message, invariant)


class SignatureVerificationError(SatiError):
    """Raised when a signature bundle fails verification (carries per-role result)."""

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class SelfAttestationError(SatiError):
    """Raised when subject and counterparty identities coincide."""
    pass


class StaleProofError(SatiError):
    """Raised when a fetched proof references a root that is no longer current."""
    pass


class RpcError(SatiError):
    """Raised when the compression RPC transport or JSON-RPC call fails."""

    def __init__(self, method: str, message: str, code: Optional[int] = None):
        super().__init__(f"{method}: {message}")
        self.method = method
        self.code = code


class ProofAssemblyError(SatiError):
    """Raised when a prover response cannot be converted to instruction form."""
    pass


class AddressDerivationError(SatiError):
    """Raised when no valid bump seed produces an address."""
    pass


class EncryptionError(SatiError):
    """Raised when encrypted content cannot be decrypted (wrong key or tampered data)."""
    pass
