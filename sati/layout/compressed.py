"""
Compressed attestation account data.

Borsh layout (after the 8-byte discriminator, which the indexer returns
separately):
- sas_schema: 32 bytes
- token_account: 32 bytes
- data_type: u8
- data: u32 LE length + bytes (universal layout record)
- num_signatures: u8
- signature1: 64 bytes
- signature2: 64 bytes (zeroed for single-signer modes)
"""

import struct
from dataclasses import dataclass
from typing import Optional

from ..core.encoding import b58encode, require_length
from ..core.errors import ValidationError
from .codec import deserialize
from .model import AttestationPayload, DataType, SignatureMode

_HEADER_SIZE = 32 + 32 + 1 + 4
_SIGNATURE_SIZE = 64


@dataclass(frozen=True)
class CompressedAttestation:
    sas_schema: bytes
    token_account: bytes
    data_type: DataType
    data: bytes
    num_signatures: int
    signature1: bytes
    signature2: bytes

    def to_bytes(self) -> bytes:
        """Borsh-serialize (without discriminator)."""
        return b"".join([
            require_length(self.sas_schema, 32, "sas_schema"),
            require_length(self.token_account, 32, "token_account"),
            bytes([int(self.data_type)]),
            struct.pack("<I", len(self.data)),
            bytes(self.data),
            bytes([self.num_signatures]),
            require_length(self.signature1, _SIGNATURE_SIZE, "signature1"),
            require_length(self.signature2, _SIGNATURE_SIZE, "signature2"),
        ])

    def decode_payload(self, signature_mode: Optional[SignatureMode] = None) -> AttestationPayload:
        """Decode the inner universal-layout record."""
        return deserialize(self.data, self.data_type, signature_mode)

    def to_dict(self) -> dict:
        return {
            "sas_schema": b58encode(self.sas_schema),
            "token_account": b58encode(self.token_account),
            "data_type": DataType(self.data_type).name,
            "data_len": len(self.data),
            "num_signatures": self.num_signatures,
        }


def parse_compressed_attestation(data: bytes) -> CompressedAttestation:
    """
    Parse Borsh-encoded compressed attestation data.

    Raises:
        ValidationError: If the buffer is truncated or the data type is unknown
    """
    data = bytes(data)
    if len(data) < _HEADER_SIZE:
        raise ValidationError(f"Compressed attestation too small: {len(data)} bytes", "min_size")

    (data_len,) = struct.unpack_from("<I", data, 65)
    data_end = _HEADER_SIZE + data_len
    if len(data) < data_end + 1 + _SIGNATURE_SIZE:
        raise ValidationError(
            f"Compressed attestation truncated: {len(data)} bytes, data_len {data_len}", "data_len"
        )

    try:
        data_type = DataType(data[64])
    except ValueError as e:
        raise ValidationError(f"Unknown data type: {data[64]}", "data_type") from e

    num_signatures = data[data_end]
    signature1 = data[data_end + 1:data_end + 1 + _SIGNATURE_SIZE]
    signature2 = data[data_end + 1 + _SIGNATURE_SIZE:data_end + 1 + 2 * _SIGNATURE_SIZE]
    if num_signatures < 2 or len(signature2) != _SIGNATURE_SIZE:
        signature2 = bytes(_SIGNATURE_SIZE)

    return CompressedAttestation(
        sas_schema=data[0:32],
        token_account=data[32:64],
        data_type=data_type,
        data=data[_HEADER_SIZE:data_end],
        num_signatures=num_signatures,
        signature1=signature1,
        signature2=signature2,
    )
