"""
Program-derived addresses.

address = sha256(seeds... || bump || program_id || "ProgramDerivedAddress"),
searching bump 255 down to 0 for the first result that is NOT a valid
Ed25519 point (so no private key can exist for it).
"""

import hashlib
from typing import Sequence, Tuple

from ..core.encoding import AddressLike, to_address_bytes
from ..core.errors import AddressDerivationError, InvalidLengthError

MAX_SEEDS = 16
MAX_SEED_LENGTH = 32
PDA_MARKER = b"ProgramDerivedAddress"

# Ed25519 (edwards25519) field prime and curve constant
_P = 2 ** 255 - 19
_D = (-121665 * pow(121666, _P - 2, _P)) % _P


def is_on_curve(point: bytes) -> bool:
    """
    Check whether 32 bytes decompress to an Ed25519 curve point.

    Decompression recovers x from y via x^2 = (y^2 - 1) / (d*y^2 + 1);
    the point exists iff the right side is a square mod p.
    """
    if len(point) != 32:
        return False
    y = (int.from_bytes(point, "little") & ((1 << 255) - 1)) % _P
    yy = y * y % _P
    u = (yy - 1) % _P
    v = (_D * yy + 1) % _P
    if u == 0:
        return True
    x2 = u * pow(v, _P - 2, _P) % _P
    return pow(x2, (_P - 1) // 2, _P) == 1


def create_program_address(seeds: Sequence[bytes], program_id: AddressLike) -> bytes:
    """
    Derive an address from seeds that already include the bump.

    Raises:
        InvalidLengthError: If seed count or a seed length exceeds limits
        AddressDerivationError: If the result lies on the curve
    """
    if len(seeds) > MAX_SEEDS:
        raise InvalidLengthError(f"Too many seeds: {len(seeds)} (max {MAX_SEEDS})", "seeds")
    h = hashlib.sha256()
    for seed in seeds:
        if len(seed) > MAX_SEED_LENGTH:
            raise InvalidLengthError(
                f"Seed too long: {len(seed)} bytes (max {MAX_SEED_LENGTH})", "seeds"
            )
        h.update(bytes(seed))
    h.update(to_address_bytes(program_id, "program_id"))
    h.update(PDA_MARKER)
    address = h.digest()
    if is_on_curve(address):
        raise AddressDerivationError("Invalid seeds: address must fall off the curve")
    return address


def find_program_address(seeds: Sequence[bytes], program_id: AddressLike) -> Tuple[bytes, int]:
    """
    Find the canonical (highest-bump) program-derived address.

    Returns:
        (address, bump)

    Raises:
        AddressDerivationError: If no bump yields an off-curve address
    """
    for bump in range(255, -1, -1):
        try:
            return create_program_address([*seeds, bytes([bump])], program_id), bump
        except AddressDerivationError:
            continue
    raise AddressDerivationError("Unable to find a viable program address bump seed")
