"""
Account packing for compressed-account instructions.

Instructions reference trees and queues by index into a flat
remaining-accounts list:

    [pre accounts..., system accounts..., packed accounts...]

Packed indices are relative to the start of the packed section.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

from ..core.constants import (
    ACCOUNT_COMPRESSION_PROGRAM,
    CPI_AUTHORITY_SEED,
    LIGHT_SYSTEM_PROGRAM,
    NOOP_PROGRAM,
    REGISTERED_PROGRAM_PDA,
    SYSTEM_PROGRAM_ID,
)
from ..core.encoding import AddressLike, b58encode, to_address
from ..addressing.pda import find_program_address


class AccountRole(IntEnum):
    """2-bit account role as decoded by the on-chain program."""
    READ_ONLY = 0
    WRITABLE = 1
    READ_ONLY_SIGNER = 2
    WRITABLE_SIGNER = 3

    @classmethod
    def from_flags(cls, is_signer: bool, is_writable: bool) -> "AccountRole":
        return cls((2 if is_signer else 0) | (1 if is_writable else 0))

    @property
    def is_signer(self) -> bool:
        return bool(self & 2)

    @property
    def is_writable(self) -> bool:
        return bool(self & 1)


@dataclass(frozen=True)
class AccountMeta:
    pubkey: str
    is_signer: bool = False
    is_writable: bool = False

    @property
    def role(self) -> AccountRole:
        return AccountRole.from_flags(self.is_signer, self.is_writable)

    def to_dict(self) -> dict:
        return {"pubkey": self.pubkey, "role": int(self.role)}


@dataclass(frozen=True)
class SystemAccountMetaConfig:
    """
    Light system accounts required by a calling program.

    Fields:
        self_program: Program performing the CPI
        cpi_context: Optional CPI context account
        sol_compression_recipient: Optional SOL decompression recipient
        sol_pool_pda: Optional SOL pool PDA
    """
    self_program: str
    cpi_context: Optional[str] = None
    sol_compression_recipient: Optional[str] = None
    sol_pool_pda: Optional[str] = None


def cpi_signer(program_id: AddressLike) -> str:
    """CPI authority PDA of a program (seed "cpi_authority")."""
    address, _ = find_program_address([CPI_AUTHORITY_SEED], program_id)
    return b58encode(address)


def light_system_account_metas(config: SystemAccountMetaConfig) -> List[AccountMeta]:
    """
    Light Protocol system accounts in the order the system program reads them.
    """
    metas = [
        AccountMeta(LIGHT_SYSTEM_PROGRAM),
        AccountMeta(cpi_signer(config.self_program)),
        AccountMeta(REGISTERED_PROGRAM_PDA),
        AccountMeta(NOOP_PROGRAM),
        AccountMeta(cpi_signer(LIGHT_SYSTEM_PROGRAM)),
        AccountMeta(ACCOUNT_COMPRESSION_PROGRAM),
        AccountMeta(to_address(config.self_program, "self_program")),
    ]
    if config.sol_pool_pda:
        metas.append(AccountMeta(config.sol_pool_pda, is_writable=True))
    if config.sol_compression_recipient:
        metas.append(AccountMeta(config.sol_compression_recipient, is_writable=True))
    metas.append(AccountMeta(SYSTEM_PROGRAM_ID))
    if config.cpi_context:
        metas.append(AccountMeta(config.cpi_context, is_writable=True))
    return metas


class PackedAccounts:
    """
    Builder for the remaining-accounts list.

    Re-inserting a pubkey returns its existing index (first insert wins).
    """

    def __init__(self):
        self.pre_accounts: List[AccountMeta] = []
        self.system_accounts: List[AccountMeta] = []
        self._packed: Dict[str, Tuple[int, AccountMeta]] = {}

    @classmethod
    def with_system_accounts(cls, config: SystemAccountMetaConfig) -> "PackedAccounts":
        packed = cls()
        packed.add_system_accounts(config)
        return packed

    def add_pre_account_signer(self, pubkey: AddressLike) -> None:
        self.pre_accounts.append(AccountMeta(to_address(pubkey), is_signer=True))

    def add_pre_account_signer_mut(self, pubkey: AddressLike) -> None:
        self.pre_accounts.append(AccountMeta(to_address(pubkey), is_signer=True, is_writable=True))

    def add_pre_account_meta(self, meta: AccountMeta) -> None:
        self.pre_accounts.append(meta)

    def add_system_accounts(self, config: SystemAccountMetaConfig) -> None:
        self.system_accounts.extend(light_system_account_metas(config))

    def insert_or_get(self, pubkey: AddressLike) -> int:
        """Insert as writable (trees and queues are written)."""
        return self.insert_or_get_config(pubkey, is_signer=False, is_writable=True)

    def insert_or_get_read_only(self, pubkey: AddressLike) -> int:
        return self.insert_or_get_config(pubkey, is_signer=False, is_writable=False)

    def insert_or_get_config(self, pubkey: AddressLike, is_signer: bool, is_writable: bool) -> int:
        """
        Insert pubkey with explicit flags, or return its existing index.

        Returns:
            Index relative to the packed section
        """
        key = to_address(pubkey)
        if key in self._packed:
            return self._packed[key][0]
        index = len(self._packed)
        self._packed[key] = (index, AccountMeta(key, is_signer, is_writable))
        return index

    def packed_metas(self) -> List[AccountMeta]:
        return [meta for _, meta in sorted(self._packed.values(), key=lambda item: item[0])]

    def to_account_metas(self) -> Tuple[List[AccountMeta], int, int]:
        """
        Flatten to remaining accounts.

        Returns:
            (remaining_accounts, system_start, packed_start)
        """
        system_start = len(self.pre_accounts)
        packed_start = system_start + len(self.system_accounts)
        remaining = [*self.pre_accounts, *self.system_accounts, *self.packed_metas()]
        return remaining, system_start, packed_start
