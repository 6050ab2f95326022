from dataclasses import dataclass, fields
from typing import Optional, Union

from cfxsdk.blockchain.types import Address, BigInt, Hash32, Signature

VALID_RECOVERY_IDS = (0, 1)

# bit width of each integer field, in wire order
INTEGER_FIELD_BITS = {
    "nonce": 256,
    "gas_price": 256,
    "gas": 256,
    "value": 256,
    "storage_limit": 64,
    "epoch_height": 64,
    "chain_id": 32,
}
SIGNATURE_INTEGER_BITS = 256

# fields a node can fill when a caller omits them
DEFAULTABLE_FIELDS = ("nonce", "gas_price", "gas", "storage_limit", "epoch_height", "chain_id")


def _to_address(value) -> Optional[Address]:
    if value is None or isinstance(value, Address):
        return value
    if isinstance(value, str):
        return Address.fromhex_address(value)
    if len(value) == 0:
        return None
    return Address(value)


def _to_data(value: Union[bytes, bytearray, str, None]) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        contents = value[2:] if value.startswith("0x") else value
        return bytes.fromhex(contents)
    return bytes(value)


class _TransactionBase:
    def __str__(self):
        fields_str = ', '.join(f"{f.name}={getattr(self, f.name)}" for f in fields(self))
        return f"{self.__class__.__qualname__}({fields_str})"


@dataclass(frozen=True)
class UnsignedTransaction(_TransactionBase):
    """Transaction fields before a signature is attached.

    The field order is the wire order and must not be changed.
    `to` is None for a contract creation.
    """
    nonce: BigInt
    gas_price: BigInt
    gas: BigInt
    to: Optional[Address]
    value: BigInt
    storage_limit: BigInt
    epoch_height: BigInt
    chain_id: BigInt
    data: bytes = b""

    def __post_init__(self):
        for name, bits in INTEGER_FIELD_BITS.items():
            value = BigInt(getattr(self, name))
            if value.bit_length() > bits:
                raise ValueError(f"{name} exceeds {bits} bits. {value}")
            object.__setattr__(self, name, value)

        object.__setattr__(self, "to", _to_address(self.to))
        object.__setattr__(self, "data", _to_data(self.data))

    @property
    def hash(self) -> Hash32:
        """Hash which is signed."""
        from cfxsdk.blockchain.transactions import TransactionSerializer
        return TransactionSerializer().get_hash(self)

    def is_contract_creation(self):
        return self.to is None


@dataclass(frozen=True)
class SignedTransaction(_TransactionBase):
    unsigned_transaction: UnsignedTransaction
    v: int
    r: bytes
    s: bytes

    def __post_init__(self):
        if self.v not in VALID_RECOVERY_IDS:
            raise ValueError(f"Invalid recovery id({self.v})")

        # Big-endian integer form. Dropping leading zeros keeps the same integer.
        r = bytes(self.r).lstrip(b"\x00")
        s = bytes(self.s).lstrip(b"\x00")
        if len(r) > 32 or len(s) > 32:
            raise ValueError(f"R and S must fit in 32 bytes. r({len(r)}), s({len(s)})")
        object.__setattr__(self, "r", r)
        object.__setattr__(self, "s", s)

    @property
    def hash(self) -> Hash32:
        """Hash of the signed encoding, which the node reports."""
        from cfxsdk.blockchain.transactions import TransactionSerializer
        return TransactionSerializer().get_signed_hash(self)

    @property
    def signature(self) -> Signature:
        return Signature.from_vrs(self.v, self.r, self.s)

    @classmethod
    def from_signature(cls, unsigned_transaction: UnsignedTransaction, signature: Signature):
        return cls(unsigned_transaction=unsigned_transaction,
                   v=signature.recover_id(),
                   r=signature.r,
                   s=signature.s)

    def is_signed(self):
        return bool(self.r) and bool(self.s)
