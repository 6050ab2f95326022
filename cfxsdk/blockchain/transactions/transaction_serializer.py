from typing import Union

import rlp
from rlp.exceptions import DecodingError, DeserializationError
from rlp.sedes import big_endian_int

from cfxsdk.blockchain.exception import MalformedEncoding, FieldCountMismatch, IntegerOverflow
from cfxsdk.blockchain.transactions.transaction import (
    UnsignedTransaction, SignedTransaction, INTEGER_FIELD_BITS, SIGNATURE_INTEGER_BITS, VALID_RECOVERY_IDS
)
from cfxsdk.blockchain.types import Address, BigInt, Hash32, int_fromhex
from cfxsdk.crypto.hashing import keccak256

UNSIGNED_FIELDS = ("nonce", "gas_price", "gas", "to", "value", "storage_limit", "epoch_height", "chain_id", "data")
SIGNED_FIELDS = ("unsigned_transaction", "v", "r", "s")

# field name in the node's json representation
_RAW_DATA_KEYS = {
    "nonce": "nonce",
    "gas_price": "gasPrice",
    "gas": "gas",
    "to": "to",
    "value": "value",
    "storage_limit": "storageLimit",
    "epoch_height": "epochHeight",
    "chain_id": "chainId",
    "data": "data",
}


class TransactionSerializer:
    """Canonical RLP codec of transactions.

    unsigned: [nonce, gas_price, gas, to, value, storage_limit, epoch_height, chain_id, data]
    signed:   [unsigned, v, r, s]

    Every integer is its minimal big-endian byte string, `to` is 20 bytes or
    empty for a contract creation.
    """

    def to_unsigned_list(self, tx: UnsignedTransaction) -> list:
        return [
            tx.nonce.to_bytes_minimal(),
            tx.gas_price.to_bytes_minimal(),
            tx.gas.to_bytes_minimal(),
            bytes(tx.to) if tx.to is not None else b"",
            tx.value.to_bytes_minimal(),
            tx.storage_limit.to_bytes_minimal(),
            tx.epoch_height.to_bytes_minimal(),
            tx.chain_id.to_bytes_minimal(),
            tx.data,
        ]

    def to_signed_list(self, tx: SignedTransaction) -> list:
        return [
            self.to_unsigned_list(tx.unsigned_transaction),
            BigInt(tx.v).to_bytes_minimal(),
            tx.r,
            tx.s,
        ]

    def to_unsigned_bytes(self, tx: UnsignedTransaction) -> bytes:
        return rlp.encode(self.to_unsigned_list(tx))

    def to_signed_bytes(self, tx: SignedTransaction) -> bytes:
        return rlp.encode(self.to_signed_list(tx))

    def from_unsigned_bytes(self, data: bytes) -> UnsignedTransaction:
        items = self._decode_list(data)
        return self._unsigned_from_list(items)

    def from_signed_bytes(self, data: bytes) -> SignedTransaction:
        items = self._decode_list(data)
        if len(items) != len(SIGNED_FIELDS):
            raise FieldCountMismatch(len(SIGNED_FIELDS), len(items), "signed transaction")

        unsigned_items, v, r, s = items
        if not isinstance(unsigned_items, (list, tuple)):
            raise MalformedEncoding(f"unsigned transaction must be a list. {unsigned_items!r}")

        unsigned_transaction = self._unsigned_from_list(unsigned_items)

        v = self._decode_integer("v", v, 8)
        if v not in VALID_RECOVERY_IDS:
            raise MalformedEncoding(f"Invalid recovery id({v})")

        return SignedTransaction(
            unsigned_transaction=unsigned_transaction,
            v=int(v),
            r=self._decode_integer("r", r, SIGNATURE_INTEGER_BITS).to_bytes_minimal(),
            s=self._decode_integer("s", s, SIGNATURE_INTEGER_BITS).to_bytes_minimal()
        )

    def get_hash(self, tx: UnsignedTransaction) -> Hash32:
        return Hash32(keccak256(self.to_unsigned_bytes(tx)))

    def get_signed_hash(self, tx: SignedTransaction) -> Hash32:
        return Hash32(keccak256(self.to_signed_bytes(tx)))

    def to_raw_data(self, tx: Union[UnsignedTransaction, SignedTransaction]) -> dict:
        """Json representation used by the node. Integers are 0x-hex strings."""
        if isinstance(tx, SignedTransaction):
            unsigned_transaction = tx.unsigned_transaction
        else:
            unsigned_transaction = tx

        raw_data = {}
        for name in UNSIGNED_FIELDS:
            value = getattr(unsigned_transaction, name)
            if name == "to":
                raw_data[_RAW_DATA_KEYS[name]] = value.hex_0x() if value is not None else None
            elif name == "data":
                raw_data[_RAW_DATA_KEYS[name]] = "0x" + value.hex()
            else:
                raw_data[_RAW_DATA_KEYS[name]] = value.hex_0x()

        if isinstance(tx, SignedTransaction):
            raw_data["v"] = hex(tx.v)
            raw_data["r"] = BigInt(tx.r).hex_0x()
            raw_data["s"] = BigInt(tx.s).hex_0x()
            raw_data["hash"] = tx.hash.hex_0x()
        return raw_data

    def from_raw_data(self, raw_data: dict) -> Union[UnsignedTransaction, SignedTransaction]:
        kwargs = {}
        for name in UNSIGNED_FIELDS:
            value = raw_data.get(_RAW_DATA_KEYS[name])
            if name == "to":
                kwargs[name] = Address.fromhex_address(value.lower()) if value else None
            elif name == "data":
                kwargs[name] = value or b""
            else:
                kwargs[name] = int_fromhex(value, strict=True)
        unsigned_transaction = UnsignedTransaction(**kwargs)

        if raw_data.get("r") is None:
            return unsigned_transaction

        return SignedTransaction(
            unsigned_transaction=unsigned_transaction,
            v=int_fromhex(raw_data["v"], strict=True),
            r=BigInt.fromhex(raw_data["r"]).to_bytes_minimal(),
            s=BigInt.fromhex(raw_data["s"]).to_bytes_minimal()
        )

    def _unsigned_from_list(self, items: list) -> UnsignedTransaction:
        if len(items) != len(UNSIGNED_FIELDS):
            raise FieldCountMismatch(len(UNSIGNED_FIELDS), len(items), "unsigned transaction")

        decoded = dict(zip(UNSIGNED_FIELDS, items))
        kwargs = {}
        for name, bits in INTEGER_FIELD_BITS.items():
            kwargs[name] = self._decode_integer(name, decoded[name], bits)

        to = self._decode_bytes("to", decoded["to"])
        if len(to) not in (0, Address.size):
            raise MalformedEncoding(f"to must be empty or {Address.size} bytes. {to.hex()}")
        kwargs["to"] = Address(to) if to else None
        kwargs["data"] = self._decode_bytes("data", decoded["data"])

        return UnsignedTransaction(**kwargs)

    @staticmethod
    def _decode_list(data: bytes) -> list:
        data = bytes(data)
        if not data:
            raise MalformedEncoding("empty data")

        try:
            items = rlp.decode(data, strict=True)
        except DecodingError as e:
            raise MalformedEncoding(f"decode data {{{data.hex()}}} to rlp error: {e}") from e

        if not isinstance(items, (list, tuple)):
            raise MalformedEncoding(f"transaction must be a list. {{{data.hex()}}}")
        return list(items)

    @staticmethod
    def _decode_bytes(name: str, item) -> bytes:
        if not isinstance(item, bytes):
            raise MalformedEncoding(f"{name} must be a byte string. {item!r}")
        return item

    @classmethod
    def _decode_integer(cls, name: str, item, bits: int) -> BigInt:
        item = cls._decode_bytes(name, item)
        try:
            value = BigInt(big_endian_int.deserialize(item))
        except DeserializationError as e:
            raise MalformedEncoding(f"{name}({item.hex()}) is not a canonical integer: {e}") from e

        if value.bit_length() > bits:
            raise IntegerOverflow(name, bits, f"{name}({item.hex()}) overflows")
        return value


_serializer = TransactionSerializer()


def encode_unsigned(tx: UnsignedTransaction) -> bytes:
    return _serializer.to_unsigned_bytes(tx)


def decode_unsigned(data: bytes) -> UnsignedTransaction:
    return _serializer.from_unsigned_bytes(data)


def encode_signed(tx: SignedTransaction) -> bytes:
    return _serializer.to_signed_bytes(tx)


def decode_signed(data: bytes) -> SignedTransaction:
    return _serializer.from_signed_bytes(data)
