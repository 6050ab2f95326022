from typing import Union


class Bytes(bytes):
    size = None
    prefix = None

    def __new__(cls, *args, **kwargs):
        self = super().__new__(cls, *args, **kwargs)
        if cls.size is not None and cls.size != len(self):
            raise ValueError(f"Invalid size. {cls.__qualname__}, expected {cls.size} but got {len(self)}")

        return self

    def __repr__(self):
        type_name = type(self).__qualname__
        return type_name + "(" + super().__repr__() + ")"

    def __str__(self):
        type_name = type(self).__qualname__
        return type_name + "(" + self.hex_xx() + ")"

    def hex_xx(self):
        if self.prefix:
            return self.prefix + self.hex()
        return self.hex()

    @classmethod
    def fromhex(cls, value: str, ignore_prefix=False, allow_malformed=False):
        try:
            if cls.prefix and not ignore_prefix:
                prefix, contents = value[:len(cls.prefix)], value[len(cls.prefix):]
                if prefix != cls.prefix:
                    raise ValueError(f"Invalid prefix. {cls.__qualname__}, {value}")
            else:
                contents = value

            if cls.size is not None and len(contents) != cls.size * 2:
                raise ValueError(f"Invalid size. {cls.__qualname__}, {value}")
            if contents.lower() != contents:
                raise ValueError(f"All elements of value must be lower cases. {cls.__qualname__}, {value}")

            return cls(bytes.fromhex(contents))
        except (ValueError, TypeError):
            if not allow_malformed:
                raise

        return MalformedStr(cls, value)


class VarBytes(Bytes):
    prefix = '0x'

    def hex_0x(self):
        return self.prefix + self.hex()


class Hash32(VarBytes):
    size = 32


class Address(VarBytes):
    size = 20

    @classmethod
    def fromhex_address(cls, value: str, allow_malformed=False):
        return cls.fromhex(value, allow_malformed=allow_malformed)


class BigInt(int):
    """Unsigned arbitrary-precision integer.

    Encodes to the minimal big-endian byte string: 0 is b"", 256 is b"\\x01\\x00".
    """

    def __new__(cls, value: Union[int, str, bytes] = 0):
        if isinstance(value, (bool, float)):
            raise TypeError(f"{cls.__qualname__} does not accept {type(value).__name__}. {value}")
        if isinstance(value, (bytes, bytearray)):
            value = int.from_bytes(value, 'big')
        elif isinstance(value, str):
            value = int(value, 16) if value.lower().startswith("0x") else int(value, 10)

        self = super().__new__(cls, value)
        if self < 0:
            raise ValueError(f"{cls.__qualname__} must not be negative. {value}")
        return self

    def __repr__(self):
        return f"{type(self).__qualname__}({int(self)})"

    def to_bytes_minimal(self) -> bytes:
        if self == 0:
            return b""
        return int(self).to_bytes((self.bit_length() + 7) // 8, 'big')

    @classmethod
    def from_bytes_minimal(cls, data: bytes) -> 'BigInt':
        if data[:1] == b"\x00":
            raise ValueError(f"Leading zero byte is not allowed. {data.hex()}")
        return cls(int.from_bytes(data, 'big'))

    def hex_0x(self):
        return hex(self)

    @classmethod
    def fromhex(cls, value: str):
        return cls(int_fromhex(value, strict=True))


class Signature(Bytes):
    """Recoverable signature laid out as R(32) || S(32) || V(1)."""
    size = 65

    def signature(self):
        return self[:-1]

    def recover_id(self):
        return self[-1]

    @property
    def r(self) -> bytes:
        return BigInt(self[:32]).to_bytes_minimal()

    @property
    def s(self) -> bytes:
        return BigInt(self[32:64]).to_bytes_minimal()

    @classmethod
    def from_vrs(cls, v: int, r: bytes, s: bytes):
        if len(r) > 32 or len(s) > 32:
            raise ValueError(f"R and S must fit in 32 bytes. r({len(r)}), s({len(s)})")
        return cls(r.rjust(32, b"\x00") + s.rjust(32, b"\x00") + bytes([v]))


class MalformedStr:
    def __init__(self, origin_type, value):
        self.origin_type = origin_type
        self.value = value

    def hex(self):
        return self.value

    def hex_xx(self):
        return self.value

    def hex_0x(self):
        return self.value

    def str(self):
        return self.value

    def __eq__(self, other):
        if type(self) is not type(other):
            return False

        return self.origin_type == other.origin_type and self.value == other.value

    def __hash__(self):
        return hash(self.origin_type) ^ hash(self.value)

    def __repr__(self):
        type_name = type(self).__qualname__
        origin_type_name = self.origin_type.__qualname__
        return type_name + f"({origin_type_name}, {repr(self.value)})"

    def __str__(self):
        type_name = type(self).__qualname__
        origin_type_name = self.origin_type.__qualname__
        return type_name + f"({origin_type_name}, {self.value})"


def int_fromhex(value: str, strict=False):
    if not isinstance(value, str):
        raise ValueError(f"This is not string. {value}")

    try:
        if not value.startswith("0x"):
            raise ValueError(f"Hex string must start with 0x. {value}")
        if value != value.lower():
            raise ValueError(f"All elements of value must be lower cases. {value}")
        return int(value, 16)
    except ValueError:
        if strict:
            raise
        return MalformedStr(int, value)

