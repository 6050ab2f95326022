import pytest

from cfxsdk.blockchain.types import Address, BigInt, Hash32, MalformedStr, Signature, int_fromhex
from tests.unit.conftest import TO_ADDRESS


class TestBigInt:
    @pytest.mark.parametrize("value, expected", [
        (0, b""),
        (1, b"\x01"),
        (255, b"\xff"),
        (256, b"\x01\x00"),
        (2 ** 256 - 1, b"\xff" * 32),
    ])
    def test_to_bytes_minimal(self, value, expected):
        assert BigInt(value).to_bytes_minimal() == expected

    @pytest.mark.parametrize("value", [256, "256", "0x100", b"\x01\x00"])
    def test_accepts_int_decimal_hex_and_bytes(self, value):
        assert BigInt(value) == 256

    def test_from_bytes_minimal_is_inverse(self):
        assert BigInt.from_bytes_minimal(b"\x01\x00") == 256
        assert BigInt.from_bytes_minimal(b"") == 0

    def test_from_bytes_minimal_rejects_leading_zero(self):
        with pytest.raises(ValueError):
            BigInt.from_bytes_minimal(b"\x00\x01")

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            BigInt(-1)

    def test_bool_raises(self):
        with pytest.raises(TypeError):
            BigInt(True)

    @pytest.mark.parametrize("value", [0.5, 1.0, 1e18])
    def test_float_raises(self, value):
        with pytest.raises(TypeError):
            BigInt(value)

    def test_hex(self):
        assert BigInt(256).hex_0x() == "0x100"
        assert BigInt.fromhex("0x100") == 256


class TestAddress:
    def test_fromhex_and_hex_0x(self):
        address = Address.fromhex_address(TO_ADDRESS)

        assert len(address) == Address.size
        assert address.hex_0x() == TO_ADDRESS

    @pytest.mark.parametrize("value", [
        TO_ADDRESS.upper().replace("0X", "0x"),
        TO_ADDRESS[2:],
        TO_ADDRESS[:-2],
        "hx" + TO_ADDRESS[2:],
    ])
    def test_invalid_text_raises(self, value):
        with pytest.raises(ValueError):
            Address.fromhex_address(value)

    def test_malformed_allowed(self):
        address = Address.fromhex_address("0xzz", allow_malformed=True)

        assert isinstance(address, MalformedStr)
        assert address.hex_0x() == "0xzz"

    def test_wrong_size_bytes_raises(self):
        with pytest.raises(ValueError):
            Address(b"\x01" * 19)


class TestSignature:
    def test_from_vrs(self):
        signature = Signature.from_vrs(1, b"\x01", b"\x02\x03")

        assert len(signature) == Signature.size
        assert signature.recover_id() == 1
        assert signature.r == b"\x01"
        assert signature.s == b"\x02\x03"
        assert len(signature.signature()) == 64


def test_hash32_size():
    with pytest.raises(ValueError):
        Hash32(b"\x00" * 31)


@pytest.mark.parametrize("value, strict, expected", [
    ("0x10", False, 16),
    ("0x10", True, 16),
    ("10", False, MalformedStr(int, "10")),
    ("0xAB", False, MalformedStr(int, "0xAB")),
])
def test_int_fromhex(value, strict, expected):
    assert int_fromhex(value, strict) == expected


def test_int_fromhex_strict_raises():
    with pytest.raises(ValueError):
        int_fromhex("10", strict=True)
