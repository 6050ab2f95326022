import os

import pytest
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from cfxsdk.blockchain.exception import KeyUnavailable, SigningBackendError
from cfxsdk.crypto.hashing import keccak256
from cfxsdk.crypto.signature import Signer, SignVerifier, sign_transaction, recover_address
from tests.unit.conftest import PRIKEY

PASSWORD = "password"


@pytest.fixture
def key_file_factory(tmp_path):
    def _key_file_factory(extension: str, password: str = PASSWORD):
        private_key = ec.generate_private_key(ec.SECP256K1(), default_backend())
        encoding = serialization.Encoding.DER if extension == ".der" else serialization.Encoding.PEM
        key_bytes = private_key.private_bytes(
            encoding=encoding,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.BestAvailableEncryption(password.encode())
        )
        key_path = tmp_path / f"key{extension}"
        key_path.write_bytes(key_bytes)

        prikey = private_key.private_numbers().private_value.to_bytes(32, "big")
        return str(key_path), prikey

    return _key_file_factory


class TestSigner:
    def test_address_is_user_address(self, signer):
        assert signer.address.startswith("0x1")
        assert len(signer.address) == 42

    def test_address_is_stable(self):
        assert Signer.from_prikey(PRIKEY).address == Signer.from_prikey(PRIKEY).address

    def test_new_signers_differ(self):
        assert Signer.new().address != Signer.new().address

    def test_signature_is_deterministic(self, signer, unsigned_tx):
        assert signer.sign_transaction(unsigned_tx) == signer.sign_transaction(unsigned_tx)

    def test_signature_recovers_signer(self, signer, unsigned_tx):
        signed_tx = signer.sign_transaction(unsigned_tx)

        assert signed_tx.v in (0, 1)
        assert recover_address(unsigned_tx.hash, signed_tx.signature).hex_0x() == signer.address

    def test_sign_data_is_sign_hash_of_keccak(self, signer):
        data = os.urandom(100)

        assert signer.sign_data(data) == signer.sign_hash(keccak256(data))

    def test_sign_hash_accepts_hex(self, signer):
        tx_hash = keccak256(b"data")

        assert signer.sign_hash("0x" + tx_hash.hex()) == signer.sign_hash(tx_hash)

    def test_sign_hash_with_wrong_size_raises(self, signer):
        with pytest.raises(ValueError):
            signer.sign_hash(b"\x01" * 31)

    @pytest.mark.parametrize("prikey", [bytes(32), b"\xff" * 32])
    def test_invalid_prikey_raises(self, prikey):
        with pytest.raises(SigningBackendError):
            Signer.from_prikey(prikey)

    def test_signer_without_key_raises(self, unsigned_tx):
        with pytest.raises(KeyUnavailable):
            Signer().sign_transaction(unsigned_tx)


class TestSignTransaction:
    def test_with_signer(self, signer, unsigned_tx):
        assert sign_transaction(unsigned_tx, signer) == signer.sign_transaction(unsigned_tx)

    def test_with_raw_key(self, signer, unsigned_tx):
        assert sign_transaction(unsigned_tx, PRIKEY) == signer.sign_transaction(unsigned_tx)

    def test_without_key_raises(self, unsigned_tx):
        with pytest.raises(KeyUnavailable):
            sign_transaction(unsigned_tx, None)


class TestKeyFile:
    @pytest.mark.parametrize("extension", [".der", ".pem"])
    def test_load(self, key_file_factory, extension):
        key_path, prikey = key_file_factory(extension)

        signer = Signer.from_prikey_file(key_path, PASSWORD)

        assert signer.address == Signer.from_prikey(prikey).address

    def test_wrong_password_raises(self, key_file_factory):
        key_path, _ = key_file_factory(".pem")

        with pytest.raises(KeyUnavailable):
            Signer.from_prikey_file(key_path, "wrong")

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(KeyUnavailable):
            Signer.from_prikey_file(str(tmp_path / "nothing.pem"), PASSWORD)

    def test_unsupported_extension_raises(self, tmp_path):
        key_path = tmp_path / "key.json"
        key_path.write_text("{}")

        with pytest.raises(KeyUnavailable):
            Signer.from_prikey_file(str(key_path), PASSWORD)


class TestSignVerifier:
    def test_verify_data(self, signer):
        signature = signer.sign_data(b"TEST")
        verifier = SignVerifier.from_address(signer.address)

        assert verifier.verify_data(b"TEST", signature).result

    def test_verify_other_data_fails(self, signer):
        signature = signer.sign_data(b"TEST")
        verifier = SignVerifier.from_address(signer.address)

        assert not verifier.verify_data(b"OTHER", signature).result

    def test_from_pubkey(self, signer):
        pubkey = signer.private_key.public_key.format(compressed=False)

        assert SignVerifier.from_pubkey(pubkey).address.hex_0x() == signer.address
