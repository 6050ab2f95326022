# Copyright 2018 ICON Foundation
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
""" A class for signature signer of transactions"""

import binascii
import logging
import os
from abc import ABCMeta, abstractmethod
from typing import Union

from asn1crypto import keys
from coincurve import PrivateKey
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives import serialization

from cfxsdk import configure as conf
from cfxsdk import utils
from cfxsdk.blockchain.exception import KeyUnavailable, SigningBackendError
from cfxsdk.blockchain.transactions.transaction import UnsignedTransaction, SignedTransaction
from cfxsdk.blockchain.transactions.transaction_serializer import TransactionSerializer
from cfxsdk.blockchain.types import Signature
from cfxsdk.crypto.hashing import keccak256, HASH_SIZE


class SignerBase(metaclass=ABCMeta):
    private_key: PrivateKey = None
    address: str = None

    def sign_data(self, data: bytes) -> Signature:
        return self.sign(data, False)

    def sign_hash(self, data: Union[bytes, str]) -> Signature:
        return self.sign(data, True)

    def sign_transaction(self, tx: UnsignedTransaction) -> SignedTransaction:
        """Sign the keccak256 digest of the canonical unsigned encoding."""
        tx_hash = TransactionSerializer().get_hash(tx)
        signature = self.sign_hash(tx_hash)
        signed_tx = SignedTransaction.from_signature(tx, signature)
        utils.logger.spam(f"signed transaction({tx_hash.hex_0x()}) by {self.address}")
        return signed_tx

    @classmethod
    def address_from_prikey(cls, prikey: bytes) -> str:
        pubkey = PrivateKey(prikey).public_key.format(compressed=False)
        return utils.address_from_pubkey(pubkey)

    @abstractmethod
    def sign(self, data, is_hash: bool) -> Signature:
        raise NotImplementedError


class RecoverableSigner(SignerBase):

    @classmethod
    def new(cls):
        return cls.from_prikey(os.urandom(32))

    @classmethod
    def from_prikey_file(cls, prikey_file: str, password: Union[str, bytes]):
        if isinstance(password, str):
            password = password.encode()

        if not prikey_file.endswith(conf.KEY_FILE_EXTENSIONS):
            raise KeyUnavailable(prikey_file, f"Not supported key file. Use one of {conf.KEY_FILE_EXTENSIONS}")

        try:
            with open(prikey_file, "rb") as file:
                private_bytes = file.read()
        except OSError as e:
            raise KeyUnavailable(prikey_file, f"Cannot read key file: {e}") from e

        try:
            if prikey_file.endswith('.der'):
                temp_private = serialization.load_der_private_key(private_bytes, password, default_backend())
            else:
                temp_private = serialization.load_pem_private_key(private_bytes, password, default_backend())
        except (ValueError, TypeError) as e:
            raise KeyUnavailable(prikey_file, f"Invalid Password: {e}") from e

        no_pass_private = temp_private.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        )
        key_info = keys.PrivateKeyInfo.load(no_pass_private)
        prikey = utils.long_to_bytes(key_info['private_key'].native['private_key'])
        return cls.from_prikey(prikey.rjust(32, b"\x00"))

    @classmethod
    def from_prikey(cls, prikey: bytes):
        from cfxsdk.crypto.signature.verifier import RecoverableSignatureVerifier

        signer = cls()
        try:
            signer.private_key = PrivateKey(prikey)
        except (ValueError, TypeError) as e:
            raise SigningBackendError(f"Invalid private key: {e}") from e
        signer.address = cls.address_from_prikey(prikey)

        signature = signer.sign_data(b'TEST')
        verifier = RecoverableSignatureVerifier.from_address(signer.address)
        if not verifier.verify_data(b'TEST', signature).result:
            raise SigningBackendError("Invalid Signature.")
        return signer

    def sign(self, data, is_hash: bool) -> Signature:
        if self.private_key is None:
            raise KeyUnavailable(self.address, "Signer has no private key")

        if is_hash:
            if isinstance(data, str):
                data = data[2:] if data.startswith("0x") else data
                data = binascii.unhexlify(data)
            if len(data) != HASH_SIZE:
                raise ValueError(f"hash data must be {HASH_SIZE} bytes. {len(data)}")
        elif isinstance(data, (bytes, bytearray)):
            data = keccak256(data)

        if not isinstance(data, (bytes, bytearray)):
            raise ValueError(f"data must be bytes. {type(data)}")

        try:
            # RFC 6979 deterministic nonce, low-s normalized
            raw_sig = self.private_key.sign_recoverable(bytes(data), hasher=None)
        except Exception as e:
            logging.error(f"Fail to sign with {self.address}: {e}")
            raise SigningBackendError(str(e)) from e

        return Signature(raw_sig)


def sign_transaction(tx: UnsignedTransaction, key: Union[SignerBase, bytes, None]) -> SignedTransaction:
    """Sign `tx` with a signer or raw 32-byte private key material."""
    if key is None:
        raise KeyUnavailable(None, "No key material")
    if not isinstance(key, SignerBase):
        key = RecoverableSigner.from_prikey(bytes(key))
    return key.sign_transaction(tx)
