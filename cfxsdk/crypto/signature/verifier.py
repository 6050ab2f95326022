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
""" A class for signature verifier of transactions"""

import logging
from abc import ABCMeta, abstractmethod
from collections import namedtuple
from typing import Optional

from coincurve import PublicKey

from cfxsdk import utils
from cfxsdk.blockchain.types import Address, Signature
from cfxsdk.crypto.hashing import keccak256


class SignatureVerifierBase(metaclass=ABCMeta):
    VerifiedAddress = namedtuple("VerifiedAddress", "result expected_address")

    address: Address = None

    def verify_data(self, origin_data: bytes, signature: Signature) -> 'VerifiedAddress':
        return self.verify(origin_data, signature, False)

    def verify_hash(self, origin_data: bytes, signature: Signature) -> 'VerifiedAddress':
        return self.verify(origin_data, signature, True)

    @classmethod
    def from_pubkey(cls, pubkey: bytes):
        return cls.from_address(utils.address_from_pubkey(pubkey))

    @classmethod
    def from_address(cls, address: str):
        verifier = cls()
        verifier.address = Address.fromhex_address(address)
        return verifier

    @abstractmethod
    def verify(self, origin_data: bytes, signature: Signature, is_hash: bool) -> 'VerifiedAddress':
        raise NotImplementedError


class RecoverableSignatureVerifier(SignatureVerifierBase):
    def __verify_address(self, pubkey: bytes) -> 'VerifiedAddress':
        expected_address = Address.fromhex_address(utils.address_from_pubkey(pubkey))
        verified_address = self.VerifiedAddress(expected_address == self.address, expected_address)
        return verified_address

    def verify(self, origin_data: bytes, signature: Signature, is_hash: bool) -> 'VerifiedAddress':
        try:
            if not is_hash:
                origin_data = keccak256(origin_data)

            extract_pub = recover_pubkey(origin_data, signature)
            return self.__verify_address(extract_pub)
        except ValueError as e:
            logging.debug(f"Fail to verify the signature : ({origin_data})/({signature})\n{e}")
            return self.VerifiedAddress(False, None)


def recover_pubkey(msg_hash: bytes, signature: Signature) -> bytes:
    """Uncompressed public key which produced `signature` over `msg_hash`."""
    signature = Signature(signature)
    return PublicKey.from_signature_and_message(bytes(signature), msg_hash, hasher=None).format(compressed=False)


def recover_address(msg_hash: bytes, signature: Signature) -> Optional[Address]:
    try:
        return Address.fromhex_address(utils.address_from_pubkey(recover_pubkey(msg_hash, signature)))
    except ValueError as e:
        logging.debug(f"Fail to recover the address : ({msg_hash})/({signature})\n{e}")
        return None
