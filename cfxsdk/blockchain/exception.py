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
"""A module of exceptions for errors on transactions"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cfxsdk.blockchain.transactions import SignedTransaction
    from cfxsdk.blockchain.types import Hash32


class DecodeError(Exception):
    """Raise when bytes cannot be turned into a transaction.
    """
    pass


class MalformedEncoding(DecodeError):
    """The byte stream is not a well-formed canonical nested list.
    """
    pass


class FieldCountMismatch(DecodeError):
    def __init__(self, expected: int, actual: int, msg: str = ''):
        super().__init__(msg)
        self.expected = expected
        self.actual = actual
        self.msg = msg

    def __str__(self):
        results = []
        if self.msg:
            results.append(self.msg)
        results.append(f"expected fields: {self.expected}")
        results.append(f"actual fields: {self.actual}")
        return ' '.join(results)


class IntegerOverflow(DecodeError):
    def __init__(self, field: str, bits: int, msg: str = ''):
        super().__init__(msg)
        self.field = field
        self.bits = bits
        self.msg = msg

    def __str__(self):
        results = []
        if self.msg:
            results.append(self.msg)
        results.append(f"field: {self.field}")
        results.append(f"max bits: {self.bits}")
        return ' '.join(results)


class SigningError(Exception):
    pass


class KeyUnavailable(SigningError):
    """Key material of the address cannot be accessed.
    """
    def __init__(self, address: str, msg: str = ''):
        super().__init__(msg)
        self.address = address
        self.msg = msg

    def __str__(self):
        results = []
        if self.msg:
            results.append(self.msg)
        results.append(f"address: {self.address}")
        return ' '.join(results)


class LockExpired(KeyUnavailable):
    """The unlock lease of the address has expired.
    """
    def __init__(self, address: str, expired_at: float, msg: str = ''):
        super().__init__(address, msg)
        self.expired_at = expired_at


class SigningBackendError(SigningError):
    """Underlying cryptographic library failed.
    """
    pass


class SubmissionError(Exception):
    pass


class SubmissionRejected(SubmissionError):
    """The node refused the encoded transaction. This is never retried.
    """
    def __init__(self, reason: str, code: int = None):
        super().__init__(reason)
        self.reason = reason
        self.code = code

    def __str__(self):
        if self.code is None:
            return self.reason
        return f"{self.reason} (code: {self.code})"


class TransactionLookupError(SubmissionError):
    """A lookup of a submitted transaction failed.
    """
    pass


class TransactionDropped(SubmissionError):
    """A submitted transaction is no longer known by the node.
    """
    def __init__(self, tx_hash: 'Hash32', reason: str):
        super().__init__(reason)
        self.tx_hash = tx_hash
        self.reason = reason

    def __str__(self):
        return f"{self.reason}\nTransaction hash: {self.tx_hash.hex_0x()}"


class TransactionFailed(SubmissionError):
    """A submitted transaction ended in a failure state.
    """
    def __init__(self, tx_hash: 'Hash32', reason: str):
        super().__init__(reason)
        self.tx_hash = tx_hash
        self.reason = reason

    def __str__(self):
        if self.tx_hash is None:
            return self.reason
        return f"{self.reason}\nTransaction hash: {self.tx_hash.hex_0x()}"


class TransactionInvalidError(Exception):
    def __init__(self, tx: 'SignedTransaction', message=''):
        super().__init__(message)
        self.tx = tx

    def __str__(self):
        return \
            f"{super().__str__()}\n" \
            f"Transaction: {self.tx}"


class TransactionInvalidHashError(TransactionInvalidError):
    def __init__(self, tx: 'SignedTransaction', expected_tx_hash: 'Hash32', message=''):
        super().__init__(tx, message)
        self.expected_tx_hash = expected_tx_hash

    def __str__(self):
        return \
            f"{super().__str__()}\n" \
            f"Expected hash: {self.expected_tx_hash.hex_0x()}"


class TransactionInvalidSignatureError(TransactionInvalidError):
    pass
