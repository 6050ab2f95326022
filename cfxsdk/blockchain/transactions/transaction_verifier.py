from typing import Optional

from cfxsdk.blockchain.exception import TransactionInvalidHashError, TransactionInvalidSignatureError
from cfxsdk.blockchain.transactions.transaction import SignedTransaction
from cfxsdk.blockchain.transactions.transaction_serializer import TransactionSerializer
from cfxsdk.blockchain.types import Address, Hash32
from cfxsdk.crypto.signature.verifier import recover_address


class TransactionVerifier:
    def __init__(self, raise_exceptions=True):
        self.exceptions = []

        self._tx_serializer = TransactionSerializer()
        self._raise_exceptions = raise_exceptions

    def verify(self, tx: SignedTransaction, expected_sender: Optional[Address] = None,
               expected_hash: Optional[Hash32] = None):
        self.verify_signature(tx, expected_sender)
        if expected_hash is not None:
            self.verify_hash(tx, expected_hash)

    def verify_hash(self, tx: SignedTransaction, expected_hash: Hash32):
        tx_hash = self._tx_serializer.get_signed_hash(tx)
        if tx_hash != expected_hash:
            exception = TransactionInvalidHashError(tx, expected_hash, f"hash({tx_hash.hex_0x()}) not matched")
            self._handle_exceptions(exception)

    def verify_signature(self, tx: SignedTransaction, expected_sender: Optional[Address] = None):
        sender = self.recover_sender(tx)
        if sender is None:
            exception = TransactionInvalidSignatureError(tx, message="cannot recover sender")
            self._handle_exceptions(exception)
        elif expected_sender is not None and sender != expected_sender:
            exception = TransactionInvalidSignatureError(
                tx, message=f"sender not matched. {sender.hex_0x()} != {expected_sender.hex_0x()}")
            self._handle_exceptions(exception)

    def recover_sender(self, tx: SignedTransaction) -> Optional[Address]:
        tx_hash = self._tx_serializer.get_hash(tx.unsigned_transaction)
        return recover_address(tx_hash, tx.signature)

    def _handle_exceptions(self, exception: Exception):
        if self._raise_exceptions:
            raise exception
        else:
            self.exceptions.append(exception)
