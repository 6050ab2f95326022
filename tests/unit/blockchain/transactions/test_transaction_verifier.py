import dataclasses

import pytest

from cfxsdk.blockchain.exception import TransactionInvalidHashError, TransactionInvalidSignatureError
from cfxsdk.blockchain.transactions import TransactionVerifier, SignedTransaction
from cfxsdk.blockchain.types import Address, Hash32


@pytest.fixture
def signed_tx(signer, unsigned_tx) -> SignedTransaction:
    return signer.sign_transaction(unsigned_tx)


class TestTransactionVerifier:
    def test_valid_signature(self, signer, signed_tx: SignedTransaction):
        tv = TransactionVerifier()
        tv.verify(signed_tx, Address.fromhex_address(signer.address), signed_tx.hash)

    def test_recover_sender(self, signer, signed_tx: SignedTransaction):
        assert TransactionVerifier().recover_sender(signed_tx).hex_0x() == signer.address

    def test_other_sender_raises(self, signed_tx: SignedTransaction):
        other = Address.fromhex_address(pytest.SIGNERS[0].address)

        with pytest.raises(TransactionInvalidSignatureError):
            TransactionVerifier().verify_signature(signed_tx, other)

    def test_tampered_transaction_raises(self, signer, signed_tx: SignedTransaction):
        tampered_unsigned = dataclasses.replace(signed_tx.unsigned_transaction, value=1)
        tampered = dataclasses.replace(signed_tx, unsigned_transaction=tampered_unsigned)

        with pytest.raises(TransactionInvalidSignatureError):
            TransactionVerifier().verify_signature(tampered, Address.fromhex_address(signer.address))

    def test_hash_mismatch_raises(self, signed_tx: SignedTransaction):
        with pytest.raises(TransactionInvalidHashError):
            TransactionVerifier().verify_hash(signed_tx, Hash32(bytes(32)))

    def test_collects_exceptions(self, signed_tx: SignedTransaction):
        other = Address.fromhex_address(pytest.SIGNERS[0].address)
        tv = TransactionVerifier(raise_exceptions=False)

        tv.verify(signed_tx, other, Hash32(bytes(32)))

        assert len(tv.exceptions) == 2
        assert isinstance(tv.exceptions[0], TransactionInvalidSignatureError)
        assert isinstance(tv.exceptions[1], TransactionInvalidHashError)
