import os

import pytest

from cfxsdk import configure as conf
from cfxsdk.blockchain.transactions import TransactionBuilder, TransactionVerifier, SignedTransaction
from cfxsdk.blockchain.types import Address, Hash32, Signature
from tests.unit.conftest import MockNodeClient, TO_ADDRESS


@pytest.fixture
def tx_builder(signer) -> TransactionBuilder:
    tx_builder = TransactionBuilder()
    tx_builder.signer = signer
    tx_builder.to_address = Address.fromhex_address(TO_ADDRESS)
    tx_builder.value = 10 ** 15
    tx_builder.nonce = 0
    tx_builder.gas_price = 1
    tx_builder.gas = 21000
    tx_builder.storage_limit = 0
    tx_builder.epoch_height = 1000
    tx_builder.chain_id = 1
    return tx_builder


class TestTransactionBuilder:
    def test_reset_cache_resets_members(self, tx_builder: TransactionBuilder):
        tx_builder.build()
        tx_builder.reset_cache()

        assert not tx_builder.unsigned_transaction
        assert not tx_builder.hash
        assert not tx_builder.signature

    def test_from_address_returns_its_addr_if_exists(self, tx_builder: TransactionBuilder):
        expected_addr = Address(os.urandom(Address.size))

        tx_builder.from_address = expected_addr
        assert tx_builder.build_from_address() == expected_addr

    def test_from_address_raise_exc_if_no_from_addr_and_no_signer(self, tx_builder: TransactionBuilder):
        tx_builder.signer = None

        with pytest.raises(RuntimeError):
            tx_builder.build_from_address()

    def test_from_address_generate_addr_if_no_from_addr_but_signer(self, tx_builder: TransactionBuilder, signer):
        assert tx_builder.build_from_address().hex_0x() == signer.address

    def test_build_hash_returns_valid_hash_form(self, tx_builder: TransactionBuilder):
        tx_builder.build_unsigned_transaction()

        assert isinstance(tx_builder.build_hash(), Hash32)

    def test_build_hash_fails_without_unsigned_transaction(self, tx_builder: TransactionBuilder):
        with pytest.raises(RuntimeError):
            tx_builder.build_hash()

    def test_build_without_signing(self, tx_builder: TransactionBuilder, unsigned_tx):
        assert tx_builder.build(is_signing=False) == unsigned_tx
        assert tx_builder.signature is None

    def test_build_signs(self, tx_builder: TransactionBuilder, signer):
        tx = tx_builder.build()

        assert isinstance(tx, SignedTransaction)
        assert isinstance(tx_builder.signature, Signature)
        assert TransactionVerifier().recover_sender(tx).hex_0x() == signer.address

    def test_build_equals_signer_result(self, tx_builder: TransactionBuilder, signer, unsigned_tx):
        assert tx_builder.build() == signer.sign_transaction(unsigned_tx)

    def test_missing_value_raises(self, tx_builder: TransactionBuilder):
        tx_builder.value = None

        with pytest.raises(RuntimeError):
            tx_builder.build()

    def test_sign_without_signer_raises(self, tx_builder: TransactionBuilder):
        tx_builder.signer = None

        with pytest.raises(RuntimeError):
            tx_builder.build()

    def test_data_over_limit_raises(self, tx_builder: TransactionBuilder, mocker):
        mocker.patch.object(conf, "MAX_TX_DATA_SIZE", 4)
        tx_builder.data = b"\x00" * 5

        with pytest.raises(ValueError):
            tx_builder.build_unsigned_transaction()


class TestResolveDefaults:
    def test_omitted_fields_are_resolved_by_node(self, signer):
        node_client = MockNodeClient()
        tx_builder = TransactionBuilder()
        tx_builder.signer = signer
        tx_builder.to_address = Address.fromhex_address(TO_ADDRESS)
        tx_builder.value = 1

        tx_builder.resolve_defaults(node_client)
        tx = tx_builder.build(is_signing=False)

        assert tx.nonce == node_client.nonce
        assert tx.gas_price == node_client.gas_price
        assert tx.epoch_height == node_client.epoch_number
        assert tx.gas == conf.DEFAULT_GAS
        assert tx.storage_limit == conf.DEFAULT_STORAGE_LIMIT
        assert tx.chain_id == conf.DEFAULT_CHAIN_ID

    def test_assigned_fields_are_kept(self, tx_builder: TransactionBuilder, mocker):
        node_client = MockNodeClient()
        spy = mocker.spy(node_client, "get_next_nonce")
        tx_builder.nonce = 3
        tx_builder.gas_price = None

        tx_builder.resolve_defaults(node_client)

        assert tx_builder.nonce == 3
        assert tx_builder.gas_price == node_client.gas_price
        spy.assert_not_called()

    def test_nothing_to_resolve_does_not_call_node(self, tx_builder: TransactionBuilder, mocker):
        node_client = mocker.MagicMock()

        tx_builder.resolve_defaults(node_client)

        node_client.resolve_defaults.assert_not_called()
