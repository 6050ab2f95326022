import pytest

from cfxsdk.blockchain.transactions import TransactionRecord, TransactionSerializer, TransactionStatus
from cfxsdk.blockchain.types import Hash32

TX_HASH = "0x" + "ab" * 32
BLOCK_HASH = "0x" + "cd" * 32


@pytest.mark.parametrize("status, expected", [
    (None, TransactionStatus.Pending),
    ({}, TransactionStatus.Pending),
    ({"packed": True}, TransactionStatus.Packed),
    ("packed", TransactionStatus.Packed),
    ({"executed": True}, TransactionStatus.Executed),
    ("0x0", TransactionStatus.Executed),
    ({"failed": "out of gas"}, TransactionStatus.Failed),
    ("0x1", TransactionStatus.Failed),
])
def test_status_from_marker(status, expected):
    assert TransactionStatus.from_status(status)[0] is expected


def test_failed_status_carries_reason():
    assert TransactionStatus.from_status({"failed": "out of gas"}) == (TransactionStatus.Failed, "out of gas")
    assert "0x1" in TransactionStatus.from_status("0x1")[1]


@pytest.mark.parametrize("status", [0, 1, {"outcome": 0}, {"packed": False}, ["0x0"]])
def test_unrecognized_marker_is_packed(status):
    assert TransactionStatus.from_status(status) == (TransactionStatus.Packed, None)


@pytest.mark.parametrize("status, terminal", [
    (TransactionStatus.Pending, False),
    (TransactionStatus.Packed, True),
    (TransactionStatus.Executed, True),
    (TransactionStatus.Failed, True),
])
def test_is_terminal(status, terminal):
    assert status.is_terminal() is terminal


class TestTransactionRecord:
    def test_from_dict_minimal(self):
        record = TransactionRecord.from_dict({"hash": TX_HASH, "status": None, "blockHash": None})

        assert record.hash == Hash32.fromhex(TX_HASH)
        assert record.block_hash is None
        assert record.transaction is None
        assert record.tx_status is TransactionStatus.Pending

    def test_from_dict_full(self, signer, unsigned_tx):
        signed_tx = signer.sign_transaction(unsigned_tx)
        raw = TransactionSerializer().to_raw_data(signed_tx)
        raw.update({
            "blockHash": BLOCK_HASH,
            "contractCreated": None,
            "status": "0x0",
            "from": signer.address
        })

        record = TransactionRecord.from_dict(raw)

        assert record.hash == signed_tx.hash
        assert record.block_hash == Hash32.fromhex(BLOCK_HASH)
        assert record.transaction == signed_tx
        assert record.tx_status is TransactionStatus.Executed
        assert record.failure_reason is None
        assert record.raw is raw
