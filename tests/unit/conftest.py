import os
from typing import Callable, List, Optional

import pytest

from cfxsdk.baseservice.node_client import NodeClient
from cfxsdk.blockchain.exception import SubmissionRejected
from cfxsdk.blockchain.transactions import UnsignedTransaction, TransactionRecord
from cfxsdk.blockchain.types import Address, Hash32
from cfxsdk.crypto.hashing import keccak256
from cfxsdk.crypto.signature import Signer

# ----- Type Hints
TxFactory = Callable[..., UnsignedTransaction]

PRIKEY = bytes.fromhex("c85ef7d79691fe79573b1a7064c19c1a9819ebdbd1faaab1a8ec92344438aaf4")
TO_ADDRESS = "0x1cad0b19bb29d4674531d6f115237e16afce377d"


# ----- Global variables
def pytest_configure():
    signers = [Signer.from_prikey(os.urandom(32)) for _ in range(5)]
    pytest.SIGNERS: List[Signer] = signers


class FakeClock:
    def __init__(self, now: float = 0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class MockNodeClient(NodeClient):
    """Answers lookups from a script. Each item is a status marker, None for unknown hash or an exception."""

    def __init__(self, lookups: Optional[list] = None, reject: Optional[SubmissionRejected] = None):
        self.lookups = list(lookups or [])
        self.reject = reject
        self.submitted: List[bytes] = []
        self.lookup_count = 0
        self.nonce = 7
        self.epoch_number = 1000
        self.gas_price = 1

    def submit_transaction(self, encoded: bytes) -> Hash32:
        if self.reject:
            raise self.reject
        self.submitted.append(encoded)
        return Hash32(keccak256(encoded))

    def fetch_transaction_by_hash(self, tx_hash: Hash32) -> Optional[TransactionRecord]:
        self.lookup_count += 1
        item = self.lookups.pop(0) if self.lookups else {"status": None}
        if isinstance(item, Exception):
            raise item
        if item is None:
            return None
        return TransactionRecord(hash=tx_hash, status=item["status"], raw=item)

    def get_next_nonce(self, address: Address) -> int:
        return self.nonce

    def get_epoch_number(self) -> int:
        return self.epoch_number

    def get_gas_price(self) -> int:
        return self.gas_price


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def signer() -> Signer:
    return Signer.from_prikey(PRIKEY)


@pytest.fixture
def tx_factory() -> TxFactory:
    def _tx_factory(**kwargs) -> UnsignedTransaction:
        fields = dict(
            nonce=0,
            gas_price=1,
            gas=21000,
            to=TO_ADDRESS,
            value=1_000_000_000_000_000,
            storage_limit=0,
            epoch_height=1000,
            chain_id=1,
            data=b""
        )
        fields.update(kwargs)
        return UnsignedTransaction(**fields)

    return _tx_factory


@pytest.fixture
def unsigned_tx(tx_factory) -> UnsignedTransaction:
    return tx_factory()
