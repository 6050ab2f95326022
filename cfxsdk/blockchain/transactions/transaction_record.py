from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union

from cfxsdk.blockchain.transactions.transaction import UnsignedTransaction, SignedTransaction
from cfxsdk.blockchain.types import Address, Hash32


class TransactionStatus(Enum):
    Pending = "Pending"
    Packed = "Packed"
    Executed = "Executed"
    Failed = "Failed"

    def is_terminal(self):
        return self is not TransactionStatus.Pending

    @classmethod
    def from_status(cls, status) -> Tuple['TransactionStatus', Optional[str]]:
        """Map the nullable status marker of a lookup response to a status and a failure reason.

        None or {} -> Pending, {"executed": true} or "0x0" -> Executed,
        {"failed": reason} or any other string code -> Failed.
        Any other non-null marker, "packed" included, -> Packed.
        """
        if status is None or status == {}:
            return cls.Pending, None

        if isinstance(status, dict):
            if status.get("failed"):
                return cls.Failed, str(status["failed"])
            if status.get("executed"):
                return cls.Executed, None
            return cls.Packed, None

        if isinstance(status, str):
            if status == "packed":
                return cls.Packed, None
            if status == "0x0":
                return cls.Executed, None
            return cls.Failed, f"execution failed with status {status}"

        return cls.Packed, None


@dataclass(frozen=True)
class TransactionRecord:
    """Lookup response of a submitted transaction."""
    hash: Hash32
    status: Union[dict, str, None] = None
    block_hash: Optional[Hash32] = None
    contract_created: Optional[Address] = None
    transaction: Union[UnsignedTransaction, SignedTransaction, None] = None
    raw: dict = field(default_factory=dict, compare=False, repr=False)

    @property
    def tx_status(self) -> TransactionStatus:
        return TransactionStatus.from_status(self.status)[0]

    @property
    def failure_reason(self) -> Optional[str]:
        return TransactionStatus.from_status(self.status)[1]

    @classmethod
    def from_dict(cls, raw: dict):
        from cfxsdk.blockchain.transactions.transaction_serializer import TransactionSerializer

        block_hash = raw.get("blockHash")
        contract_created = raw.get("contractCreated")

        transaction = None
        if raw.get("nonce") is not None:
            transaction = TransactionSerializer().from_raw_data(raw)

        return cls(
            hash=Hash32.fromhex(raw["hash"]),
            status=raw.get("status"),
            block_hash=Hash32.fromhex(block_hash) if block_hash else None,
            contract_created=Address.fromhex_address(contract_created.lower()) if contract_created else None,
            transaction=transaction,
            raw=raw
        )
