from typing import TYPE_CHECKING, Optional, Union

from cfxsdk import configure as conf
from cfxsdk import utils
from cfxsdk.blockchain.transactions.transaction import UnsignedTransaction, SignedTransaction, DEFAULTABLE_FIELDS
from cfxsdk.blockchain.transactions.transaction_serializer import UNSIGNED_FIELDS, TransactionSerializer
from cfxsdk.blockchain.types import Address, Hash32, Signature

if TYPE_CHECKING:
    from cfxsdk.baseservice.node_client import NodeClient
    from cfxsdk.crypto.signature import SignerBase


class TransactionBuilder:
    def __init__(self):
        self._tx_serializer = TransactionSerializer()

        # Attributes that must be assigned
        self.to_address: Optional[Address] = None
        self.value: int = None

        # Attributes to be assigned(optional), resolved by the node when omitted
        self.nonce: int = None
        self.gas_price: int = None
        self.gas: int = None
        self.storage_limit: int = None
        self.epoch_height: int = None
        self.chain_id: int = None
        self.data: Union[bytes, str] = b""

        # Attributes to be assigned for signing or resolving defaults
        self.signer: 'SignerBase' = None
        self.from_address: Optional[Address] = None

        # Attributes to be generated
        self.unsigned_transaction: UnsignedTransaction = None
        self.hash: Hash32 = None
        self.signature: Signature = None

    def reset_cache(self):
        self.unsigned_transaction = None
        self.hash = None
        self.signature = None

    def build(self, is_signing=True) -> Union[UnsignedTransaction, SignedTransaction]:
        self.build_unsigned_transaction()
        self.build_hash()
        if not is_signing:
            return self.unsigned_transaction

        self.sign()
        return SignedTransaction.from_signature(self.unsigned_transaction, self.signature)

    def build_from_address(self) -> Address:
        if self.from_address:
            return self.from_address

        if self.signer is None:
            raise RuntimeError(f"'signer' or 'from_address' is required.")

        self.from_address = Address.fromhex_address(self.signer.address)
        return self.from_address

    def resolve_defaults(self, node_client: 'NodeClient'):
        """Ask the node for every omitted field."""
        partial = {name: getattr(self, self._attr_name(name)) for name in UNSIGNED_FIELDS}
        missing = [name for name in DEFAULTABLE_FIELDS if partial[name] is None]
        if not missing:
            return

        resolved = node_client.resolve_defaults(self.build_from_address(), partial)
        for name in missing:
            setattr(self, self._attr_name(name), resolved[name])
        utils.logger.debug(f"resolved defaults of {missing} from the node")

    def build_unsigned_transaction(self) -> UnsignedTransaction:
        fields = {name: getattr(self, self._attr_name(name)) for name in UNSIGNED_FIELDS}
        missing = [name for name, value in fields.items() if value is None and name != "to"]
        if missing:
            raise RuntimeError(f"{missing} are required. Assign them or run resolve_defaults.")

        unsigned_transaction = UnsignedTransaction(**fields)
        if conf.MAX_TX_DATA_SIZE and len(unsigned_transaction.data) > conf.MAX_TX_DATA_SIZE:
            raise ValueError(f"data size({len(unsigned_transaction.data)}) exceeds {conf.MAX_TX_DATA_SIZE}")

        self.unsigned_transaction = unsigned_transaction
        return self.unsigned_transaction

    def build_hash(self) -> Hash32:
        if self.unsigned_transaction is None:
            raise RuntimeError(f"unsigned transaction is required. Run build_unsigned_transaction.")

        self.hash = self._tx_serializer.get_hash(self.unsigned_transaction)
        return self.hash

    def sign(self) -> Signature:
        if self.hash is None:
            self.build_hash()

        if self.signer is None:
            raise RuntimeError(f"'signer' is required.")

        self.signature = self.signer.sign_hash(self.hash)
        return self.signature

    @staticmethod
    def _attr_name(field_name: str) -> str:
        return "to_address" if field_name == "to" else field_name
