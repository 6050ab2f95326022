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
"""Build, sign, submit and observe transactions of unlocked accounts"""

import threading
from typing import Optional, Union

from cfxsdk.account import AccountManager
from cfxsdk.baseservice.node_client import NodeClient
from cfxsdk.blockchain.transactions import TransactionBuilder, UnsignedTransaction
from cfxsdk.blockchain.types import Address
from cfxsdk.submission.poll_policy import PollPolicy
from cfxsdk.submission.transaction_submission import TransactionSubmission


class TransactionSender:
    def __init__(self, node_client: NodeClient, account_manager: AccountManager,
                 policy: Optional[PollPolicy] = None):
        self._node_client = node_client
        self._account_manager = account_manager
        self._policy = policy

    def create_unsigned_transaction(self, from_address: Address, to: Union[Address, str, None], value: int,
                                    data: Union[bytes, str] = b"", **fields) -> UnsignedTransaction:
        """Omitted fields among nonce, gas_price, gas, storage_limit, epoch_height and chain_id
        are resolved through the node."""
        tx_builder = TransactionBuilder()
        tx_builder.from_address = from_address
        tx_builder.to_address = Address.fromhex_address(to) if isinstance(to, str) else to
        tx_builder.value = value
        tx_builder.data = data
        for name, value_ in fields.items():
            if not hasattr(tx_builder, name):
                raise TypeError(f"Unknown transaction field. {name}")
            setattr(tx_builder, name, value_)

        tx_builder.resolve_defaults(self._node_client)
        return tx_builder.build(is_signing=False)

    def send_transaction(self, from_address: Address, to: Union[Address, str, None], value: int,
                         data: Union[bytes, str] = b"", wait=True,
                         cancel_event: Optional[threading.Event] = None,
                         policy: Optional[PollPolicy] = None, **fields) -> TransactionSubmission:
        unsigned_transaction = self.create_unsigned_transaction(from_address, to, value, data, **fields)
        submission = TransactionSubmission(unsigned_transaction, self._node_client, policy or self._policy)
        submission.sign(
            lambda tx: self._account_manager.sign_transaction(from_address, tx)
        )
        submission.submit()

        if wait:
            submission.wait_for_confirmation(cancel_event, policy)
        return submission
