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
"""The interface of a remote node used to complete, submit and look up transactions."""

from abc import ABCMeta, abstractmethod
from typing import Optional

from cfxsdk import configure as conf
from cfxsdk import utils
from cfxsdk.blockchain.transactions import TransactionRecord, DEFAULTABLE_FIELDS
from cfxsdk.blockchain.types import Address, Hash32


class NodeClient(metaclass=ABCMeta):
    @abstractmethod
    def submit_transaction(self, encoded: bytes) -> Hash32:
        """Send a signed encoding. Raise SubmissionRejected when the node refuses it."""
        raise NotImplementedError

    @abstractmethod
    def fetch_transaction_by_hash(self, tx_hash: Hash32) -> Optional[TransactionRecord]:
        """Return None when the node does not know the hash."""
        raise NotImplementedError

    @abstractmethod
    def get_next_nonce(self, address: Address) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_epoch_number(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_gas_price(self) -> int:
        raise NotImplementedError

    def resolve_defaults(self, from_address: Address, partial: dict) -> dict:
        resolved = dict(partial)
        for name in DEFAULTABLE_FIELDS:
            if resolved.get(name) is None:
                resolved[name] = self._default_of(name, from_address)
        utils.logger.spam(f"resolved defaults({resolved})")
        return resolved

    def _default_of(self, name: str, from_address: Address) -> int:
        if name == "nonce":
            return self.get_next_nonce(from_address)
        if name == "gas_price":
            return self.get_gas_price()
        if name == "epoch_height":
            return self.get_epoch_number()
        if name == "gas":
            return conf.DEFAULT_GAS
        if name == "storage_limit":
            return conf.DEFAULT_STORAGE_LIMIT
        if name == "chain_id":
            return conf.DEFAULT_CHAIN_ID
        raise KeyError(name)
