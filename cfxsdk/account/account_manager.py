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
"""In-memory keystore granting time limited unlock leases per address."""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Union, TypeVar

from cfxsdk import configure as conf
from cfxsdk import utils
from cfxsdk.blockchain.exception import KeyUnavailable, LockExpired
from cfxsdk.blockchain.transactions import UnsignedTransaction, SignedTransaction
from cfxsdk.blockchain.types import Address
from cfxsdk.crypto.signature import Signer, SignerBase

T = TypeVar("T")


class Lease:
    """unlock lease object"""

    def __init__(self, address: Address, duration: Union[int, float], clock: Callable[[], float]):
        """initial function

        :param address:     unlocked address
        :param duration:    seconds the lease lasts
        :param clock:       function returning the current time in seconds
        """
        self.address = address
        self.duration = duration
        self._clock = clock
        self.start_time = clock()

    @property
    def expired_at(self) -> float:
        return self.start_time + self.duration

    def is_timeout(self) -> bool:
        return self._clock() >= self.expired_at

    def remain_time(self) -> Union[int, float]:
        remain = self.expired_at - self._clock()
        return remain if remain > 0 else 0

    def __repr__(self):
        return f"Lease({self.address.hex_0x()}, expired_at={self.expired_at})"


class AccountManager:
    """Holds signers in memory and lets them sign only while their address is unlocked.

    Re-unlocking an address replaces its lease, so the expiry is always
    `now + timeout` of the latest unlock.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock
        self._lock = threading.Lock()
        self._signers: Dict[Address, SignerBase] = {}
        self._leases: Dict[Address, Lease] = {}

    def _now(self) -> float:
        return self._clock() if self._clock else time.time()

    @property
    def addresses(self):
        with self._lock:
            return list(self._signers.keys())

    def import_key(self, prikey: bytes) -> Address:
        return self._add_signer(Signer.from_prikey(prikey))

    def import_key_file(self, prikey_file: str, password: Union[str, bytes]) -> Address:
        return self._add_signer(Signer.from_prikey_file(prikey_file, password))

    def new_account(self) -> Address:
        return self._add_signer(Signer.new())

    def _add_signer(self, signer: SignerBase) -> Address:
        address = Address.fromhex_address(signer.address)
        with self._lock:
            self._signers[address] = signer
        logging.info(f"account imported: {address.hex_0x()}")
        return address

    def timed_unlock(self, address: Address, timeout: Union[int, float, None] = None) -> Lease:
        if timeout is None:
            timeout = conf.UNLOCK_DEFAULT_TIMEOUT
        if timeout <= 0:
            raise ValueError(f"timeout must be positive. {timeout}")

        with self._lock:
            if address not in self._signers:
                raise KeyUnavailable(address.hex_0x(), "Unknown address")

            lease = Lease(address, timeout, self._now)
            self._leases[address] = lease

        utils.logger.debug(f"unlocked {address.hex_0x()} for {timeout}s")
        return lease

    def lock(self, address: Address):
        with self._lock:
            self._leases.pop(address, None)
        utils.logger.debug(f"locked {address.hex_0x()}")

    def is_unlocked(self, address: Address) -> bool:
        with self._lock:
            lease = self._leases.get(address)
            return lease is not None and not lease.is_timeout()

    def with_unlocked_key(self, address: Address, operation: Callable[[SignerBase], T],
                          timeout: Union[int, float, None] = None) -> T:
        """Run `operation` with the signer of `address`.

        With `timeout` the address is unlocked first. Never waits for a lease.
        """
        if timeout is not None:
            self.timed_unlock(address, timeout)

        with self._lock:
            signer = self._signers.get(address)
            if signer is None:
                raise KeyUnavailable(address.hex_0x(), "Unknown address")

            lease = self._leases.get(address)
            if lease is None:
                raise KeyUnavailable(address.hex_0x(), "Address is locked")
            if lease.is_timeout():
                raise LockExpired(address.hex_0x(), lease.expired_at, "Unlock lease expired")

        return operation(signer)

    def sign_transaction(self, address: Address, tx: UnsignedTransaction,
                         timeout: Union[int, float, None] = None) -> SignedTransaction:
        return self.with_unlocked_key(address, lambda signer: signer.sign_transaction(tx), timeout)
