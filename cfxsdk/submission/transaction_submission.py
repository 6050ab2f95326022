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
"""State Machine for a transaction from construction to confirmation"""

import logging
import threading
import time
from typing import Callable, Optional, Union

import cfxsdk.utils as util
from cfxsdk.baseservice.node_client import NodeClient
from cfxsdk.blockchain.exception import (SubmissionRejected, TransactionLookupError, TransactionDropped,
                                         TransactionFailed)
from cfxsdk.blockchain.transactions import (UnsignedTransaction, SignedTransaction, TransactionRecord,
                                            TransactionStatus, TransactionSerializer)
from cfxsdk.blockchain.types import Hash32
from cfxsdk.crypto.signature import SignerBase, sign_transaction
from cfxsdk.statemachine import statemachine
from cfxsdk.submission.poll_policy import PollPolicy

REJECTED_REASON = "rejected before acceptance"
DROPPED_REASON = "accepted but no longer found"
LOOKUP_FAILED_REASON = "lookup failed"

SigningKey = Union[SignerBase, bytes, Callable[[UnsignedTransaction], SignedTransaction]]


@statemachine.StateMachine("Transaction Submission State Machine")
class TransactionSubmission(object):
    states = ['Built', 'Signed', 'Submitted', 'Pending', 'Packed', 'Executed', 'Failed', 'Dropped']
    init_state = 'Built'
    state = init_state
    confirmed_states = ('Packed', 'Executed')
    terminal_states = ('Packed', 'Executed', 'Failed', 'Dropped')

    def __init__(self, unsigned_transaction: UnsignedTransaction, node_client: NodeClient,
                 policy: Optional[PollPolicy] = None, clock: Optional[Callable[[], float]] = None):
        self.unsigned_transaction = unsigned_transaction
        self.signed_transaction: Optional[SignedTransaction] = None
        self.tx_hash: Optional[Hash32] = None
        self.record: Optional[TransactionRecord] = None
        self.reason: Optional[str] = None
        self.policy = policy or PollPolicy.from_conf()

        self._node_client = node_client
        self._clock = clock
        self._serializer = TransactionSerializer()
        self._lookup_errors = 0
        self._not_found = 0

    @statemachine.transition(source='Built', dest='Signed')
    def complete_sign(self):
        pass

    @statemachine.transition(source='Signed', dest='Submitted')
    def complete_submit(self):
        pass

    @statemachine.transition(source='Submitted', dest='Pending')
    def accept(self):
        pass

    @statemachine.transition(source='Pending', dest='Packed')
    def pack(self):
        pass

    @statemachine.transition(source=('Pending', 'Packed'), dest='Executed')
    def execute(self):
        pass

    @statemachine.transition(source=('Built', 'Signed', 'Submitted', 'Pending'), dest='Failed',
                             before='_set_reason')
    def fail(self, reason: str):
        pass

    @statemachine.transition(source=('Submitted', 'Pending'), dest='Dropped', before='_set_reason')
    def drop(self, reason: str):
        pass

    def _set_reason(self, reason: str):
        self.reason = reason
        logging.warning(f"transaction({self._hash_str()}) {self.state} -> failure: {reason}")

    def _now(self) -> float:
        return self._clock() if self._clock else time.time()

    def _hash_str(self):
        return self.tx_hash.hex_0x() if self.tx_hash else None

    def _check_state(self, *expected):
        if self.state not in expected:
            raise RuntimeError(f"transaction is {self.state}, expected one of {expected}")

    def is_terminal(self) -> bool:
        return self.state in self.terminal_states

    def is_confirmed(self) -> bool:
        return self.state in self.confirmed_states

    def sign(self, key: SigningKey) -> SignedTransaction:
        """Attach a signature. Signer errors propagate and the state stays Built."""
        self._check_state('Built')

        if callable(key) and not isinstance(key, SignerBase):
            signed_transaction = key(self.unsigned_transaction)
        else:
            signed_transaction = sign_transaction(self.unsigned_transaction, key)

        self.signed_transaction = signed_transaction
        self.complete_sign()
        util.logger.spam(f"transaction signed. hash({signed_transaction.hash.hex_0x()})")
        return signed_transaction

    def submit(self) -> Hash32:
        """Send the signed encoding once. A rejection is final and never retried."""
        self._check_state('Signed')

        encoded = self._serializer.to_signed_bytes(self.signed_transaction)
        try:
            tx_hash = self._node_client.submit_transaction(encoded)
        except SubmissionRejected as e:
            self.fail(f"{REJECTED_REASON}: {e}")
            raise

        self.tx_hash = tx_hash
        self.complete_submit()

        expected_hash = self.signed_transaction.hash
        if tx_hash != expected_hash:
            logging.warning(f"node returned hash({tx_hash.hex_0x()}) differs from "
                            f"the local hash({expected_hash.hex_0x()})")

        self.accept()
        logging.info(f"transaction submitted. hash({tx_hash.hex_0x()})")
        return tx_hash

    def poll_once(self, policy: Optional[PollPolicy] = None) -> str:
        """Look the transaction up once and move to the state its record shows.

        Lookup errors below the policy threshold are raised to the caller.
        """
        self._check_state('Pending')
        policy = policy or self.policy

        try:
            record = self._node_client.fetch_transaction_by_hash(self.tx_hash)
        except TransactionLookupError as e:
            self._lookup_errors += 1
            logging.warning(f"lookup of transaction({self._hash_str()}) failed "
                            f"{self._lookup_errors} times in a row: {e}")
            if policy.max_lookup_errors and self._lookup_errors >= policy.max_lookup_errors:
                self.fail(f"{LOOKUP_FAILED_REASON}: {e}")
                return self.state
            raise
        self._lookup_errors = 0

        if record is None:
            self._not_found += 1
            util.logger.debug(f"transaction({self._hash_str()}) not found {self._not_found} times in a row")
            if policy.drop_after_not_found and self._not_found >= policy.drop_after_not_found:
                self.drop(DROPPED_REASON)
            return self.state
        self._not_found = 0

        self.record = record
        status, reason = TransactionStatus.from_status(record.status)
        if status is TransactionStatus.Packed:
            self.pack()
        elif status is TransactionStatus.Executed:
            self.execute()
        elif status is TransactionStatus.Failed:
            self.fail(reason)

        util.logger.spam(f"transaction({self._hash_str()}) polled. status({record.status}) state({self.state})")
        return self.state

    def wait_for_confirmation(self, cancel_event: Optional[threading.Event] = None,
                              policy: Optional[PollPolicy] = None) -> str:
        """Poll until a terminal state or an escape hatch.

        Cancellation, `max_attempts` and `timeout` only stop the observation and leave the state Pending.
        """
        self._check_state('Pending')
        policy = policy or self.policy
        cancel_event = cancel_event or threading.Event()
        deadline = self._now() + policy.timeout if policy.timeout else None

        attempts = 0
        while self.state == 'Pending':
            if cancel_event.is_set():
                logging.info(f"stop waiting for transaction({self._hash_str()}). cancelled")
                break
            if policy.max_attempts and attempts >= policy.max_attempts:
                logging.info(f"stop waiting for transaction({self._hash_str()}). {attempts} attempts")
                break
            if deadline is not None and self._now() >= deadline:
                logging.info(f"stop waiting for transaction({self._hash_str()}). timeout({policy.timeout})")
                break

            attempts += 1
            try:
                self.poll_once(policy)
            except TransactionLookupError:
                pass

            if self.state != 'Pending':
                break

            interval = policy.interval
            if deadline is not None:
                interval = min(interval, max(deadline - self._now(), 0))
            cancel_event.wait(interval)

        return self.state

    def raise_for_status(self):
        """Raise the error of a failure state. Does nothing otherwise."""
        if self.state == 'Dropped':
            raise TransactionDropped(self.tx_hash, self.reason)
        if self.state == 'Failed':
            raise TransactionFailed(self.tx_hash, self.reason)
