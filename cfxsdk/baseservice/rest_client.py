# Copyright 2019 ICON Foundation
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
"""The Client for JSON-RPC calls to a node."""

import logging
from collections import namedtuple
from enum import Enum
from typing import Optional, NamedTuple

import requests
from jsonrpcclient import Error, Ok, parse, request

from cfxsdk import utils, configure as conf
from cfxsdk.baseservice.node_client import NodeClient
from cfxsdk.blockchain.exception import SubmissionRejected, TransactionLookupError
from cfxsdk.blockchain.transactions import TransactionRecord
from cfxsdk.blockchain.types import Address, Hash32, int_fromhex

_RestMethod = namedtuple("_RestMethod", "name params")


class RestMethod(Enum):
    SendRawTransaction = _RestMethod("cfx_sendRawTransaction", namedtuple("Params", "raw_tx"))
    GetTransactionByHash = _RestMethod("cfx_getTransactionByHash", namedtuple("Params", "tx_hash"))
    GetNextNonce = _RestMethod("cfx_getNextNonce", namedtuple("Params", "address epoch", defaults=(None,)))
    EpochNumber = _RestMethod("cfx_epochNumber", namedtuple("Params", "epoch", defaults=(None,)))
    GasPrice = _RestMethod("cfx_gasPrice", None)


class JsonRpcError(Exception):
    def __init__(self, method: RestMethod, code: int, message: str, data=None):
        super().__init__(message)
        self.method = method
        self.code = code
        self.message = message
        self.data = data

    def __str__(self):
        return f"{self.method.value.name} failed. code({self.code}) message({self.message}) data({self.data})"


class RestClient(NodeClient):
    def __init__(self, target: Optional[str] = None):
        self._target: str = None
        self._set_target(target)

    def _set_target(self, target):
        self._target = utils.normalize_request_url(target)
        logging.info(f"RestClient init target({self._target})")

    @property
    def target(self):
        return self._target

    def call(self, method: RestMethod, params: Optional[NamedTuple] = None, timeout=None):
        timeout = timeout or conf.REST_TIMEOUT

        try:
            response = self._call_jsonrpc(self.target, method, params, timeout)
        except Exception as e:
            logging.warning(f"REST call fail method_name({method.value.name}), caused by : {type(e)}, {e}")
            raise
        else:
            utils.logger.spam(f"REST call complete method_name({method.value.name})")
            return response

    def submit_transaction(self, encoded: bytes) -> Hash32:
        params = RestMethod.SendRawTransaction.value.params("0x" + encoded.hex())
        try:
            response = self.call(RestMethod.SendRawTransaction, params)
        except JsonRpcError as e:
            raise SubmissionRejected(e.message, e.code) from e
        return Hash32.fromhex(response)

    def fetch_transaction_by_hash(self, tx_hash: Hash32) -> Optional[TransactionRecord]:
        params = RestMethod.GetTransactionByHash.value.params(tx_hash.hex_0x())
        try:
            response = self.call(RestMethod.GetTransactionByHash, params)
            if response is None:
                return None
            return TransactionRecord.from_dict(response)
        except (JsonRpcError, requests.RequestException, ValueError, KeyError) as e:
            raise TransactionLookupError(f"lookup of {tx_hash.hex_0x()} failed: {e}") from e

    def get_next_nonce(self, address: Address) -> int:
        params = RestMethod.GetNextNonce.value.params(address.hex_0x(), conf.DEFAULT_EPOCH_TAG)
        return int_fromhex(self.call(RestMethod.GetNextNonce, params), strict=True)

    def get_epoch_number(self) -> int:
        params = RestMethod.EpochNumber.value.params(conf.DEFAULT_EPOCH_TAG)
        return int_fromhex(self.call(RestMethod.EpochNumber, params), strict=True)

    def get_gas_price(self) -> int:
        return int_fromhex(self.call(RestMethod.GasPrice), strict=True)

    def _call_jsonrpc(self, target: str, method: RestMethod, params: Optional[NamedTuple], timeout):
        payload = self._create_jsonrpc_params(method, params)
        response = requests.post(url=target, json=payload, timeout=timeout)
        response.raise_for_status()

        parsed = parse(response.json())
        if isinstance(parsed, Error):
            raise JsonRpcError(method, parsed.code, parsed.message, parsed.data)
        if not isinstance(parsed, Ok):
            raise NotImplementedError(f"Received batch response. Data: {response.text}")
        return parsed.result

    @staticmethod
    def _create_jsonrpc_params(method: RestMethod, params: Optional[NamedTuple]) -> dict:
        # positional params, trailing None values are left to the node's defaults
        params = list(params) if params else []
        while params and params[-1] is None:
            params.pop()

        return request(method.value.name, params=params) if params else request(method.value.name)
