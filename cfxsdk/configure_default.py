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
"""All cfxsdk configure value can set by system environment.
But before set by system environment, cfxsdk use this default values.

Values which must be derived from other values are derived in this file,
so `configure` can use them as they are.
"""

import os

from enum import IntFlag, auto


CFXSDK_ROOT_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


#############
# LOGGING ###
#############
class LogOutputType(IntFlag):
    console = auto()
    file = auto()


CFXSDK_LOG_LEVEL = os.getenv('CFXSDK_LOG_LEVEL', 'INFO')
CFXSDK_DEVELOP_LOG_LEVEL = "SPAM"
CFXSDK_OTHER_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s,%(msecs)03d %(process)d %(thread)d {NODE_URL} " \
             "%(levelname)s %(filename)s(%(lineno)d) %(message)s"

LOG_OUTPUT_TYPE = LogOutputType.console

LOG_FILE_LOCATION = os.path.join(CFXSDK_ROOT_PATH, 'log')
LOG_FILE_PREFIX = "cfxsdk"
LOG_FILE_EXTENSION = "log"

LOG_FILE_ROTATE_WHEN = ''  # Default '', Do no rotate log files by time
LOG_FILE_ROTATE_INTERVAL = 1

LOG_FILE_ROTATE_MAX_BYTES = 0  # Default 0, Do not rotate log files by max bytes

LOG_FILE_ROTATE_BACKUP_COUNT = 10
LOG_FILE_ROTATE_UTC = False


##########
# NODE ###
##########
NODE_URL = "http://localhost:12537"
REST_TIMEOUT = 10  # seconds


#################
# TRANSACTION ###
#################
DEFAULT_GAS = 21000
DEFAULT_STORAGE_LIMIT = 0
DEFAULT_CHAIN_ID = 0
# RPC tag used when a nonce or an epoch number is asked without explicit height
DEFAULT_EPOCH_TAG = "latest_state"

# 0 means the value is not bounded.
MAX_TX_DATA_SIZE = 0


#############
# POLLING ###
#############
POLL_INTERVAL = 1.0  # seconds between two lookups of a submitted transaction
POLL_MAX_ATTEMPTS = 0  # 0: poll until a terminal state or a cancel signal
POLL_TIMEOUT = 0  # seconds, 0: no deadline
POLL_MAX_LOOKUP_ERRORS = 3  # consecutive lookup errors before Failed, 0: never fail on lookup errors
POLL_DROP_AFTER_NOT_FOUND = 0  # consecutive not-found lookups before Dropped, 0: never drop


#############
# ACCOUNT ###
#############
UNLOCK_DEFAULT_TIMEOUT = 300  # seconds
KEY_FILE_EXTENSIONS = (".der", ".pem")
