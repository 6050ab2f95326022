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

import logging

from cfxsdk import configure as conf
from cfxsdk.utils.loggers.configuration import LogConfiguration
from cfxsdk.utils.loggers.configuration_presets import PresetType, get_preset_type

preset_others = LogConfiguration()


def update_other_loggers():
    """Quiet the libraries which talk to the node on our behalf."""
    if get_preset_type() == PresetType.develop:
        preset_others.log_level = logging.WARNING
    else:
        preset_others.log_level = conf.CFXSDK_OTHER_LOG_LEVEL

    for name in ('urllib3', 'requests', 'jsonrpcclient', 'transitions'):
        preset_others.update_logger(logging.getLogger(name))
