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
import logging.handlers
import os
import sys
from functools import reduce
from operator import or_

import coloredlogs
import verboselogs

from cfxsdk import configure as conf


class LogConfiguration:
    def __init__(self):
        self.log_format = None
        self.node_url = ""
        self.log_level = verboselogs.SPAM
        self.log_color = True
        self.log_output_type = conf.LogOutputType.console
        self.log_file_location = ""
        self.log_file_prefix = ""
        self.log_file_extension = ""
        self.log_file_rotate_when = ''
        self.log_file_rotate_interval = 0
        self.log_file_rotate_max_bytes = 0
        self.log_file_rotate_backup_count = 0
        self.log_file_rotate_utc = False

        self._log_level = None
        self._log_format = None
        self._log_file_path = None

    def update_logger(self, logger: logging.Logger = None):
        if logger is None:
            logger = logging.root

        self._log_level = self.log_level if isinstance(self.log_level, int) else logging.getLevelName(self.log_level)

        if logger is logging.root:
            self._log_format = self.log_format.format(NODE_URL=self.node_url)

            self._update_log_output_type()
            self._update_handlers(logger)

            if self.log_color:
                self._update_log_color_set(logger)

        logger.setLevel(self._log_level)

    def _update_log_color_set(self, logger):
        # level SPAM value is 5
        # level DEBUG value is 10
        coloredlogs.DEFAULT_FIELD_STYLES = {
            'hostname': {'color': 'magenta'},
            'programname': {'color': 'cyan'},
            'name': {'color': 'blue'},
            'levelname': {'color': 'black', 'bold': True},
            'asctime': {'color': 'magenta'}}

        coloredlogs.DEFAULT_LEVEL_STYLES = {
            'info': {},
            'notice': {'color': 'magenta'},
            'verbose': {'color': 'blue'},
            'success': {'color': 'green', 'bold': True},
            'spam': {'color': 'cyan'},
            'critical': {'color': 'red', 'bold': True},
            'error': {'color': 'red'},
            'debug': {'color': 'green'},
            'warning': {'color': 'yellow'}}

        self._beautify_stream_handlers(logger)

    def _beautify_stream_handlers(self, logger):
        stream_handlers = (
            stream_handler for stream_handler in logger.handlers
            if type(stream_handler) is logging.StreamHandler
        )

        colored_fmt = coloredlogs.ColoredFormatter(fmt=self._log_format, datefmt="%Y-%m-%d %H:%M:%S")

        for stream_handler in stream_handlers:
            stream_handler.setFormatter(colored_fmt)

    def _update_log_file_path(self):
        log_file_name = f"{self.log_file_prefix}.{self.log_file_extension}"
        self._log_file_path = os.path.join(self.log_file_location, log_file_name)

    def _update_log_output_type(self):
        if isinstance(self.log_output_type, str):
            self.log_output_type = reduce(
                or_,
                (conf.LogOutputType[flag.strip().lower()] for flag in self.log_output_type.split('|')))

    def _update_handlers(self, logger):
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)

        handlers = []

        if self.log_output_type & conf.LogOutputType.console:
            handlers.append(self._create_stdout_handler())
            handlers.append(self._create_stderr_handler())

        if self.log_output_type & conf.LogOutputType.file and self.log_file_location:
            self._update_log_file_path()
            handlers.append(self._create_file_handler())

        # Add default formatter to initial handlers.
        formatter = logging.Formatter(fmt=self._log_format, datefmt="%Y-%m-%d %H:%M:%S")
        for handler in handlers:
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    def _create_stdout_handler(self):
        """Create stdout log handler.

        Emits log records from self._log_level (include) to logging.ERROR (exclude)
        """
        stream_handler = logging.StreamHandler(sys.stdout)
        stream_handler.setLevel(self._log_level)
        stream_handler.addFilter(self._root_stdout_filter)

        return stream_handler

    def _create_stderr_handler(self):
        """Create stderr log handler.

        Emits log records above logging.ERROR
        """
        stream_error_handler = logging.StreamHandler(sys.stderr)
        stream_error_handler.setLevel(logging.ERROR)

        return stream_error_handler

    def _create_file_handler(self):
        if os.path.exists(self.log_file_location):
            if not os.path.isdir(self.log_file_location):
                raise RuntimeError(f"LogFileLocation({self.log_file_location}) is not a directory.")
        else:
            os.makedirs(self.log_file_location, exist_ok=True)

        if self.log_file_rotate_when:
            file_handler = logging.handlers.TimedRotatingFileHandler(
                self._log_file_path,
                when=self.log_file_rotate_when,
                interval=self.log_file_rotate_interval,
                backupCount=self.log_file_rotate_backup_count,
                encoding='utf-8',
                delay=False,
                utc=self.log_file_rotate_utc
            )
        elif self.log_file_rotate_max_bytes:
            file_handler = logging.handlers.RotatingFileHandler(
                self._log_file_path,
                maxBytes=self.log_file_rotate_max_bytes,
                backupCount=self.log_file_rotate_backup_count,
                encoding='utf-8',
                delay=False
            )
        else:
            file_handler = logging.FileHandler(
                self._log_file_path,
                encoding='utf-8',
                delay=False
            )
        file_handler.setLevel(self._log_level)
        return file_handler

    def _root_stdout_filter(self, record: logging.LogRecord) -> bool:
        """Controls emission of LogRecord on stdout handler."""
        return record.name not in useless_streams and record.levelno < logging.ERROR


useless_streams = {
    "urllib3.connectionpool"
}
