import logging

import pytest
import verboselogs

from cfxsdk import configure as conf
from cfxsdk.utils import loggers


@pytest.fixture
def root_handlers():
    handlers = logging.root.handlers[:]
    level = logging.root.level

    yield

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    for handler in handlers:
        logging.root.addHandler(handler)
    logging.root.setLevel(level)
    loggers.set_preset_type(loggers.PresetType.production)


def test_develop_preset_logs_spam(root_handlers):
    loggers.set_preset_type(loggers.PresetType.develop)
    loggers.update_preset()

    assert logging.root.level == verboselogs.SPAM
    assert loggers.get_preset().node_url == conf.NODE_URL


def test_file_output(root_handlers, tmp_path):
    log_configuration = loggers.LogConfiguration()
    log_configuration.log_format = conf.LOG_FORMAT
    log_configuration.log_level = "INFO"
    log_configuration.log_color = False
    log_configuration.log_output_type = "file"
    log_configuration.log_file_location = str(tmp_path)
    log_configuration.log_file_prefix = "cfxsdk"
    log_configuration.log_file_extension = "log"

    log_configuration.update_logger()
    logging.info("written to file")
    for handler in logging.root.handlers:
        handler.flush()

    assert "written to file" in (tmp_path / "cfxsdk.log").read_text()


def test_other_loggers_are_quiet():
    loggers.update_other_loggers()

    assert logging.getLogger("urllib3").level == logging.getLevelName(conf.CFXSDK_OTHER_LOG_LEVEL)
