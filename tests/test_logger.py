"""
Tests for logging infrastructure.
"""

import logging

from discrete_hmm.hmm import forward_backward, model, viterbi
from discrete_hmm.logger import (
    configure_logging,
    disable_file_logging,
    enable_file_logging,
    get_hmm_logger,
    get_logger,
    get_training_logger,
    set_log_level,
)


class TestLoggers:
    """Logger naming and configuration."""

    def test_names_are_namespaced(self):
        assert get_logger('custom').name == 'discrete_hmm.custom'
        assert get_logger('discrete_hmm.hmm.model').name == 'discrete_hmm.hmm.model'
        assert get_hmm_logger().name == 'discrete_hmm.hmm'
        assert get_training_logger().name == 'discrete_hmm.training'

    def test_root_name_not_doubled(self):
        assert get_logger('discrete_hmm').name == 'discrete_hmm'
        assert get_logger('discrete_hmmx').name == 'discrete_hmm.discrete_hmmx'

    def test_inference_modules_share_hmm_logger(self):
        assert model.logger is get_hmm_logger()
        assert forward_backward.logger is get_hmm_logger()
        assert viterbi.logger is get_hmm_logger()

    def test_configure_logging_replaces_handlers(self):
        root = configure_logging()
        configure_logging()

        assert root is logging.getLogger('discrete_hmm')
        assert len(root.handlers) == 1
        assert root.propagate is False

    def test_set_level(self):
        try:
            set_log_level('DEBUG')
            assert logging.getLogger('discrete_hmm').level == logging.DEBUG
        finally:
            set_log_level('INFO')

    def test_file_logging(self, temp_dir):
        log_file = temp_dir / "logs" / "hmm.log"
        set_log_level('INFO')
        try:
            enable_file_logging(str(log_file))
            get_logger('test').info("written to file")
            for handler in logging.getLogger('discrete_hmm').handlers:
                handler.flush()

            assert log_file.exists()
            assert "written to file" in log_file.read_text()
        finally:
            disable_file_logging()

        assert not any(isinstance(h, logging.FileHandler)
                       for h in logging.getLogger('discrete_hmm').handlers)
