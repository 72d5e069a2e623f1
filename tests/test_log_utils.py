import logging

import pytest

from stockdesk.utils.log_utils import log_operation

logger = logging.getLogger('stockdesk.tests.log_utils')


def test_completion_logged_at_requested_level(caplog):
    caplog.set_level(logging.DEBUG, logger=logger.name)

    with log_operation(logger, '分类仓库.加载', level=logging.DEBUG) as op:
        op.set_message('3条')

    record = caplog.records[-1]
    assert record.levelno == logging.DEBUG
    assert record.getMessage().startswith('[分类仓库.加载] 完成: 3条')


def test_slow_operation_escalates_to_warning(caplog):
    caplog.set_level(logging.DEBUG, logger=logger.name)

    with log_operation(logger, '分类仓库.加载', level=logging.DEBUG, slow_seconds=0):
        pass

    assert caplog.records[-1].levelno == logging.WARNING


def test_failure_is_logged_and_reraised(caplog):
    caplog.set_level(logging.DEBUG, logger=logger.name)

    with pytest.raises(ValueError):
        with log_operation(logger, '分类仓库.同步隐式分类'):
            raise ValueError('boom')

    assert caplog.records[-1].levelno == logging.ERROR


def test_repository_passes_slow_threshold(repository, caplog):
    caplog.set_level(logging.DEBUG, logger='stockdesk.services.category')
    repository.slow_seconds = 0

    repository.load()

    loads = [r for r in caplog.records if '[分类仓库.加载]' in r.getMessage()]
    assert loads[-1].levelno == logging.WARNING
