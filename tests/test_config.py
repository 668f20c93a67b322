"""Tests for engine configuration and logging setup."""

import dataclasses
import logging

import pytest

from tiny_qsim import config
from tiny_qsim.config import (
    DensityMatrixConfiguration,
    DensityMatrixStrategy,
    StatevectorConfiguration,
    StatevectorStrategy,
)
from tiny_qsim.errors import TransformationInitError, TransformationInitErrorCode
from tiny_qsim.logging_config import setup_logging


@pytest.fixture
def logger_name():
    name = "tests.logging_config"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_defaults():
    assert StatevectorConfiguration().strategy is StatevectorStrategy.DIRECT
    assert DensityMatrixConfiguration().strategy is DensityMatrixStrategy.MATRIX
    assert config.TOLERANCE > 0


def test_named_constructors():
    assert StatevectorConfiguration.matrix(3).expansion_concurrency == 3
    assert StatevectorConfiguration.row(2).max_concurrency == 2
    assert StatevectorConfiguration.element().strategy is StatevectorStrategy.ELEMENT

    row = DensityMatrixConfiguration.row(calculation_concurrency=4, expansion_concurrency=2)
    assert (row.strategy, row.calculation_concurrency, row.expansion_concurrency) == \
        (DensityMatrixStrategy.ROW, 4, 2)


def test_configurations_are_frozen():
    with pytest.raises(dataclasses.FrozenInstanceError):
        StatevectorConfiguration().max_concurrency = 2


@pytest.mark.parametrize("make,code", [
    (lambda: StatevectorConfiguration.direct(0),
     TransformationInitErrorCode.MAX_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO),
    (lambda: StatevectorConfiguration.matrix(-1),
     TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO),
    (lambda: DensityMatrixConfiguration.row(calculation_concurrency=0),
     TransformationInitErrorCode.CALCULATION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO),
    (lambda: DensityMatrixConfiguration.matrix(0),
     TransformationInitErrorCode.EXPANSION_CONCURRENCY_HAS_TO_BE_BIGGER_THAN_ZERO),
])
def test_invalid_concurrency(make, code):
    with pytest.raises(TransformationInitError) as info:
        make()
    assert info.value.code is code


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        StatevectorConfiguration.row(0)


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def test_setup_logging_level(logger_name):
    logger = setup_logging(logger_name, level="DEBUG")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_setup_logging_replaces_handlers(logger_name):
    setup_logging(logger_name, level="INFO")
    logger = setup_logging(logger_name, level="ERROR")
    assert len(logger.handlers) == 1
    assert logger.level == logging.ERROR


def test_unknown_level_falls_back_to_info(logger_name):
    assert setup_logging(logger_name, level="VERBOSE").level == logging.INFO


def test_log_file(logger_name, tmp_path):
    log_file = tmp_path / "logs" / "tiny_qsim.log"
    logger = setup_logging(logger_name, level="DEBUG", log_file=log_file)
    logger.debug("statevector ready")

    for handler in logger.handlers:
        handler.flush()
    assert "statevector ready" in log_file.read_text()
    assert len(logger.handlers) == 2
