from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from lspextract.host import HostEnvironment, HostSettings, build_host_environment
from tests._fixtures.config_builder import ConfigDirBuilder


@pytest.fixture(autouse=True)
def _reset_lspextract_logger() -> Iterator[None]:
    """Drop handlers bound to a test's captured streams once the test finishes."""
    yield
    logger = logging.getLogger("lspextract")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def config_builder(tmp_path: Path) -> ConfigDirBuilder:
    """Provide a configuration directory builder rooted at the pytest tmp_path."""
    return ConfigDirBuilder(tmp_path)


@pytest.fixture
def host() -> HostEnvironment:
    """Provide a host environment with the default canned answers."""
    return build_host_environment(HostSettings())
