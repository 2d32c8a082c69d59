from __future__ import annotations

import logging

import pytest


@pytest.fixture
def restore_root_logger():
    # setup_logging() replaces the handlers on the root logger.
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
