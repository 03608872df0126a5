from collections.abc import Iterator
import io
import logging

import pytest

from management_api.logging import configure_logging, get_logger


@pytest.fixture
def bare_root_logger() -> Iterator[logging.Logger]:
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers = []
    yield root
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_configure_logging_installs_one_handler(bare_root_logger: logging.Logger) -> None:
    stream = io.StringIO()

    configure_logging("DEBUG", stream=stream)
    configure_logging(logging.WARNING, stream=stream)

    assert len(bare_root_logger.handlers) == 1
    assert bare_root_logger.level == logging.WARNING

    get_logger("management_api.tests").warning("[IMPORT] hello")
    assert "[WARNING] management_api.tests: [IMPORT] hello" in stream.getvalue()
