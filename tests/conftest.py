import logging

import pytest

from campusmap_lib.log_utils import resolve_topics


@pytest.fixture(autouse=True)
def restore_campusmap_logger():
    """Undo any handlers and levels installed by setup_logging."""
    logger = logging.getLogger("campusmap")
    handlers, level = logger.handlers[:], logger.level
    yield
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()
    for h in handlers:
        logger.addHandler(h)
    logger.setLevel(level)
    for topic in resolve_topics("all"):
        logging.getLogger(f"campusmap.{topic}").setLevel(logging.NOTSET)
