import sys

import pytest

from sprout.log.logger import configure
from sprout.settings import reset_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()
    configure(log_level="CRITICAL", output_file=sys.stderr, cache=False)
