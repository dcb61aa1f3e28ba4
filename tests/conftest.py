import pathlib
import sys

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from orgsync.config import get_settings  # noqa: E402


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Keep cached settings from leaking between tests."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


SAMPLE_OUTLINE = """\
* Work
   :PROPERTIES:
   :ID: 1
   :END:
** TODO [#A] Ship report
   SCHEDULED: <2024-03-01 Fri>
   :PROPERTIES:
   :ID: 10
   :END:
** DONE Call Bob
   :PROPERTIES:
   :ID: 11
   :END:
* Home
   :PROPERTIES:
   :ID: 2
   :END:
** TODO Buy milk
** TODO [#C] Fix sink
   SCHEDULED: <2024-03-04 Mon>
"""


@pytest.fixture
def sample_outline() -> str:
    return SAMPLE_OUTLINE
