import os
import sys
from typing import List

import pytest

# Ensure repo-local imports (e.g., `import breakthrough`) resolve without an install.
root_dir = os.path.abspath(os.path.dirname(__file__))
if root_dir not in sys.path:
    sys.path.insert(0, root_dir)


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "-S",
        "--slow",
        action="store_true",
        default=False,
        dest="run_slow",
        help="Run tests marked with @pytest.mark.slow (statistical search checks)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: List[pytest.Item]) -> None:
    if config.getoption("run_slow"):
        return
    skip_slow = pytest.mark.skip(reason="use -S/--slow to enable slow search checks")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture(autouse=True)
def fresh_config():
    """Each test starts from a configuration rebuilt from its own environment."""
    from breakthrough.config import reset_config

    reset_config()
    yield
    reset_config()
