import os
import sys

import pytest

# Ensure repo-local imports (e.g., `import chesscore`) resolve without extra setup.
src_dir = os.path.abspath(os.path.dirname(__file__))
if src_dir not in sys.path:
    sys.path.insert(0, src_dir)


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "-S",
        "--search",
        action="store_true",
        default=False,
        dest="run_search_slow",
        help="Run tests marked with @pytest.mark.search_slow (deeper searches)",
    )


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    if not config.getoption("run_search_slow"):
        skip_slow = pytest.mark.skip(
            reason="use -S/--search to enable deeper search tests"
        )
        for item in items:
            if "search_slow" in item.keywords:
                item.add_marker(skip_slow)
