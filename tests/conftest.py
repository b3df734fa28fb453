import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.utils.logger import setup_logger


@pytest.fixture(autouse=True, scope="session")
def _test_logging(tmp_path_factory):
    """Send test-run logs to a temp dir instead of ./logs."""
    setup_logger("WARNING", log_dir=tmp_path_factory.mktemp("logs"))
