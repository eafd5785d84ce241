"""
Pytest configuration.

Puts the project root on sys.path so tests import `app`, `domain`,
`repositories` and `services` without an installed package, and marks the
run as a testing environment before settings are first loaded.
"""

import os
import sys
from pathlib import Path

os.environ.setdefault("ENVIRONMENT", "testing")

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
