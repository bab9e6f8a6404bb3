"""
Test package initializer.

Puts the project root on sys.path so `app` and `tests.catalog_fixtures`
import without an editable install.
"""

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
