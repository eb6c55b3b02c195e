"""Test package for the ERP console.

The console's packages (``utils``, ``services``, ``ui``, ``modules``) are
namespace packages at the repository root.  Putting the root on ``sys.path``
lets the suite run from a plain checkout without an editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))
