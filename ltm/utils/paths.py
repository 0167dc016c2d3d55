"""Default storage locations for backends constructed without a path.

Every generated path lives under a single memory home folder
(``~/memory`` unless ``LTM_MEMORY_HOME`` or an explicit *home* says
otherwise) so one install keeps all of its stores side by side.
"""

from __future__ import annotations

import os
import secrets
import string
from pathlib import Path

_ALPHABET = string.ascii_lowercase + string.digits
_DEFAULT_FOLDER = "memory"


def generate_name(length: int = 10) -> str:
    """Return a random lowercase alphanumeric name of *length* characters."""
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def memory_home(home: str | Path | None = None) -> Path:
    """Create (if needed) and return the memory home folder."""
    if home:
        root = Path(home).expanduser()
    elif os.environ.get("LTM_MEMORY_HOME"):
        root = Path(os.environ["LTM_MEMORY_HOME"]).expanduser()
    else:
        root = Path.home() / _DEFAULT_FOLDER
    root.mkdir(parents=True, exist_ok=True)
    return root


def memory_subfolder(name: str, home: str | Path | None = None) -> Path:
    """Create (if needed) and return ``<memory home>/<name>``."""
    folder = memory_home(home) / name
    folder.mkdir(parents=True, exist_ok=True)
    return folder
