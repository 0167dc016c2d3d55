"""Metadata flattening shared by vector store adapters.

Vector indexes accept only scalar payload values.  The full metadata is
kept verbatim by the data source; the vector payload is a filterable copy.
"""

from __future__ import annotations

import json
from typing import Any

_SCALAR_TYPES = (str, int, float, bool)


def flatten_metadata(metadata: dict[str, Any]) -> dict[str, str | int | float | bool]:
    """Return *metadata* with scalars kept, ``None`` dropped, the rest JSON-encoded."""
    flat: dict[str, str | int | float | bool] = {}
    for key, value in metadata.items():
        if value is None:
            continue
        if isinstance(value, _SCALAR_TYPES):
            flat[str(key)] = value
        else:
            flat[str(key)] = json.dumps(value, sort_keys=True, default=str)
    return flat
