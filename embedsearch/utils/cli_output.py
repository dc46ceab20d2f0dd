"""Schema-stamped JSON output for CLI commands.

Every JSON payload printed by the CLI carries ``schema_id``,
``schema_version``, ``producer`` and ``produced_at`` so downstream tools can
detect format changes.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from embedsearch import __version__


def json_response(
    schema_id: str,
    schema_version: int,
    **data: Any,
) -> str:
    """Create schema-wrapped JSON response for CLI output.

    Example:
        >>> json_response("search_results", 1, query="test", results=[])
        {
          "schema_id": "search_results",
          "schema_version": 1,
          "producer": "embedsearch-0.1.0",
          "produced_at": "2026-10-18T10:30:00+00:00",
          "query": "test",
          "results": []
        }
    """
    wrapped = {
        "schema_id": schema_id,
        "schema_version": schema_version,
        "producer": f"embedsearch-{__version__}",
        "produced_at": datetime.now(UTC).isoformat(),
        **data,
    }
    return json.dumps(wrapped, indent=2, default=str)
