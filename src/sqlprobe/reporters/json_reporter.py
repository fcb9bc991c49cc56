"""JSON report exporter."""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlprobe import __version__

if TYPE_CHECKING:
    from sqlprobe.probe import ProbeResult


class JSONReporter:
    """Export probe results as machine-readable JSON.

    Produces a structured document suitable for CI jobs or monitoring
    scripts. Passwords are always masked.
    """

    def __init__(self, results: list[ProbeResult]) -> None:
        self.results = results

    def build(self) -> dict[str, Any]:
        """Return the report as a dict."""
        return {
            "metadata": {
                "tool": "SQLProbe",
                "version": __version__,
                "generated_at": datetime.now().isoformat(),
            },
            "summary": {
                "total": len(self.results),
                "succeeded": sum(1 for r in self.results if r.succeeded),
                "failed": sum(1 for r in self.results if not r.succeeded),
            },
            "servers": [r.to_dict() for r in self.results],
        }

    def render(self) -> str:
        return json.dumps(self.build(), indent=2, default=str, ensure_ascii=False)

    def export(self, output_path: str) -> None:
        """Export report to JSON file.

        Args:
            output_path: Path to write the JSON file.
        """
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.render())
