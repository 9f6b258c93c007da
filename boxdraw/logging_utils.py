"""boxdraw.logging_utils
=========================

Simple logging utilities, mainly for recording failed round trips so an undraw
strategy can be audited later.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List

from .constants import MISMATCH_LOG

if TYPE_CHECKING:  # pragma: no cover
    from .oracle import Mismatch


def log_mismatch(mismatch: "Mismatch", path: str = MISMATCH_LOG, label: str | None = None) -> Dict[str, Any]:
    """Append a JSON line describing ``mismatch`` to ``path`` and return it."""

    diff = mismatch.diff()
    entry = {
        "label": label,
        "signature": mismatch.script.short_signature(),
        "mismatch_count": diff["mismatch_count"],
        "mismatch_coords": diff["mismatch_coords"],
        "goal": mismatch.goal,
        "produced": mismatch.produced,
        "script": mismatch.script.to_dict(),
    }
    with Path(path).open("a") as handle:
        handle.write(json.dumps(entry) + "\n")
    return entry


def load_mismatch_log(path: str = MISMATCH_LOG) -> List[Dict[str, Any]]:
    """Read every entry written by :func:`log_mismatch`; missing files are empty."""

    log_path = Path(path)
    if not log_path.exists():
        return []
    return [json.loads(line) for line in log_path.read_text().splitlines() if line.strip()]


__all__ = ["log_mismatch", "load_mismatch_log"]
