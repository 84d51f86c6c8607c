"""JSON export of load results.

Why JSON:
- Interoperability with scripts and other tools watching the account.
- Keeps the CLI output machine-readable without any rendering layer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.domain.models import ActionResult, LoadResult


def load_result_payload(result: LoadResult) -> dict[str, Any]:
    return {
        "status": result.status.value,
        "reason": result.reason.value if result.reason else None,
        "message": result.display_message(),
        "confirmations": [c.model_dump(mode="json") for c in result.confirmations],
    }


def action_result_payload(result: ActionResult) -> dict[str, Any]:
    return {
        "action": result.action.value,
        "confirmation_id": result.confirmation_id,
        "acknowledged": result.acknowledged,
        "error": result.error,
        "reload": load_result_payload(result.reload),
    }


def dumps(payload: dict[str, Any]) -> str:
    """Stable UTF-8 JSON text."""

    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n"


def export_load_result_json(*, result: LoadResult, output_path: Path) -> Path:
    """Write `LoadResult` as UTF-8 JSON with a stable layout."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(dumps(load_result_payload(result)), encoding="utf-8")
    return output_path
