"""Logging utilities for the catalog web app.

Writes one JSON object per API event to a daily JSONL file.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

__all__ = ["log_interaction", "LOG_DIR", "get_log_file"]

LOG_DIR = Path(os.getenv("API_LOG_DIR", str(Path(__file__).parent / "logs")))


def get_log_file() -> Path:
    return LOG_DIR / f"api_events_{datetime.now().strftime('%Y%m%d')}.jsonl"


def log_interaction(event_type: str, data: Dict[str, Any]) -> None:
    """Log an API event to the JSONL file.

    Args:
        event_type: Type of event (product_list, product_view, configuration_created, etc.)
        data: Event-specific data to log
    """
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_entry = {"timestamp": datetime.now().isoformat(), "event_type": event_type, **data}
    with open(get_log_file(), "a", encoding="utf-8") as f:
        f.write(json.dumps(log_entry, ensure_ascii=False, default=str) + "\n")
