"""Shared helpers."""
import re
import threading
import time
from datetime import datetime, timezone

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")

_id_lock = threading.Lock()
_last_id = 0


def strip_code_fence(text: str) -> str:
    """Return the body of a ```json fenced block, or the text unchanged."""
    text = (text or "").strip()
    if "```" in text:
        match = _FENCE_RE.search(text)
        if match:
            return match.group(1).strip()
    return text


def next_result_id() -> str:
    """Millisecond timestamp id, bumped when two results land in the same millisecond."""
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        if candidate <= _last_id:
            candidate = _last_id + 1
        _last_id = candidate
        return str(candidate)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
