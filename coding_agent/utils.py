from __future__ import annotations
from pathlib import Path
from typing import Any, Iterable
import fnmatch, json, os, re

_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)

def jail_path(root: Path, p: str | Path) -> Path:
    pp = (root / p).resolve()
    if pp != root and not str(pp).startswith(str(root) + os.sep):
        raise PermissionError(f"path escapes project root: {p}")
    return pp

def match_any(path: Path, patterns: Iterable[str]) -> bool:
    s = path.as_posix()
    return any(fnmatch.fnmatch(s, pat) for pat in patterns)

def read_text(path: Path) -> str:
    """Read utf-8 text with line endings left exactly as they are on disk."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()

def atomic_write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with open(tmp, "wb") as f:
        f.write(data)
    os.replace(tmp, path)

def strip_code_fence(text: str) -> str:
    text = text.strip()
    m = _FENCE.match(text)
    return m.group(1).strip() if m else text

def load_json(text: str) -> tuple[Any, str | None]:
    """Decode a model reply; returns ``(value, None)`` or ``(None, error)``."""
    try:
        return json.loads(strip_code_fence(text)), None
    except json.JSONDecodeError as e:
        return None, str(e)

def truncate(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."
