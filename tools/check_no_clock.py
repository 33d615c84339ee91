from __future__ import annotations

"""Fail-fast grep to prevent direct wall-clock reads.

Replay and validation must stay deterministic: trade timestamps are inputs.
Only trade_time.py may read the clock; callers get it through
trade_time.utc_now().

Run:
  python -m tools.check_no_clock

Exit code:
  0 - clean
  1 - forbidden pattern found
"""

import os
import re
from pathlib import Path
from typing import Iterator, List, Tuple


FORBIDDEN_PATTERNS = [
    # datetime/date
    r"\bdate\.today\s*\(",
    r"\bdatetime\.now\s*\(",
    r"\bdatetime\.utcnow\s*\(",
    # time
    r"\btime\.time\s*\(",
    r"\btime\.monotonic\s*\(",
]

EXCLUDE_DIRS = {
    ".git",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
    "tests",
}

EXCLUDE_FILES = {
    # Centralized clock module.
    "trade_time.py",
    # This checker itself.
    "check_no_clock.py",
}


def iter_py_files(root: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        dn = Path(dirpath)
        dirnames[:] = [d for d in dirnames if d not in EXCLUDE_DIRS]
        for fn in filenames:
            if not fn.endswith(".py"):
                continue
            if fn in EXCLUDE_FILES:
                continue
            yield dn / fn


def find_clock_usage(root: Path) -> List[Tuple[Path, int, str, str]]:
    compiled = [re.compile(p) for p in FORBIDDEN_PATTERNS]
    hits = []
    for fp in iter_py_files(root):
        text = fp.read_text(encoding="utf-8")
        for i, line in enumerate(text.splitlines(), start=1):
            for rx in compiled:
                if rx.search(line):
                    hits.append((fp.relative_to(root), i, line.strip(), rx.pattern))
    return hits


def main() -> int:
    root = Path(__file__).resolve().parents[1]
    hits = find_clock_usage(root)

    if not hits:
        print("[OK] No direct clock usage found.")
        return 0

    print("[FAIL] Direct clock usage found:\n")
    for rel, ln, line, pat in hits:
        print(f"- {rel}:{ln}: {line}")
        print(f"  matched: {pat}")
    print("\nFix: route through trade_time.py.")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
