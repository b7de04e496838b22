#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Daily reading records, one JSON file per date:

    {base}/YYYY/MM/YYYY-MM-DD.json
"""

from __future__ import annotations
import json, os, re, sys, tempfile, datetime as dt
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

YEAR_RE = re.compile(r"^\d{4}$")
MONTH_RE = re.compile(r"^\d{2}$")
FILE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}\.json$")

def atomic_write_json(path: Path, obj) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=path.name, dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(obj, f, ensure_ascii=False, indent=2)
            f.write("\n")
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.remove(tmp)

class ReadingsStore(ABC):
    """Records keyed by date. Subclasses only need to answer three questions."""

    @abstractmethod
    def latest_date(self) -> Optional[dt.date]:
        raise NotImplementedError

    @abstractmethod
    def exists(self, d: dt.date) -> bool:
        raise NotImplementedError

    @abstractmethod
    def save(self, record: Dict[str, Any]) -> str:
        raise NotImplementedError

class FileReadingsStore(ReadingsStore):
    def __init__(self, base_dir: Path):
        self.base_dir = Path(base_dir)

    def path_for(self, d: dt.date) -> Path:
        return self.base_dir / f"{d.year:04d}" / f"{d.month:02d}" / f"{d.isoformat()}.json"

    def exists(self, d: dt.date) -> bool:
        return self.path_for(d).is_file()

    def _last(self, parent: Path, pattern: re.Pattern) -> Optional[str]:
        names = sorted(p.name for p in parent.iterdir() if pattern.match(p.name))
        return names[-1] if names else None

    def latest_date(self) -> Optional[dt.date]:
        # Names are zero-padded, so the lexicographic maximum is the latest date.
        if not self.base_dir.is_dir():
            return None
        try:
            year = self._last(self.base_dir, YEAR_RE)
            if not year:
                return None
            month = self._last(self.base_dir / year, MONTH_RE)
            if not month:
                return None
            name = self._last(self.base_dir / year / month, FILE_RE)
            if not name:
                return None
            return dt.date.fromisoformat(name[:-len(".json")])
        except (OSError, ValueError) as e:
            print(f"[warn] could not scan {self.base_dir}: {e}", file=sys.stderr)
            return None

    def save(self, record: Dict[str, Any]) -> str:
        path = self.path_for(dt.date.fromisoformat(record["date"]))
        atomic_write_json(path, record)
        return str(path)

def resume_cursor(store: ReadingsStore, today: dt.date) -> dt.date:
    """First date the fetch loop should try."""
    cursor = store.latest_date() or today
    if store.exists(cursor):
        cursor += dt.timedelta(days=1)
    return cursor
