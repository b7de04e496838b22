#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Fetch Marathi daily readings forward from the last saved date.

- Resumes after the newest content/readings-marathi/YYYY/MM/YYYY-MM-DD.json
  (or from today when nothing is saved yet).
- Fetches one day at a time until the blog answers 404 (not published yet),
  any other error, or MAX_DAYS attempts (never more than 30).
- A record is written only after the page parsed and validated.

Usage (from repo root):
  python3 -m scripts.fetch_marathi_readings
  python3 -m scripts.fetch_marathi_readings --start 2026-01-10 --max-days 3 --dry-run
"""

from __future__ import annotations
import argparse, json, os, sys, time, datetime as dt
from pathlib import Path
from typing import Callable, Dict, Optional
from zoneinfo import ZoneInfo

import requests

try:
    from scripts.liturgical_calendar import reading_url
    from scripts.marathi_extractor import ExtractionError, extract_record
    from scripts.readings_store import FileReadingsStore, ReadingsStore, resume_cursor
    from scripts.validate_marathi_readings import RecordInvalid, validate_record
except ModuleNotFoundError:
    # run from inside scripts/
    from liturgical_calendar import reading_url
    from marathi_extractor import ExtractionError, extract_record
    from readings_store import FileReadingsStore, ReadingsStore, resume_cursor
    from validate_marathi_readings import RecordInvalid, validate_record

# ===== Config =====
ROOT = Path(__file__).resolve().parents[1]
APP_TZ = os.getenv("APP_TZ", "Asia/Kolkata")
CONTENT_DIR = Path(os.getenv("CONTENT_DIR", str(ROOT / "content" / "readings-marathi")))
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))
FETCH_DELAY = float(os.getenv("FETCH_DELAY", "1.0"))
# MAX_DAYS can only lower this
HARD_LIMIT = 30
MAX_DAYS = int(os.getenv("MAX_DAYS", str(HARD_LIMIT)))

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
                  "AppleWebKit/537.36 (KHTML, like Gecko) "
                  "Chrome/120.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "mr-IN,mr;q=0.9,en;q=0.5",
}

def log(*a):
    if os.getenv("VERBOSE", "1") != "0":
        print("[info]", *a, flush=True)

def today_local() -> dt.date: return dt.datetime.now(ZoneInfo(APP_TZ)).date()

# ===== Errors =====
class NotFound(Exception):
    """The blog has no post for this date (yet)."""

class FetchError(Exception):
    pass

# ===== HTTP =====
def fetch_html(url: str) -> str:
    try:
        r = requests.get(url, headers=HEADERS, timeout=REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise FetchError(f"GET {url} failed: {e}") from e
    if r.status_code == 404:
        raise NotFound(url)
    try:
        r.raise_for_status()
    except requests.HTTPError as e:
        raise FetchError(str(e)) from e
    return r.text

class Throttle:
    """Keep at least `min_interval` seconds between consecutive requests."""

    def __init__(self, min_interval: float, sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic):
        self.min_interval = min_interval
        self.sleep = sleep
        self.clock = clock
        self._last: Optional[float] = None

    def wait(self) -> None:
        if self._last is not None:
            elapsed = self.clock() - self._last
            if elapsed < self.min_interval:
                self.sleep(self.min_interval - elapsed)
        self._last = self.clock()

# ===== Loop =====
def fetch_reading(d: dt.date, fetch: Callable[[str], str] = fetch_html) -> Dict[str, object]:
    url = reading_url(d)
    log(f"checking {d.isoformat()} at {url}")
    record = extract_record(fetch(url), d, url)
    validate_record(record)
    return record

def run(store: ReadingsStore, start: dt.date, fetch: Callable[[str], str] = fetch_html,
        max_days: int = MAX_DAYS, throttle: Optional[Throttle] = None, dry_run: bool = False) -> int:
    """Fetch forward from `start`; returns the number of records saved."""
    throttle = throttle or Throttle(FETCH_DELAY)
    cursor = start
    saved = 0
    for _ in range(min(max_days, HARD_LIMIT)):
        throttle.wait()
        try:
            record = fetch_reading(cursor, fetch)
        except NotFound as e:
            log(f"404 for {e}; stopping")
            break
        except ExtractionError as e:
            print(f"[warn] {cursor.isoformat()}: {e}; stopping", file=sys.stderr)
            break
        except RecordInvalid as e:
            print(f"[error] {cursor.isoformat()}: parsed record invalid: {e}; stopping", file=sys.stderr)
            break
        except FetchError as e:
            print(f"[error] {cursor.isoformat()}: {e}; stopping", file=sys.stderr)
            break
        except Exception as e:
            print(f"[error] {cursor.isoformat()}: unexpected {type(e).__name__}: {e}; stopping", file=sys.stderr)
            break

        if dry_run:
            print(json.dumps(record, ensure_ascii=False, indent=2))
        else:
            print(f"[ok] saved {store.save(record)}")
        saved += 1
        cursor += dt.timedelta(days=1)
    return saved

def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    p.add_argument("--content-dir", default=str(CONTENT_DIR))
    p.add_argument("--start", help="YYYY-MM-DD; default: day after the newest saved record")
    p.add_argument("--max-days", type=int, default=MAX_DAYS)
    p.add_argument("--delay", type=float, default=FETCH_DELAY, help="minimum seconds between requests")
    p.add_argument("--dry-run", action="store_true")
    return p.parse_args(argv)

def main(argv=None) -> int:
    args = parse_args(argv)
    store = FileReadingsStore(Path(args.content_dir))
    if args.start:
        start = dt.date.fromisoformat(args.start)
    else:
        start = resume_cursor(store, today_local())

    log(f"tz={APP_TZ} dir={args.content_dir} start={start.isoformat()} max_days={args.max_days}")
    saved = run(store, start, max_days=args.max_days, throttle=Throttle(args.delay), dry_run=args.dry_run)
    log(f"done; {saved} new record{'s' if saved != 1 else ''}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
