#!/usr/bin/env python3
"""
Generates public/today.json (saint of the day) from the Marian calendar page.
"""
from __future__ import annotations
import argparse, os, re, sys, datetime as dt
from pathlib import Path
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

import requests
from bs4 import BeautifulSoup

try:
    from scripts.readings_store import atomic_write_json
except ModuleNotFoundError:
    from readings_store import atomic_write_json

ROOT = Path(__file__).resolve().parents[1]
APP_TZ = os.getenv("APP_TZ", "Asia/Kolkata")
CALENDAR_URL = os.getenv("MARIAN_CALENDAR_URL",
                         "https://www.jesusreignsmarianmovement.faith/web/calendar.php?id=2807996&s=1")
TODAY_OUTPUT = Path(os.getenv("TODAY_OUTPUT", str(ROOT / "public" / "today.json")))
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", "30"))

HEADERS = {"User-Agent": "MarathiReadingsBot/1.0"}

MONTHS = {
    "JANUARY": 1, "FEBRUARY": 2, "MARCH": 3, "APRIL": 4, "MAY": 5, "JUNE": 6,
    "JULY": 7, "AUGUST": 8, "SEPTEMBER": 9, "OCTOBER": 10, "NOVEMBER": 11, "DECEMBER": 12,
}
DATE_RE = re.compile(r"(\d+)\s+([A-Z]+),\s+(\d{4})", re.I)
TITLE_RE = re.compile(r"SAINT|BLESSED|FEAST|MEMORIAL", re.I)
PRAYER_RE = re.compile(r"PRAYER:\s*", re.I)

DEFAULT_TITLE = "Saint of the Day"
DEFAULT_SUMMARY = "Today the Church honors this saint."

def log(*args):
    if os.getenv("VERBOSE", "1") != "0":
        print("[today]", *args, flush=True)

def parse_calendar_date(text: str) -> Optional[str]:
    """'10 JANUARY, 2026 - SATURDAY' -> '2026-01-10'"""
    m = DATE_RE.search(text or "")
    if not m:
        return None
    day, month, year = m.groups()
    num = MONTHS.get(month.upper())
    if not num:
        return None
    try:
        return dt.date(int(year), num, int(day)).isoformat()
    except ValueError:
        return None

def utc_timestamp() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

def parse_marian_calendar(html: str, today: dt.date) -> Optional[Dict[str, Any]]:
    soup = BeautifulSoup(html, "html.parser")
    article = soup.select_one("article.content")
    if article is None:
        return None

    h4 = article.find("h4")
    date = parse_calendar_date(h4.get_text().strip() if h4 else "") or today.isoformat()

    title = DEFAULT_TITLE
    for h3 in article.find_all("h3"):
        text = h3.get_text().strip()
        if text and text != "SAINT OF THE DAY" and TITLE_RE.search(text):
            title = text
            break

    ps = [p.get_text().strip() for p in article.find_all("p")]
    subtitle = ps[0] if ps else ""
    paragraphs = [t for t in ps if len(t) > 50]
    prayer = next((PRAYER_RE.sub("", t, count=1) for t in ps if "PRAYER:" in t), "")

    blocks: List[Dict[str, str]] = [{"type": "heading", "value": title}]
    if subtitle and subtitle != title:
        blocks.append({"type": "text", "value": subtitle})
    blocks.extend({"type": "text", "value": t} for t in paragraphs[:3])
    if prayer:
        blocks.append({"type": "heading", "value": "Prayer"})
        blocks.append({"type": "text", "value": prayer})

    return {
        "date": date,
        "calendar": "general_roman",
        "source": "marian_calendar",
        "observance": {
            "title": title,
            "type": "saint",
            "rank": "memorial",
            "color": "white",
            "season": "Ordinary Time",
            "isSunday": dt.date.fromisoformat(date).weekday() == 6,
            "isTransferred": False,
        },
        "saints": [title],
        "suppressedObservances": [],
        "summary": paragraphs[0] if paragraphs else DEFAULT_SUMMARY,
        "blocks": blocks,
        "lastUpdated": utc_timestamp(),
    }

def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Write today.json from the Marian calendar")
    p.add_argument("--url", default=CALENDAR_URL)
    p.add_argument("--out", default=str(TODAY_OUTPUT))
    args = p.parse_args(argv)

    try:
        r = requests.get(args.url, headers=HEADERS, timeout=REQUEST_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        print(f"[error] fetching {args.url}: {e}", file=sys.stderr)
        return 1

    snapshot = parse_marian_calendar(r.text, dt.datetime.now(ZoneInfo(APP_TZ)).date())
    if snapshot is None:
        print(f"[warn] no article.content in {args.url}; {args.out} left unchanged", file=sys.stderr)
        return 1

    out = Path(args.out)
    atomic_write_json(out, snapshot)
    log("wrote", out)
    log("date:", snapshot["date"])
    log("title:", snapshot["observance"]["title"])
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
