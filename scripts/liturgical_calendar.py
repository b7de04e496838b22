#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Source URLs for marathibiblereading.blogspot.com.

Weekday posts are named after the weekday and day of month
(marathi-bible-reading-tuesday-13th.html). Sundays of Ordinary Time before
Lent are named after the Sunday instead (marathi-bible-reading-ordinary-second.html).
"""

from __future__ import annotations
import os, math, datetime as dt
from dataclasses import dataclass
from typing import Optional

READINGS_BASE_URL = os.getenv("READINGS_BASE_URL", "https://marathibiblereading.blogspot.com").rstrip("/")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

ORDINAL_WORDS = [
    "", "first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth",
    "eleventh", "twelfth", "thirteenth", "fourteenth", "fifteenth", "sixteenth", "seventeenth",
    "eighteenth", "nineteenth", "twentieth",
    "twenty-first", "twenty-second", "twenty-third", "twenty-fourth", "twenty-fifth", "twenty-sixth",
    "twenty-seventh", "twenty-eighth", "twenty-ninth", "thirtieth",
    "thirty-first", "thirty-second", "thirty-third", "thirty-fourth",
]

@dataclass(frozen=True)
class LiturgicalContext:
    season: str
    week: int

def is_sunday(d: dt.date) -> bool: return d.weekday() == 6

# ===== Movable feasts =====
def easter(year: int) -> dt.date:
    """Gregorian Easter Sunday (anonymous algorithm)."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return dt.date(year, month, day + 1)

def ash_wednesday(year: int) -> dt.date:
    return easter(year) - dt.timedelta(days=46)

def epiphany(year: int) -> dt.date:
    """Sunday between 2 and 8 January."""
    d = dt.date(year, 1, 1)
    while d.month == 1:
        if is_sunday(d) and 2 <= d.day <= 8:
            break
        d += dt.timedelta(days=1)
    return d

def liturgical_context(d: dt.date) -> Optional[LiturgicalContext]:
    """Ordinary Time week for dates between Epiphany and Ash Wednesday, else None."""
    start = epiphany(d.year)
    if not (start < d < ash_wednesday(d.year)):
        return None
    week = math.ceil((d - start).days / 7)
    if week >= 1:
        return LiturgicalContext("ordinary", week)
    return None

# ===== Naming helpers =====
def ordinal_suffix(day: int) -> str:
    if 3 < day < 21:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")

def ordinal_word(n: int) -> str:
    if 1 <= n < len(ORDINAL_WORDS):
        return ORDINAL_WORDS[n]
    return str(n)

def day_name(d: dt.date) -> str:
    return WEEKDAYS[d.weekday()]

def reading_url(d: dt.date, base: str = READINGS_BASE_URL) -> str:
    prefix = f"{base}/{d.year}/{d.month:02d}/marathi-bible-reading"
    if is_sunday(d):
        ctx = liturgical_context(d)
        if ctx and ctx.season == "ordinary":
            return f"{prefix}-{ctx.season}-{ordinal_word(ctx.week)}.html"
    return f"{prefix}-{day_name(d)}-{d.day}{ordinal_suffix(d.day)}.html"

if __name__ == "__main__":
    import sys
    target = dt.date.fromisoformat(sys.argv[1]) if len(sys.argv) > 1 else dt.date.today()
    print(reading_url(target))
