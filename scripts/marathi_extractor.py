#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Split a marathibiblereading.blogspot.com post into the four Mass readings.

The post body is a run of loose paragraphs. Sections are recognised by
Marathi marker phrases ("पहिले वाचन", "प्रतिसाद", "जयघोष", "शुभवर्तमान");
everything from the reflection ("चिंतन") after the Gospel onwards is ignored.
"""

from __future__ import annotations
import re, datetime as dt
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

POST_BODY_SELECTOR = "#post-body"
TITLE = "Marathi Bible Reading"

SECTIONS = ("firstReading", "psalm", "alleluia", "gospel")

# ===== Marker phrases =====
FIRST_READING_MARK = "पहिले वाचन"
PSALM_MARK = "प्रतिसाद"
ALLELUIA_MARKS = ("जयघोष", "आल्लेलूया", "आलेलुया")
GOSPEL_MARK = "शुभवर्तमान"
REFLECTION_MARK = "चिंतन"
ACCLAMATION_MARKS = ("प्रभूचा शब्द", "प्रभूचे हे शुभवर्तमान")
RESPONSE_MARKS = ("देवाला धन्यवाद", "तुझी स्तुती असो")

GOSPEL_HEADING_MAX = 100

DEVANAGARI_RE = re.compile(r"[\u0900-\u097F]")

class ExtractionError(Exception):
    """The page does not look like a readings post."""

# ===== HTML -> lines =====
def document_lines(html: str) -> List[str]:
    soup = BeautifulSoup(html, "html.parser")
    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(["div", "p"]):
        block.insert_after("\n")

    body = soup.select_one(POST_BODY_SELECTOR)
    if body is None:
        raise ExtractionError(f"no {POST_BODY_SELECTOR} in page")

    lines = [ln.strip() for ln in body.get_text().split("\n")]
    return [ln for ln in lines if ln and DEVANAGARI_RE.search(ln)]

# ===== Segmentation =====
@dataclass(frozen=True)
class SegmentState:
    current: Optional[str] = None
    sections: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: {k: () for k in SECTIONS})
    done: bool = False

    def push(self, section: Optional[str], line: str) -> "SegmentState":
        if section is None:
            return SegmentState(None, self.sections, self.done)
        sections = dict(self.sections)
        sections[section] = sections[section] + (line,)
        return SegmentState(section, sections, self.done)

def step(state: SegmentState, line: str) -> SegmentState:
    """Classify one line; returns the next state."""
    if REFLECTION_MARK in line and state.sections["gospel"]:
        return SegmentState(state.current, state.sections, done=True)

    if FIRST_READING_MARK in line:
        return state.push("firstReading", line)
    if line.strip().startswith(PSALM_MARK):
        return state.push("psalm", line)
    if any(mark in line for mark in ALLELUIA_MARKS):
        current = state.current
        # An acclamation quoted inside the first reading or gospel stays there.
        if current not in ("firstReading", "psalm", "gospel") or current == "psalm":
            current = "alleluia"
        return state.push(current, line)
    if GOSPEL_MARK in line and len(line) < GOSPEL_HEADING_MAX:
        return state.push("gospel", line)
    return state.push(state.current, line)

def segment_sections(lines: List[str]) -> Dict[str, List[str]]:
    state = SegmentState()
    for line in lines:
        state = step(state, line)
        if state.done:
            break
    return {k: list(v) for k, v in state.sections.items()}

# ===== Section -> reading =====
def parse_section(lines: List[str]) -> Dict[str, object]:
    if not lines:
        return {"heading": "", "reference": "", "verses": []}
    heading = lines[0]
    acclamation = None
    response = None
    verses: List[str] = []
    for line in lines[1:]:
        if any(mark in line for mark in ACCLAMATION_MARKS):
            if acclamation is None:
                acclamation = line
        elif any(mark in line for mark in RESPONSE_MARKS):
            if response is None:
                response = line
        else:
            verses.append(line)
    return {"heading": heading, "reference": heading, "verses": verses,
            "acclamation": acclamation, "response": response}

def _reading(rtype: str, parsed: Dict[str, object], heading_default: str = "", closing: bool = False) -> Dict[str, object]:
    out = {
        "type": rtype,
        "heading": parsed["heading"] or heading_default,
        "reference": parsed["reference"],
        "verses": parsed["verses"],
    }
    if closing:
        for k in ("acclamation", "response"):
            if k in parsed:
                out[k] = parsed[k]
    return out

def build_readings(sections: Dict[str, List[str]]) -> List[Dict[str, object]]:
    alleluia = sections.get("alleluia") or []
    return [
        _reading("First Reading", parse_section(sections.get("firstReading") or []), closing=True),
        _reading("Responsorial Psalm", parse_section(sections.get("psalm") or [])),
        {
            "type": "Alleluia",
            "heading": alleluia[0] if alleluia else "Alleluia",
            "reference": "",
            "verses": alleluia[1:],
        },
        _reading("Gospel", parse_section(sections.get("gospel") or []), heading_default="Gospel", closing=True),
    ]

def extract_record(html: str, d: dt.date, url: str) -> Dict[str, object]:
    sections = segment_sections(document_lines(html))
    return {
        "date": d.isoformat(),
        "url": url,
        "title": TITLE,
        "feast": "",
        "readings": build_readings(sections),
    }
