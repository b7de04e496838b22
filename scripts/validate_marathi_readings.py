#!/usr/bin/env python3
import argparse, json, os, sys
from pathlib import Path
from jsonschema import Draft202012Validator

ROOT = Path(__file__).resolve().parents[1]
SCHEMA_PATH = ROOT / "schemas" / "marathi_reading.schema.json"
CONTENT_DIR = Path(os.getenv("CONTENT_DIR", str(ROOT / "content" / "readings-marathi")))

_validator = None

class RecordInvalid(ValueError):
    def __init__(self, errors):
        self.errors = errors
        super().__init__("; ".join(errors))

def validator() -> Draft202012Validator:
    global _validator
    if _validator is None:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        _validator = Draft202012Validator(schema)
    return _validator

def record_errors(record) -> list:
    out = []
    for err in validator().iter_errors(record):
        loc = "/".join(map(str, err.path)) or "<root>"
        out.append(f"{loc}: {err.message}")
    return out

def validate_record(record) -> None:
    errors = record_errors(record)
    if errors:
        raise RecordInvalid(errors)

def validate_file(path: Path) -> int:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print(f"[invalid] {path}: JSON decode error at line {e.lineno} col {e.colno}: {e.msg}")
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"[invalid] {path}: cannot read: {e}")
        return 1

    errors = record_errors(data)
    # the file name is the record's key
    if isinstance(data, dict) and data.get("date") != path.stem:
        errors.append(f"date: {data.get('date')!r} does not match file name {path.name}")
    for e in errors:
        print(f"[invalid] {path}: {e}")
    return 1 if errors else 0

def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Validate saved Marathi reading records")
    p.add_argument("paths", nargs="*", help="record files (default: every record under --content-dir)")
    p.add_argument("--content-dir", default=str(CONTENT_DIR))
    args = p.parse_args(argv)

    files = [Path(x) for x in args.paths] or sorted(Path(args.content_dir).glob("[0-9][0-9][0-9][0-9]/[0-9][0-9]/*.json"))
    if not files:
        print(f"[skip] no records under {args.content_dir}")
        return 0

    rc = 0
    for f in files:
        rc |= validate_file(f)
    if rc == 0:
        print(f"[ok] {len(files)} record{'s' if len(files) != 1 else ''} valid")
    return rc

if __name__ == "__main__":
    raise SystemExit(main())
