#!/usr/bin/env python3
"""
Send the "daily reading is ready" push to the app's topic.

FIREBASE_SERVICE_ACCOUNT holds the service-account JSON, either raw or
base64-encoded.
Exit status: 0 when FCM accepted the message, 1 otherwise.
"""
from __future__ import annotations
import argparse, base64, binascii, json, os, sys
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, messaging

FCM_TOPIC = os.getenv("FCM_TOPIC", "daily_readings")

TITLE = "🕊️ A Moment of Peace"
BODY = "Your daily reading is ready. Take a moment for your soul today."
# Read by the app from the intent extras when it was in the background.
DATA = {
    "NAVIGATE_TO": "daily-readings",
    "DEEP_LINK": "saints://daily-readings",
}

class ConfigError(Exception):
    pass

def load_service_account(raw: Optional[str]) -> Dict[str, Any]:
    raw = (raw or "").strip()
    if not raw:
        raise ConfigError("FIREBASE_SERVICE_ACCOUNT is not set")
    if not raw.startswith("{"):
        try:
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ConfigError(f"FIREBASE_SERVICE_ACCOUNT is neither JSON nor base64 JSON: {e}") from e
    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigError(f"FIREBASE_SERVICE_ACCOUNT is not valid JSON: {e.msg}") from e
    if not isinstance(info, dict) or info.get("type") != "service_account":
        raise ConfigError("FIREBASE_SERVICE_ACCOUNT is not a service account key")
    return info

def build_message(topic: str = FCM_TOPIC) -> messaging.Message:
    return messaging.Message(
        notification=messaging.Notification(title=TITLE, body=BODY),
        data=dict(DATA),
        topic=topic,
        android=messaging.AndroidConfig(
            priority="high",
            notification=messaging.AndroidNotification(priority="high"),
        ),
    )

def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Send the daily readings push notification")
    p.add_argument("--topic", default=FCM_TOPIC)
    p.add_argument("--dry-run", action="store_true", help="let FCM validate the message without delivering it")
    args = p.parse_args(argv)

    try:
        info = load_service_account(os.getenv("FIREBASE_SERVICE_ACCOUNT"))
        app = firebase_admin.initialize_app(credentials.Certificate(info))
    except (ConfigError, ValueError) as e:
        print(f"[error] {e}", file=sys.stderr)
        return 1

    try:
        message_id = messaging.send(build_message(args.topic), dry_run=args.dry_run, app=app)
    except Exception as e:
        print(f"[error] sending to topic {args.topic!r} failed: {e}", file=sys.stderr)
        return 1

    print(f"[ok] sent to topic {args.topic!r}: {message_id}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
