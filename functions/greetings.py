import json
from datetime import datetime, timezone

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "OPTIONS,POST,GET",
}


def utc_timestamp():
    # e.g. 2024-05-01T12:00:00.123Z
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def request_id(event):
    context = (event or {}).get("requestContext") or {}
    return context.get("requestId") or "unknown"


def greeting(event, message):
    body = {
        "message": message,
        "timestamp": utc_timestamp(),
        "requestId": request_id(event),
    }
    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json", **CORS_HEADERS},
        "body": json.dumps(body),
    }
