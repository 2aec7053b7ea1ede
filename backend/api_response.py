import json

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def json_response(status_code, body, headers=None):
    """API Gateway proxy response; CORS headers are always attached."""
    merged = dict(CORS_HEADERS)
    if headers:
        merged.update(headers)
    return {"statusCode": status_code, "headers": merged, "body": json.dumps(body)}


def count_response(count):
    return json_response(200, {"count": count}, {"Content-Type": "application/json"})


def error_response(message):
    return json_response(500, {"error": message})
