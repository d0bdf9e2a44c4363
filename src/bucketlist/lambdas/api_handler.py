"""
API Gateway Lambda handler for the bucket list tracker.

This Lambda function exposes the activity store, the statistics engine and
the settings store as REST endpoints for the mobile client. Each request
loads the stores, performs one operation and waits for the write-through
to finish before the response is returned.

Functions:
    lambda_handler: Main entry point for API Gateway events
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..app import BucketListApp, create_app
from ..config import CORS_ORIGIN, ENVIRONMENT
from ..exceptions import (
    ActivityNotFoundError,
    ActivityValidationError,
    SettingsValidationError,
)
from ..services.achievements import achievements
from ..services.statistics import (
    FilterMode,
    filter_activities,
    memories,
    progress,
    sort_for_display,
    summarize,
)
from ..utils.logs import setup_logging

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    def __init__(self, error: str, details: str = ""):
        self.error = error
        self.details = details
        super().__init__(f"{error}: {details}")


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler for API Gateway events.

    Routes incoming HTTP requests to the store operation matching the HTTP
    method and resource path.

    Args:
        event: API Gateway event containing HTTP request data
        context: AWS Lambda runtime context

    Returns:
        HTTP response dictionary with statusCode, headers, and body

    Event Structure:
        {
            "httpMethod": "GET|POST|PATCH|DELETE|OPTIONS",
            "resource": "/activities|/activities/{id}|/activities/{id}/toggle|...",
            "pathParameters": {"id": "act_1f2e3d4c5b6a"},
            "queryStringParameters": {"filter": "pending"},
            "body": "{\"text\": \"Learn to surf\"}"
        }
    """
    try:
        _log_api_request(event)

        http_method = (event.get("httpMethod") or "").upper()
        if http_method == "OPTIONS":
            return _handle_cors_preflight()

        try:
            app = create_app()
        except Exception as e:
            _log_api_error("INIT_ERROR", str(e))
            return _create_error_response(500, "Service initialization failed", str(e))

        return asyncio.run(_dispatch(app, event))

    except Exception as e:
        _log_api_error("UNEXPECTED_ERROR", str(e), {"resource": event.get("resource")})
        return _create_error_response(500, "Internal Server Error", "Unexpected error occurred")


async def _dispatch(app: BucketListApp, event: Dict[str, Any]) -> Dict[str, Any]:
    http_method = (event.get("httpMethod") or "").upper()
    resource = event.get("resource", "")
    path_params = event.get("pathParameters") or {}
    query_params = event.get("queryStringParameters") or {}
    activity_id = path_params.get("id")

    await app.load()
    try:
        if resource == "/health" and http_method == "GET":
            return _handle_health_check(app)

        elif resource == "/activities" and http_method == "GET":
            return _handle_list_activities(app, query_params)

        elif resource == "/activities" and http_method == "POST":
            body = _parse_body(event.get("body"))
            activity = await app.activities.add(
                body.get("text", ""),
                category=body.get("category", "other"),
                location=body.get("location"),
            )
            return _create_response(201, {"activity": activity.to_storage_item()})

        elif resource == "/activities/{id}" and http_method == "GET":
            activity = app.activities.get(activity_id)
            return _create_response(200, {"activity": activity.to_storage_item()})

        elif resource == "/activities/{id}" and http_method == "PATCH":
            body = _parse_body(event.get("body"))
            activity = await app.activities.update_fields(activity_id, body)
            return _create_response(200, {"activity": activity.to_storage_item()})

        elif resource == "/activities/{id}" and http_method == "DELETE":
            activity = await app.activities.remove(activity_id)
            return _create_response(200, {"deleted": activity.to_storage_item()})

        elif resource == "/activities/{id}/toggle" and http_method == "POST":
            activity = await app.activities.toggle_completion(activity_id)
            return _create_response(200, {"activity": activity.to_storage_item()})

        elif resource == "/stats" and http_method == "GET":
            return _handle_get_stats(app)

        elif resource == "/memories" and http_method == "GET":
            items = memories(app.activities.snapshot())
            return _create_response(
                200,
                {"memories": [a.to_storage_item() for a in items], "count": len(items)},
            )

        elif resource == "/export" and http_method == "GET":
            return _create_response(
                200, {"activities": json.loads(app.activities.export_json())}
            )

        elif resource == "/settings" and http_method == "GET":
            return _create_response(200, {"settings": app.settings.snapshot().to_storage_item()})

        elif resource == "/settings" and http_method == "PATCH":
            body = _parse_body(event.get("body"))
            settings = await app.settings.update(body)
            return _create_response(200, {"settings": settings.to_storage_item()})

        elif resource == "/data" and http_method == "DELETE":
            await app.clear_all_data()
            return _create_response(200, {"message": "All data has been cleared"})

        else:
            return _create_error_response(
                404, "Not Found", f"Resource {resource} with method {http_method} not found"
            )

    except BadRequest as e:
        return _create_error_response(400, e.error, e.details)
    except (ActivityValidationError, SettingsValidationError) as e:
        return _create_error_response(400, "Validation Error", str(e))
    except ActivityNotFoundError as e:
        return _create_error_response(404, "Activity Not Found", str(e))
    finally:
        await app.flush()


def _handle_health_check(app: BucketListApp) -> Dict[str, Any]:
    health = {"status": "healthy", "environment": ENVIRONMENT}
    storage_check = getattr(app.storage, "health_check", None)
    if storage_check is not None:
        health["storage"] = storage_check()
        if health["storage"].get("status") != "healthy":
            health["status"] = "degraded"

    for store in (app.activities, app.settings):
        if store.last_persistence_error is not None:
            health["status"] = "degraded"
            health.setdefault("errors", []).append(str(store.last_persistence_error))

    return _create_response(200 if health["status"] == "healthy" else 503, health)


def _handle_list_activities(app: BucketListApp, query_params: Dict[str, str]) -> Dict[str, Any]:
    mode = query_params.get("filter", FilterMode.ALL.value)
    try:
        selected = filter_activities(app.activities.snapshot(), mode)
    except ValueError:
        valid_modes = [m.value for m in FilterMode]
        raise BadRequest("Invalid Filter", f"Filter must be one of: {', '.join(valid_modes)}")

    ordered = sort_for_display(selected)
    return _create_response(
        200,
        {
            "activities": [a.to_storage_item() for a in ordered],
            "count": len(ordered),
            "filter": FilterMode(mode).value,
        },
    )


def _handle_get_stats(app: BucketListApp) -> Dict[str, Any]:
    snapshot = app.activities.snapshot()
    stats = summarize(snapshot)
    return _create_response(
        200,
        {
            "stats": stats.model_dump(mode="json"),
            "progress": progress(snapshot).model_dump(mode="json"),
            "achievements": [a.model_dump(mode="json") for a in achievements(stats)],
        },
    )


def _parse_body(body: Optional[str]) -> Dict[str, Any]:
    if not body or body.strip() == "":
        raise BadRequest("Missing Request Body", "Request body is required")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise BadRequest("Invalid JSON", f"Request body is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise BadRequest("Invalid JSON", "Request body must be a JSON object")
    return data


def _handle_cors_preflight() -> Dict[str, Any]:
    return {"statusCode": 200, "headers": _get_cors_headers(), "body": ""}


def _create_response(status_code: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a standardized HTTP response with proper headers.

    Args:
        status_code: HTTP status code
        data: Response data to serialize as JSON

    Returns:
        HTTP response dictionary
    """
    return {
        "statusCode": status_code,
        "headers": {**_get_cors_headers(), "Content-Type": "application/json"},
        "body": json.dumps(data, indent=2, default=str),
    }


def _create_error_response(status_code: int, error: str, details: str = "") -> Dict[str, Any]:
    error_data = {
        "error": error,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status_code": status_code,
    }
    return _create_response(status_code, error_data)


def _get_cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Methods": "GET,POST,PATCH,DELETE,OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type,X-Amz-Date,Authorization,X-Api-Key,X-Amz-Security-Token",
        "Access-Control-Max-Age": "86400",
    }


def _log_api_request(event: Dict[str, Any]) -> None:
    """Log API request information without the request body."""
    request_context = event.get("requestContext") or {}
    log_data = {
        "event": "API_REQUEST",
        "httpMethod": event.get("httpMethod"),
        "resource": event.get("resource"),
        "requestId": request_context.get("requestId"),
        "sourceIp": (request_context.get("identity") or {}).get("sourceIp"),
    }
    query_params = event.get("queryStringParameters")
    if query_params:
        log_data["queryParams"] = query_params
    logger.info(json.dumps(log_data))


def _log_api_error(
    error_type: str, error_message: str, context: Optional[Dict[str, Any]] = None
) -> None:
    log_data = {"event": "API_ERROR", "errorType": error_type, "errorMessage": error_message}
    if context:
        log_data["context"] = {k: v for k, v in context.items() if k != "body"}
    logger.error(json.dumps(log_data, default=str))


setup_logging()
logger.info("API Handler Lambda initialized - Environment: %s", ENVIRONMENT)
