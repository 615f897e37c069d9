#!/usr/bin/env python3
"""
Mock Lambda Runtime API Server

A Flask-based mock of the Runtime API control plane for local development.
Queue events through the admin endpoints and point the runtime client at
this server to run a handler end to end without a Lambda environment.

Usage:
    python scripts/mock_runtime_api.py

    # Or with custom port
    MOCK_RUNTIME_API_PORT=9002 python scripts/mock_runtime_api.py

Then, in another terminal:
    export AWS_LAMBDA_RUNTIME_API=127.0.0.1:9001
    export LAMBDA_TASK_ROOT=examples/greeting _HANDLER=handler.greet
    lambda-runtime-client

    curl -X POST localhost:9001/admin/events -d '{"firstName": "Ada"}'
    curl localhost:9001/admin/results
"""

import json
import os
import queue
import time
import uuid
from typing import Any, Dict, List

from flask import Flask, Response, jsonify, request

app = Flask(__name__)

API_PREFIX = "/2018-06-01/runtime"
FUNCTION_ARN = "arn:aws:lambda:us-east-1:123456789012:function:local-runtime"
DEFAULT_TIMEOUT_MS = 30000

# ============================================================================
# Mock State
# ============================================================================

PENDING_EVENTS: "queue.Queue[Dict[str, Any]]" = queue.Queue()

RESULTS: List[Dict[str, Any]] = []

INIT_ERRORS: List[Dict[str, Any]] = []


def decode_body() -> Any:
    """Decode the request body as JSON, falling back to text."""
    raw = request.get_data()
    try:
        return json.loads(raw)
    except ValueError:
        return raw.decode("utf-8", errors="replace")


# ============================================================================
# Runtime API Endpoints
# ============================================================================


@app.route(f"{API_PREFIX}/invocation/next", methods=["GET"])
def next_invocation():
    """Block until an event is queued, then hand it out."""
    event = PENDING_EVENTS.get()
    deadline_ms = int(time.time() * 1000) + event.get("timeout_ms", DEFAULT_TIMEOUT_MS)

    headers = {
        "Lambda-Runtime-Aws-Request-Id": event["request_id"],
        "Lambda-Runtime-Invoked-Function-Arn": FUNCTION_ARN,
        "Lambda-Runtime-Trace-Id": f"Root=1-{uuid.uuid4().hex[:8]}-{uuid.uuid4().hex[:24]};Sampled=0",
        "Lambda-Runtime-Deadline-Ms": str(deadline_ms),
    }
    if event.get("client_context") is not None:
        headers["Lambda-Runtime-Client-Context"] = json.dumps(event["client_context"])
    if event.get("identity") is not None:
        headers["Lambda-Runtime-Cognito-Identity"] = json.dumps(event["identity"])

    return Response(event["body"], status=200, headers=headers, mimetype="application/json")


@app.route(f"{API_PREFIX}/invocation/<request_id>/response/", methods=["POST"])
@app.route(f"{API_PREFIX}/invocation/<request_id>/response", methods=["POST"])
def post_response(request_id: str):
    """Record a successful result."""
    RESULTS.append(
        {
            "request_id": request_id,
            "status": "success",
            "content_type": request.content_type,
            "body": decode_body(),
        }
    )
    return jsonify({"status": "OK"}), 202


@app.route(f"{API_PREFIX}/invocation/<request_id>/error/", methods=["POST"])
@app.route(f"{API_PREFIX}/invocation/<request_id>/error", methods=["POST"])
def post_error(request_id: str):
    """Record a failed result."""
    RESULTS.append(
        {
            "request_id": request_id,
            "status": "error",
            "error_type": request.headers.get("Lambda-Runtime-Function-Error-Type"),
            "body": decode_body(),
        }
    )
    return jsonify({"status": "OK"}), 202


@app.route(f"{API_PREFIX}/init/error", methods=["POST"])
def post_init_error():
    """Record an initialization failure."""
    INIT_ERRORS.append({"body": decode_body()})
    return jsonify({"status": "OK"}), 202


# ============================================================================
# Admin Endpoints
# ============================================================================


@app.route("/admin/events", methods=["POST"])
def enqueue_event():
    """Queue an event; the request body becomes the event payload."""
    request_id = request.args.get("request_id") or str(uuid.uuid4())
    PENDING_EVENTS.put(
        {
            "request_id": request_id,
            "body": request.get_data(),
            "timeout_ms": int(request.args.get("timeout_ms", DEFAULT_TIMEOUT_MS)),
        }
    )
    return jsonify({"request_id": request_id}), 201


@app.route("/admin/results", methods=["GET"])
def list_results():
    """List posted results."""
    return jsonify({"results": RESULTS, "init_errors": INIT_ERRORS})


@app.route("/admin/reset", methods=["POST"])
def reset_state():
    """Drop queued events and recorded results."""
    while not PENDING_EVENTS.empty():
        PENDING_EVENTS.get_nowait()
    RESULTS.clear()
    INIT_ERRORS.clear()
    return jsonify({"status": "ok", "message": "State reset"})


# ============================================================================
# Main
# ============================================================================


def main():
    """Run the mock Runtime API server."""
    port = int(os.environ.get("MOCK_RUNTIME_API_PORT", 9001))
    host = os.environ.get("MOCK_RUNTIME_API_HOST", "127.0.0.1")

    print("=" * 60)
    print("Mock Lambda Runtime API")
    print("=" * 60)
    print(f"Starting on http://{host}:{port}")
    print()
    print("Set this environment variable to use with the runtime client:")
    print(f"  export AWS_LAMBDA_RUNTIME_API={host}:{port}")
    print()
    print("Admin endpoints:")
    print("  POST /admin/events   - Queue an event (body is the payload)")
    print("  GET  /admin/results  - List posted results")
    print("  POST /admin/reset    - Clear state")
    print("=" * 60)
    print()

    app.run(host=host, port=port, threaded=True)


if __name__ == "__main__":
    main()
