#!/usr/bin/env python3
"""
Local Integration Test Harness

Runs the runtime loop with the example greeting handler against the mock
Runtime API. This exercises the real HTTP exchanges without a Lambda
environment.

Usage:
    # Start the mock Runtime API in one terminal:
    python scripts/mock_runtime_api.py

    # Run the integration test in another terminal:
    python scripts/local_integration_test.py

    # Or against a different mock address:
    python scripts/local_integration_test.py --runtime-api 127.0.0.1:9002

Environment Variables:
    AWS_LAMBDA_RUNTIME_API - host:port of the mock Runtime API (default: 127.0.0.1:9001)
    LOG_LEVEL              - Powertools log level (default: DEBUG)
"""

import argparse
import json
import os
import sys
import time
from typing import Any, Dict, List

import requests

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Add src directory to path for imports
sys.path.insert(0, os.path.join(ROOT, "src"))

# Set environment before imports
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "lambda-runtime-client-local")
os.environ.setdefault("LOG_LEVEL", "DEBUG")

EVENTS = [
    {"firstName": "Ada"},
    {"firstName": "Grace"},
    {"lastName": "Hopper"},
]


def enqueue_events(base_url: str, events: List[Dict[str, Any]]) -> List[str]:
    """
    Queue events on the mock Runtime API.

    Returns:
        Request ids assigned to the events, in order
    """
    request_ids = []
    for index, event in enumerate(events):
        response = requests.post(
            f"{base_url}/admin/events",
            params={"request_id": f"local-{index}"},
            data=json.dumps(event),
            timeout=5,
        )
        response.raise_for_status()
        request_ids.append(response.json()["request_id"])
    return request_ids


def run_invocations(runtime_api: str, count: int) -> int:
    """
    Serve ``count`` invocations with the greeting handler.

    Returns:
        Number of results posted successfully
    """
    from lambda_runtime_client.adapters.endpoint import Endpoint
    from lambda_runtime_client.adapters.runtime_api_client import RuntimeAPIClient
    from lambda_runtime_client.runtime.bootstrap import load_handler
    from lambda_runtime_client.runtime.loop import RuntimeLoop

    handler = load_handler("handler.greet", os.path.join(ROOT, "examples", "greeting"))
    client = RuntimeAPIClient(Endpoint.from_runtime_api(runtime_api))
    loop = RuntimeLoop(client, handler)

    posted = 0
    for _ in range(count):
        if loop.run_once():
            posted += 1
    return posted


def verify_results(base_url: str, request_ids: List[str]) -> bool:
    """Check the mock recorded one result per queued event."""
    response = requests.get(f"{base_url}/admin/results", timeout=5)
    response.raise_for_status()
    results = {r["request_id"]: r for r in response.json()["results"]}

    ok = True
    for request_id in request_ids:
        result = results.get(request_id)
        if result is None:
            print(f"MISSING: {request_id}")
            ok = False
            continue
        print(f"{request_id}: {result['status']} {json.dumps(result['body'])}")
    return ok


def main():
    """Run the local integration test."""
    parser = argparse.ArgumentParser(description="Run the runtime loop against the mock Runtime API")
    parser.add_argument(
        "--runtime-api",
        default=os.environ.get("AWS_LAMBDA_RUNTIME_API", "127.0.0.1:9001"),
        help="host:port of the mock Runtime API",
    )
    args = parser.parse_args()
    base_url = f"http://{args.runtime_api}"

    print("=" * 60)
    print("Local Runtime Integration Test")
    print("=" * 60)
    print(f"Runtime API: {base_url}")
    print()

    try:
        requests.post(f"{base_url}/admin/reset", timeout=5).raise_for_status()
    except requests.RequestException as e:
        print(f"ERROR: mock Runtime API not reachable: {str(e)}")
        print("Start it with: python scripts/mock_runtime_api.py")
        sys.exit(1)

    request_ids = enqueue_events(base_url, EVENTS)

    start_time = time.time()
    posted = run_invocations(args.runtime_api, len(request_ids))
    elapsed = time.time() - start_time

    print()
    print(f"Posted {posted}/{len(request_ids)} results in {elapsed:.2f}s")
    print()

    if posted == len(request_ids) and verify_results(base_url, request_ids):
        print("SUCCESS: all invocations answered")
    else:
        print("FAILED: some invocations were not answered")
        sys.exit(1)


if __name__ == "__main__":
    main()
