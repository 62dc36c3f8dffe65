#!/usr/bin/env python3
"""
Exercise a running fieldmap-sql server: list fields, then run a simple and a
multi-join query.
"""

import argparse
import json
import sys

import requests

EXAMPLE_REQUESTS = [
    {
        "description": "get orders with total order value",
        "system": "SystemA",
        "limit": 10,
    },
    {
        "description": "get order line item identifiers with product display name",
        "system": "SystemB",
        "limit": 20,
    },
]


def list_fields(base_url, system=None):
    params = {"system": system} if system else None
    response = requests.get(f"{base_url}/api/v1/fields", params=params, timeout=10)
    response.raise_for_status()
    return response.json()["fields"]


def generate_query(base_url, payload):
    response = requests.post(f"{base_url}/api/v1/generate-query", json=payload, timeout=30)
    return response.status_code, response.json()


def main():
    parser = argparse.ArgumentParser(description="Example client for the fieldmap-sql API")
    parser.add_argument("--base-url", default="http://localhost:8080", help="Server base URL")
    parser.add_argument("--system", help="Only list fields mapped in this system")
    args = parser.parse_args()

    try:
        fields = list_fields(args.base_url, args.system)
    except requests.RequestException as exc:
        print(f"Could not reach server at {args.base_url}: {exc}")
        return 1

    print(f"Server knows {len(fields)} fields")
    for field in fields[:5]:
        print(f"  - {field['table_name']}.{field['column_name']}: {field['field_description']}")

    for payload in EXAMPLE_REQUESTS:
        print(f"\nRequest: {payload['description']!r}")
        status, body = generate_query(args.base_url, payload)
        print(f"Status: {status}")
        print(json.dumps(body, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
