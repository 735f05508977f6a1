#!/usr/bin/env python3
"""
Endpoint Verification Script

Smoke-tests a running relay: liveness, readiness, banner and a scalar-only
query (which must come back as an empty graph).

Usage:
    python verify_endpoints.py [base_url]      # default http://localhost:8080
"""

import sys

import httpx

# ANSI colors for output
GREEN = "\033[92m"
RED = "\033[91m"
BLUE = "\033[94m"
RESET = "\033[0m"


def print_result(name: str, success: bool, details: str = ""):
    """Print a check result."""
    status = f"{GREEN}✓ PASS{RESET}" if success else f"{RED}✗ FAIL{RESET}"
    print(f"{status}: {name}")
    if details:
        print(f"       {details}")


def run_checks(base_url: str) -> bool:
    print(f"\n{BLUE}Verifying mg-relay at {base_url}{RESET}\n")
    results = []

    with httpx.Client(base_url=base_url, timeout=10.0) as client:
        checks = [
            ("GET /healthz", lambda: client.get("/healthz"), 200),
            ("GET /readyz", lambda: client.get("/readyz"), 200),
            ("GET /", lambda: client.get("/"), 200),
            (
                "POST /query (scalar only)",
                lambda: client.post("/query", json={"cypher": "RETURN 1 AS n"}),
                200,
            ),
            (
                "POST /query (params not an object)",
                lambda: client.post("/query", json={"cypher": "RETURN 1", "params": [1, 2]}),
                400,
            ),
        ]
        for name, call, expected in checks:
            try:
                response = call()
                ok = response.status_code == expected
                print_result(name, ok, f"{response.status_code} {response.text[:120]}")
            except httpx.HTTPError as e:
                ok = False
                print_result(name, ok, str(e))
            results.append(ok)

    passed = sum(results)
    print(f"\n{passed}/{len(results)} checks passed")
    return passed == len(results)


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8080"
    sys.exit(0 if run_checks(url) else 1)
