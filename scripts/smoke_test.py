"""
Walk a live HAL API from its entry point.

    HAL_CLIENT_BASE_URL=https://api.example.com python scripts/smoke_test.py [rel ...]

Prints the relations of the entry resource, then follows each `rel` given on
the command line (or the first link relation when none is given).
"""

from __future__ import annotations

import sys
from typing import List

from hal_client import (
    HalClientError,
    HalHTTPError,
    Representation,
    create_client_from_env,
    load_env_config,
    setup_logging,
)


def _print_step(title: str) -> None:
    print(f"\n== {title}")


def _fail(msg: str) -> int:
    print(f"FAILED: {msg}")
    return 1


def _describe(resource: Representation) -> None:
    print(f"  href: {resource.href}")
    print(f"  properties: {sorted(resource.properties)}")
    print(f"  relations: {resource.relations}")
    if len(resource.namespaces):
        print(f"  curies: {resource.namespaces.prefixes}")


def run_smoke_test(rels: List[str]) -> int:
    cfg = load_env_config()
    if not cfg.base_url:
        return _fail("Missing HAL_CLIENT_BASE_URL.")
    setup_logging(cfg.log_level)

    print("Config:")
    print(f"  base_url: {cfg.base_url}")
    print(f"  timeout: {cfg.timeout_seconds}")

    with create_client_from_env(cfg) as client:
        _print_step("Entry point")
        try:
            root = client.get("/")
        except HalHTTPError as exc:
            return _fail(f"GET / returned {exc.status_code}")
        _describe(root)

        if not rels:
            rels = [r for r in root.relations if r != "self"][:1]

        for rel in rels:
            _print_step(f"Follow {rel}")
            try:
                print(f"  hrefs: {root.related_hrefs(rel)}")
                for target in root.related(rel):
                    _describe(target)
            except HalClientError as exc:
                return _fail(f"{rel}: {exc}")

    print("\nOK")
    return 0


if __name__ == "__main__":
    sys.exit(run_smoke_test(sys.argv[1:]))
