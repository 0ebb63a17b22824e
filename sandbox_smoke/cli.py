"""CLI entry point for the sandbox SDK smoke tests."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Any

from aiohttp import web

from sandbox_smoke.client import connect_from_env
from sandbox_smoke.dashboard import DashboardRunner, create_app
from sandbox_smoke.models.result import TestResult
from sandbox_smoke.orchestrator import SuiteOrchestrator
from sandbox_smoke.profiles.loading import load_profile_manifest


def parse_test_names(tests: str) -> Sequence[str]:
    """Parse comma-separated test names."""
    if not tests.strip():
        return ()
    return tuple(name.strip() for name in tests.split(",") if name.strip())


def parse_address(address: str) -> tuple[str, int]:
    """Parse a HOST:PORT dashboard address."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise argparse.ArgumentTypeError(f"Expected HOST:PORT, got '{address}'")
    return host or "127.0.0.1", int(port)


async def run(
    profile_key: str,
    test_names: Sequence[str] = (),
    environ: Mapping[str, str] | None = None,
    json_output: bool = False,
) -> int:
    """Run the profile's tests and return exit code."""
    log = logging.getLogger("sandbox_smoke")

    log.info("Loading profile: %s", profile_key)
    manifest = load_profile_manifest(profile_key)
    tests = manifest.select(test_names) if test_names else manifest.tests

    log.info("Running %d test(s)...", len(tests))
    orchestrator = SuiteOrchestrator.create(manifest.settings)
    results = await orchestrator.run_suite(tests, connect_from_env(environ))

    if json_output:
        print(json.dumps(format_output(results), indent=2))

    passed = all(result.status == "success" for result in results)
    return 0 if passed else 1


def serve_dashboard(profile_key: str, host: str, port: int) -> None:
    """Serve the live dashboard for a profile until interrupted."""
    manifest = load_profile_manifest(profile_key)
    orchestrator = SuiteOrchestrator.create(manifest.settings)
    runner = DashboardRunner(orchestrator, manifest.tests, connect_from_env())
    web.run_app(create_app(runner), host=host, port=port)


def format_output(results: Sequence[TestResult]) -> dict[str, Any]:
    """Format test results for JSON output."""
    all_results = [
        {
            "name": result.name,
            "status": result.status,
            "logs": [
                {
                    "type": entry.type,
                    "message": entry.message,
                    "timestamp": entry.timestamp,
                }
                for entry in result.logs
            ],
        }
        for result in results
    ]

    return {
        "total": len(all_results),
        "passed": sum(1 for r in all_results if r["status"] == "success"),
        "failed": sum(1 for r in all_results if r["status"] == "error"),
        "pending": sum(1 for r in all_results if r["status"] == "pending"),
        "results": all_results,
    }


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run sandbox SDK smoke tests against the Daytona API"
    )
    parser.add_argument(
        "--profile",
        default="typescript",
        help="Runtime profile key (typescript, python)",
    )
    parser.add_argument(
        "--tests",
        default="",
        help="Comma-separated test names to run (default: all)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print a JSON report after the summary",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the profile's tests and exit",
    )
    parser.add_argument(
        "--dashboard",
        type=parse_address,
        metavar="HOST:PORT",
        help="Serve the live dashboard instead of running once",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    if args.list:
        for name in load_profile_manifest(args.profile).test_names:
            print(name)
        return

    if args.dashboard:
        host, port = args.dashboard
        serve_dashboard(args.profile, host, port)
        return

    exit_code = asyncio.run(
        run(
            profile_key=args.profile,
            test_names=parse_test_names(args.tests),
            json_output=args.json,
        )
    )
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
