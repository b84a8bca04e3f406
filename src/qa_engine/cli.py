# qa_engine/cli.py

import argparse
import asyncio
import json
import sys
from typing import Optional

from dotenv import load_dotenv

from qa_engine.application.services.automated_test_service import AutomatedTestService
from qa_engine.application.services.qa_console_service import QaConsoleService
from qa_engine.common.errors import AuthenticationRequiredError, ManifestError
from qa_engine.common.logger import LoggerFactory, LoggerType, LogLevel
from qa_engine.common.token_store import FileTokenStore
from qa_engine.config import settings
from qa_engine.schemas.core import SystemFilter
from qa_engine.schemas.tools.qa_console import ActionOutcome
from qa_engine.schemas.tools.test_catalog import RunOptions, UserMode
from qa_engine.tools.api_probe import ApiProbeTool
from qa_engine.tools.categorizer import CrossSystemPolicy
from qa_engine.tools.page_manifest import generate_app_structure_doc
from qa_engine.utils.report_utils import (
    format_error_digest,
    generate_json_report,
    generate_text_report,
)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_AUTH_REQUIRED = 2

SYSTEM_CHOICES = [s.value for s in SystemFilter]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="qa-engine",
        description="Run QA checks against the invoicing platform",
    )
    parser.add_argument("--base-url", type=str, help="Base URL of the API under test")
    parser.add_argument("--token", type=str, help="Session token to authenticate with")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument(
        "--plain-logs",
        action="store_true",
        help="Log with plain prints instead of loguru",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Run the QA console checks for one system")
    run.add_argument("--system", choices=SYSTEM_CHOICES, default=SystemFilter.ALL.value)
    run.add_argument(
        "--user-mode",
        choices=[m.value for m in UserMode],
        default=UserMode.ADMIN.value,
    )
    run.add_argument(
        "--live-sms", action="store_true", help="Actually send SMS during the run"
    )
    run.add_argument(
        "--inferred",
        action="store_true",
        help="Also treat results that merely mention several systems as cross-system",
    )
    run.add_argument(
        "--export",
        choices=["digest", "clipboard", "snapshot"],
        help="Export the run after it finishes",
    )
    run.add_argument("--output-dir", type=str, help="Directory for exported files")

    report = sub.add_parser("report", help="Run the full-system suite and print a report")
    report.add_argument("--format", choices=["text", "json"], default="text")
    report.add_argument(
        "--no-dependencies",
        action="store_true",
        help="Leave out the page dependency suite",
    )

    verify = sub.add_parser("verify", help="Verify page file dependencies")
    verify.add_argument("--format", choices=["text", "json"], default="text")
    verify.add_argument(
        "--check-endpoints",
        action="store_true",
        help="Also probe the GET endpoints each page uses",
    )

    sub.add_parser("structure", help="Print the application structure document")

    seed = sub.add_parser("seed", help="Seed tagged test data")
    seed.add_argument("--system", choices=SYSTEM_CHOICES, default=SystemFilter.ALL.value)

    cleanup = sub.add_parser("cleanup", help="Remove tagged test data")
    cleanup.add_argument(
        "--system", choices=SYSTEM_CHOICES, default=SystemFilter.ALL.value
    )

    sub.add_parser("status", help="Show tagged test data counts")
    sub.add_parser("health", help="Run the backend health check")
    sub.add_parser("serve", help="Start the HTTP API")
    return parser


def build_probe(base_url: Optional[str], token: Optional[str], verbose: bool) -> ApiProbeTool:
    return ApiProbeTool(
        base_url=base_url or settings.API_BASE_URL,
        token_store=FileTokenStore(settings.TOKEN_STORE_PATH),
        token_key=settings.TOKEN_KEY,
        token=token or settings.AUTH_TOKEN,
        verbose=verbose,
    )


def print_outcome(outcome: ActionOutcome) -> int:
    notification = outcome.notification
    print(f"{notification.title}: {notification.description}")
    if notification.is_error:
        return EXIT_FAILED
    if outcome.data:
        print(json.dumps(outcome.data, indent=2, default=str))
    return EXIT_OK


async def run_console(args, probe: ApiProbeTool, logger) -> int:
    service = QaConsoleService(
        probe,
        export_dir=args.output_dir,
        policy=CrossSystemPolicy.INFERRED if args.inferred else CrossSystemPolicy.EXPLICIT,
        verbose=args.verbose,
    )
    run = await service.run_tests(
        system=SystemFilter(args.system),
        options=RunOptions(user_mode=UserMode(args.user_mode), live_sms_mode=args.live_sms),
    )

    summary = run.health.summary()
    print(f"{run.notification.title}: {run.notification.description}")
    print(
        f"Errors: {summary['failed']}  Warnings: {summary['warnings']}  "
        f"Missing: {summary['missing']}  Cross-system: {summary['crossSystem']}"
    )

    if args.export == "digest":
        print()
        print(format_error_digest(run.health, run.user_mode, run.system))
    elif args.export == "clipboard":
        print_outcome(service.export_errors(run))
    elif args.export == "snapshot":
        outcome = service.export_report(run=run)
        print(f"{outcome.notification.title}: {outcome.notification.description}")

    logger.info(f"Console run finished with {summary['failed']} failures")
    return EXIT_FAILED if summary["failed"] else EXIT_OK


async def execute(args) -> int:
    """Run one parsed command and return the process exit code."""
    # Initialize main logger
    log_level = LogLevel.DEBUG if args.verbose else LogLevel.parse(settings.LOG_LEVEL)
    logger = LoggerFactory.get_logger(
        name="qa-engine-cli",
        logger_type=LoggerType.PRINT if args.plain_logs else LoggerType.STANDARD,
        level=log_level,
        log_file=settings.LOG_FILE,
    )
    logger.add_context(command=args.command, verbose=args.verbose)

    if args.command == "structure":
        try:
            print(generate_app_structure_doc())
        except ManifestError as e:
            logger.error(str(e))
            return EXIT_FAILED
        return EXIT_OK

    probe = build_probe(args.base_url, args.token, args.verbose)
    logger.info(f"Target API: {probe.base_url}")

    if args.command == "run":
        try:
            return await run_console(args, probe, logger)
        except AuthenticationRequiredError as e:
            logger.error(str(e))
            print("Log in to the platform or pass --token, then try again.")
            return EXIT_AUTH_REQUIRED

    if args.command in ("report", "verify"):
        service = AutomatedTestService(probe, verbose=args.verbose)
        try:
            if args.command == "report":
                report = await service.run_all(
                    include_dependencies=not args.no_dependencies
                )
            else:
                report = await service.verify_dependencies(
                    check_endpoints=args.check_endpoints
                )
        except ManifestError as e:
            logger.error(str(e))
            return EXIT_FAILED

        if args.format == "json":
            print(generate_json_report(report))
        else:
            print(generate_text_report(report))
        return EXIT_FAILED if report.failed else EXIT_OK

    console = QaConsoleService(probe, verbose=args.verbose)
    if args.command == "seed":
        return print_outcome(await console.seed_test_data(SystemFilter(args.system)))
    if args.command == "cleanup":
        return print_outcome(await console.cleanup_test_data(SystemFilter(args.system)))
    if args.command == "status":
        return print_outcome(await console.check_test_data_status())
    if args.command == "health":
        return print_outcome(await console.run_health_check())

    logger.error(f"Unknown command: {args.command}")
    return EXIT_FAILED


def main(argv=None) -> None:
    """Console script entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        # uvicorn manages its own event loop
        from qa_engine.server import run as serve

        serve()
        return

    sys.exit(asyncio.run(execute(args)))


if __name__ == "__main__":
    main()
