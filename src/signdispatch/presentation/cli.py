"""CLI interface for the signing workflow dispatcher."""
import sys
import logging
import argparse
from pathlib import Path
from typing import Optional, Sequence

from signdispatch import __version__
from signdispatch.application.orchestrator import DispatchOrchestrator
from signdispatch.domain.exceptions import DispatcherError
from signdispatch.domain.protocols import IOutputSink, IWorkflowApi
from signdispatch.infrastructure.actions import ActionOutputs
from signdispatch.infrastructure.config import ActionConfig, ConfigLoader
from signdispatch.infrastructure.ossign import OSSignClient
from signdispatch.shared.logging import setup_logger, LoggerAdapter, get_logger
from signdispatch.shared.metrics import MetricsCollector


def create_client_from_config(config: ActionConfig) -> OSSignClient:
    """Create the API client for the configured service."""
    return OSSignClient(
        token=config.token,
        api_base=config.api_base,
        timeout=config.request_timeout,
        check_endpoint=config.check_endpoint,
        logger=get_logger('signdispatch.api'),
    )


def create_orchestrator_from_config(config: ActionConfig, api: IWorkflowApi) -> DispatchOrchestrator:
    """Create orchestrator with all dependencies."""
    logger = LoggerAdapter(get_logger('signdispatch.orchestrator'))
    metrics = MetricsCollector()

    return DispatchOrchestrator(api=api, logger=logger, metrics=metrics)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ossign-dispatch',
        description="Dispatch an OSSign signing workflow and wait for its artifacts",
    )
    parser.add_argument('--config', type=Path, help='Config YAML file')
    parser.add_argument('--username', help='OSSign account name (default: INPUT_USERNAME)')
    parser.add_argument('--token', help='OSSign API token (default: INPUT_TOKEN)')
    parser.add_argument('--dispatch-only', action='store_true', help='Exit right after dispatching')
    parser.add_argument('--single-check', metavar='ID', help='Check one workflow once and exit')
    parser.add_argument('--ref', help='Triggering ref (default: GITHUB_REF)')
    parser.add_argument('--poll-interval', type=float, help='Seconds between status checks')
    parser.add_argument('--timeout', type=float, help='Overall wait deadline in seconds')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[Sequence[str]] = None, outputs: Optional[IOutputSink] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    setup_logger('signdispatch', level=log_level)

    logger = get_logger(__name__)
    outputs = outputs or ActionOutputs()

    overrides = {
        'username': args.username,
        'token': args.token,
        'dispatch_only': True if args.dispatch_only else None,
        'single_check': args.single_check,
        'ref': args.ref,
        'poll_interval': args.poll_interval,
        'timeout': args.timeout,
    }

    try:
        config = ConfigLoader(config_path=args.config).load(overrides=overrides)

        logger.info("=" * 60)
        logger.info(f"OSSign dispatch v{__version__}")
        logger.info(f"Account: {config.username}")
        logger.info(f"API: {config.api_base}")
        logger.info(f"Mode: {config.mode.value}")
        logger.info("=" * 60)

        with create_client_from_config(config) as client:
            orchestrator = create_orchestrator_from_config(config, client)
            result = orchestrator.run(config)

        outputs.set_outputs(result.to_outputs())
        return 0

    except DispatcherError as e:
        outputs.set_failed(str(e))
        return 1
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return 130


if __name__ == '__main__':
    sys.exit(main())
