# =============================================================================
# main.py - CLI entry point
# =============================================================================

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from core.audit_processor import DeviceAuditProcessor
from core.errors import AuditError, ConfigurationError
from core.graph_client import GraphDirectoryClient
from core.reporting import LoggingReporter
from utils.config import Config


def setup_logging(level: str = "INFO", log_dir: str = "logs") -> str:
    """Setup logging configuration with both console and file output"""
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Generate date-stamped filename
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = log_path / f"device_audit_{timestamp}.log"

    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # File handler always gets DEBUG
    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # MSAL and urllib3 are noisy at DEBUG
    logging.getLogger("msal").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized - Console: {level.upper()}, File: DEBUG")
    logger.info(f"Log file: {log_filename}")

    return str(log_filename)


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find enabled directory users that have no registered devices"
    )
    parser.add_argument('--input', default=config.input_csv,
                        help=f'Input CSV file path (default: {config.input_csv})')
    parser.add_argument('--column', default=config.identifier_column,
                        help=f'Column holding the user identifier (default: {config.identifier_column})')
    parser.add_argument('--output', default=config.output_csv,
                        help=f'Output CSV file path (default: {config.output_csv})')
    return parser


def run_audit(args: argparse.Namespace, config: Config) -> None:
    """Validate configuration and run the audit"""
    missing_vars = config.get_missing_graph_vars()
    if missing_vars:
        raise ConfigurationError(f"Missing required environment variables: {missing_vars}")
    invalid_vars = config.get_invalid_vars()
    if invalid_vars:
        raise ConfigurationError(f"Invalid values for environment variables: {invalid_vars}")

    client = GraphDirectoryClient(config)
    processor = DeviceAuditProcessor(client, LoggingReporter())
    processor.process(args.input, args.column, args.output)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    config = Config()
    args = build_parser(config).parse_args(argv)

    setup_logging(config.log_level, config.log_dir)
    logger = logging.getLogger(__name__)

    try:
        run_audit(args, config)
    except AuditError as e:
        logger.error(f"Audit aborted: {e}")
        return 1
    except Exception as e:
        logger.error(f"Processing failed: {e}")
        return 1

    logger.info("Processing completed successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
