import sys
from argparse import ArgumentParser, RawTextHelpFormatter

from tally.shared.config import get_settings
from tally.shared.logging import configure_logging, get_logger

settings = get_settings()

configure_logging(
    log_level=settings.LOG_LEVEL,
    json_logs=settings.JSON_LOGS
)

logger = get_logger(__name__)


def setup_arg_parser() -> ArgumentParser:
    parser = ArgumentParser(
        description="Tally App Entrypoint",
        formatter_class=RawTextHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")

    api_parser = subparsers.add_parser("api", help="Run the FastAPI web server.")
    api_parser.set_defaults(func=run_api)

    return parser


def run_api(args) -> None:
    import uvicorn
    from tally.adapters.inbound.api.app import app

    logger.info(
        "api_starting",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL
    )

    uvicorn.run(
        app,
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=True,
    )


def main() -> None:
    parser = setup_arg_parser()
    args = parser.parse_args()

    logger.info("command_starting", command=args.command)

    try:
        args.func(args)
    except Exception as e:
        logger.error(
            "command_failed",
            command=args.command,
            error=str(e),
            exc_info=True
        )
        sys.exit(1)

    logger.info("command_completed", command=args.command)
    sys.exit(0)


if __name__ == "__main__":
    main()
