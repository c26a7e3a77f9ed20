"""
Entry point: ``python -m alarmclock`` (or the ``alarmclock`` script).

Command-line options override the ALARMCLOCK_* environment variables.
"""

import argparse
import logging

import uvicorn

from alarmclock.config import AppConfig, configure_logging
from alarmclock.main import create_app

logger = logging.getLogger("alarmclock")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="alarmclock", description="Run the alarm clock service.")
    parser.add_argument("--host", help="bind address (default 127.0.0.1)")
    parser.add_argument("--port", type=int, help="HTTP port (default 8000)")
    parser.add_argument("--data-dir", help="where alarms and settings are stored")
    parser.add_argument("--sound", choices=["auto", "sounddevice", "subprocess", "none"])
    parser.add_argument("--no-ticker", action="store_true", help="serve the API without ringing alarms")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    config = AppConfig.from_env(
        host=args.host,
        port=args.port,
        data_dir=args.data_dir,
        sound=args.sound,
        ticker=False if args.no_ticker else None,
        log_level=args.log_level,
    )
    configure_logging(config.log_level)
    logger.info("Serving on http://%s:%d (data in %s)", config.host, config.port, config.data_dir)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
