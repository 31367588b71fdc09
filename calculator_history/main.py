"""
Command-line entrypoint of the calculator history service.

This script:
- Loads a ``.env`` file into the environment
- Builds the service configuration once
- Serves the HTTP API with uvicorn
"""

import argparse
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, IPvAnyAddress, ValidationError
import uvicorn

from calculator_history.common.config import AppConfig, load_env_file
from calculator_history.common.logger import logger
from calculator_history.server.app import create_app


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    env_file : Optional[Path]
        Env file to load, ``.env`` in the working directory when omitted.
    host : Optional[IPvAnyAddress]
        Overrides the ``HOST`` setting.
    port : Optional[int]
        Overrides the ``PORT`` setting.
    """

    env_file: Optional[Path] = None
    host: Optional[IPvAnyAddress] = None
    port: Optional[int] = Field(default=None, ge=1, le=65535)


def parse_args(argv: Optional[list[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(description="Calculator history HTTP service")
    parser.add_argument("--env-file", help="Path to an env file (default: ./.env)")
    parser.add_argument("--host", help="Listening address")
    parser.add_argument("--port", help="Listening TCP port")

    args = parser.parse_args(argv)

    try:
        return CliArgs(env_file=args.env_file, host=args.host, port=args.port)
    except ValidationError as exc:
        parser.error(str(exc))


def build_config(cli_args: CliArgs) -> AppConfig:
    """
    Build the service configuration from the environment and the CLI overrides.

    :param CliArgs cli_args: Validated CLI arguments

    :return: Configuration of the service
    :rtype: AppConfig
    """
    load_env_file(cli_args.env_file)
    config = AppConfig.from_env()

    overrides = {}
    if cli_args.host is not None:
        overrides["host"] = cli_args.host
    if cli_args.port is not None:
        overrides["port"] = cli_args.port
    return config.model_copy(update=overrides) if overrides else config


def main(argv: Optional[list[str]] = None) -> None:
    """
    Start the service and block until it is stopped.
    """
    cli_args = parse_args(argv)
    config = build_config(cli_args)

    logger.info(f"🖥️ Starting server on {config.host}:{config.port}")
    uvicorn.run(create_app(config), host=str(config.host), port=config.port)


if __name__ == "__main__":
    main()
