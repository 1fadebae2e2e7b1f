import logging.config

import click
import uvicorn

from selfhost_dashboard.config.provider import EnvConfigProvider
from selfhost_dashboard.logging_config import get_logging_config


@click.command()
@click.option("--host", "host", default=None, help="Bind address, defaults to API_HOST")
@click.option("--port", "port", default=None, type=int, help="Bind port, defaults to API_PORT")
def main(host: str, port: int):
    """Run the dashboard HTTP server."""
    api_config = EnvConfigProvider().get_api_config()
    logging_config = get_logging_config(api_config.log_level)
    logging.config.dictConfig(logging_config)

    uvicorn.run(
        "selfhost_dashboard.main:app",
        host=host or api_config.host,
        port=port or api_config.port,
        log_config=logging_config,
    )


if __name__ == "__main__":
    main()
