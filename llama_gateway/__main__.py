"""Entry point for running the gateway as a module."""

import uvicorn

from .config import config
from .api.app import create_app


def main():
    """Run the gateway."""
    app = create_app()

    uvicorn.run(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level=config.LOG_LEVEL.lower(),
        timeout_keep_alive=config.REQUEST_TIMEOUT,
    )


if __name__ == "__main__":
    main()
