"""Process entry point: load configuration and serve the checkout tools."""

import logging
import os
import sys

import uvicorn

from agentcheckout.api.app import create_app
from agentcheckout.config import CheckoutConfig
from agentcheckout.errors import ConfigurationError
from agentcheckout.sdk import CheckoutSDK

logger = logging.getLogger("agentcheckout")


def configure_logging() -> None:
    # stdout belongs to the tool transport
    logging.basicConfig(
        stream=sys.stderr,
        level=os.getenv("CHECKOUT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    configure_logging()
    try:
        config = CheckoutConfig.from_env()
    except ConfigurationError as e:
        logger.error("%s", e)
        sys.exit(1)

    app = create_app(CheckoutSDK(config))
    uvicorn.run(
        app,
        host=os.getenv("CHECKOUT_HOST", "127.0.0.1"),
        port=int(os.getenv("CHECKOUT_PORT", "8000")),
        log_config=None,
    )


if __name__ == "__main__":
    main()
