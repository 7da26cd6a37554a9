#!/usr/bin/env python3
"""
Futarchy TWAP - command line entry point.
"""

import logging
import sys

from dotenv import load_dotenv

from futarchy_twap.cli.router import Router
from futarchy_twap.config import settings
from futarchy_twap.controllers import TwapController
from futarchy_twap.services import ConnectionPool


def main(argv=None):
    """Main entry point"""
    # Load environment variables (GNOSIS_RPC, ETHEREUM_RPC, RPC_TIMEOUT, LOG_LEVEL)
    load_dotenv()

    argv = sys.argv[1:] if argv is None else argv
    verbose = '--verbose' in argv or '-v' in argv
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level(),
        format="%(message)s",
        stream=sys.stderr,
    )

    router = Router(TwapController(ConnectionPool()))
    return router.dispatch(argv)


if __name__ == '__main__':
    sys.exit(main())
