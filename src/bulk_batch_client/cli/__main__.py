"""
Entry point of the `bulkbc` command.

Loads the environment before the CLI is imported so that .env values are
visible to every command, then runs the click group.
"""

import sys
import logging

from ..core.utils.environment import setup_environment, validate_required_env_vars
from .utils import setup_logging


def main():
    """Run the bulkbc CLI."""
    # Flags are read early so environment loading can already log
    verbose = '-v' in sys.argv or '--verbose' in sys.argv
    quiet = '-q' in sys.argv or '--quiet' in sys.argv
    setup_logging(verbose=verbose, quiet=quiet)

    logger = logging.getLogger(__name__)
    if setup_environment(verbose=verbose):
        logger.debug("Environment loaded from .env file")
    missing = validate_required_env_vars(instance_url_configured=True)
    if missing:
        logger.debug(f"Not set yet: {', '.join(missing)}")

    try:
        from .cli import cli
        cli()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        if verbose:
            logger.exception("bulkbc failed")
        else:
            logger.error(f"bulkbc failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
