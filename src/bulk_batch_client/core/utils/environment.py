# -*- coding: utf-8 -*-

"""
Environment configuration for the bulk batch client.

Connection settings come from environment variables, optionally loaded from
a .env file. Variables already set in the process environment always win
over values from the file.
"""

import os
import logging
from pathlib import Path
from typing import Dict, List, Optional
import dotenv

INSTANCE_URL_VAR = 'BULK_INSTANCE_URL'
SESSION_ID_VAR = 'BULK_SESSION_ID'
API_VERSION_VAR = 'BULK_API_VERSION'
ENV_FILE_VAR = 'BULK_ENV_FILE'

ENV_FILE_NAMES = ('.env.local', '.env')


def _candidate_env_files() -> List[Path]:
    """Working directory first, then the project root of a source checkout."""
    directories = [Path.cwd()]
    parents = Path(__file__).resolve().parents
    # src/bulk_batch_client/core/utils/environment.py -> project root
    if len(parents) > 4:
        directories.append(parents[4])
    return [directory / name for directory in directories for name in ENV_FILE_NAMES]


def load_environment_variables(env_file: Optional[str] = None, verbose: bool = False) -> Optional[Path]:
    """
    Load connection settings from a .env file.

    Args:
        env_file: Explicit .env file. Falls back to $BULK_ENV_FILE, then to
            the first existing file among `_candidate_env_files()`.
        verbose: Whether to log which file was loaded.

    Returns:
        The loaded file, or None when no file was found.
    """
    env_file = env_file or os.getenv(ENV_FILE_VAR)
    if env_file:
        candidates = [Path(env_file)]
    else:
        candidates = _candidate_env_files()

    for env_path in candidates:
        if env_path.is_file():
            dotenv.load_dotenv(env_path, override=False)
            if verbose:
                logging.debug(f"Loaded environment from: {env_path}")
            return env_path

    if verbose:
        searched = ', '.join(str(p) for p in candidates)
        logging.debug(f"No .env file found (searched: {searched})")
    return None


def get_connection_settings() -> Dict[str, Optional[str]]:
    """Read the connection settings currently set in the environment."""
    return {
        'instance_url': os.getenv(INSTANCE_URL_VAR) or None,
        'session_id': os.getenv(SESSION_ID_VAR) or None,
        'api_version': os.getenv(API_VERSION_VAR) or None,
    }


def validate_required_env_vars(instance_url_configured: bool = False) -> list:
    """
    Return the names of required variables that are not set.

    Args:
        instance_url_configured: Whether the instance URL comes from
            elsewhere (e.g. a CLI profile), making BULK_INSTANCE_URL optional.
    """
    settings = get_connection_settings()
    missing = []
    if not settings['session_id']:
        missing.append(SESSION_ID_VAR)
    if not instance_url_configured and not settings['instance_url']:
        missing.append(INSTANCE_URL_VAR)
    return missing


def setup_environment(verbose: bool = False, env_file: Optional[str] = None) -> bool:
    """
    Set up environment for the package. A missing .env file is not an
    error: the variables may be set system-wide.

    Returns:
        True if a .env file was loaded.
    """
    loaded = load_environment_variables(env_file, verbose)
    if loaded is None and verbose:
        logging.debug("Relying on process environment variables.")
    return loaded is not None
