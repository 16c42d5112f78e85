# -*- coding: utf-8 -*-

import functools
import logging
from pathlib import Path

import click

from ..core.batching.utils import RESULT_FILE_SUFFIXES
from ..core.errors import BulkClientError
from ..core.utils.registry import get_registry, PROFILE_KEYS


def setup_logging(verbose=False, quiet=False):
    """Configure logging for CLI execution."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    # Configure root logger
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True  # Override any existing configuration
    )

    # Reduce noise from external libraries in non-verbose mode
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)

    if verbose:
        logger = logging.getLogger(__name__)
        logger.debug("CLI logging setup completed")


def _validate_positive_integer_callback(ctx, param, value):
    """Validate that the provided value is a positive integer."""
    if value is not None and value <= 0:
        raise click.BadParameter("Value must be a positive integer.")
    return value


def _validate_non_negative_integer_callback(ctx, param, value):
    """Validate that the provided value is zero or a positive integer."""
    if value is not None and value < 0:
        raise click.BadParameter("Value must be zero or a positive integer.")
    return value


def _validate_results_output_callback(ctx, param, value):
    """Reject result output paths with an unsupported extension before any work is done."""
    if value is not None and Path(value).suffix.lower() not in RESULT_FILE_SUFFIXES:
        raise click.BadParameter(
            f"Extension must be one of: {', '.join(RESULT_FILE_SUFFIXES)}."
        )
    return value


def _handle_client_errors(func):
    """Turn client and output errors raised by a command into a logged error and exit code 1."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (BulkClientError, ValueError, OSError) as e:
            logging.error(f"{type(e).__name__}: {e}")
            raise SystemExit(1)
    return wrapper


#=======================================================================
# Profile Command Utilities
#=======================================================================

def _load_profile_settings(profile_name):
    """
    Load the settings of a profile. Exits if a profile name is given
    but not registered. Returns an empty dict when no profile is used.
    """
    if not profile_name:
        return {}
    profile = get_registry().get_profile(profile_name)
    if profile is None:
        logging.error(f"No profile found with name '{profile_name}'. "
                      f"Please run 'bulkbc -p {profile_name} configure' first, "
                      "or use 'bulkbc list-profiles' to see available profiles.")
        raise SystemExit(1)
    return profile


def _get_profile_changes(existing_profile, provided_options):
    """
    Get what changes will be made to a profile.

    Returns:
        list: List of change dictionaries with 'option', 'old', 'new' keys
    """
    changes = []
    for key, new_value in provided_options.items():
        old_value = existing_profile.get(key, 'not set')
        if str(old_value) != str(new_value):
            changes.append({'option': key, 'old': old_value, 'new': new_value})
    return changes


def _confirm_profile_changes(profile_name, changes, force=False):
    """
    Show changes and get user confirmation.

    Returns:
        bool: True if user confirmed, False if there is nothing to change.
    """
    if not changes:
        logging.info(f"No changes detected for profile '{profile_name}'")
        return False

    logging.info(f"Profile '{profile_name}' already exists. The following changes will be made:")
    for change in changes:
        logging.info(f"  {change['option']}: '{change['old']}' → '{change['new']}'")

    if not force:
        click.confirm(
            f"Do you want to update profile '{profile_name}'?",
            abort=True
        )
    return True


def _handle_profile_configuration(profile_name, provided_options, force=False):
    """Create a new profile or update an existing one with the provided options."""
    registry = get_registry()
    provided_options = {k: v for k, v in provided_options.items() if v is not None}
    existing_profile = registry.get_profile(profile_name)

    if existing_profile is None:
        if 'instance_url' not in provided_options:
            logging.error("For new profiles, --instance-url is required.")
            logging.info(f"Example: bulkbc -p {profile_name} configure "
                         "--instance-url https://example.my.salesforce.com")
            raise SystemExit(1)
        registry.save_profile(profile_name, provided_options)
        logging.info(f"Profile '{profile_name}' created.")
        return

    changes = _get_profile_changes(existing_profile, provided_options)
    if not _confirm_profile_changes(profile_name, changes, force):
        _display_profile(profile_name, existing_profile)
        return

    registry.save_profile(profile_name, provided_options)
    logging.info(f"Profile '{profile_name}' updated successfully!")


def _display_profile(profile_name, profile):
    """Display a profile in a readable format."""
    logging.info(f"Profile '{profile_name}':")
    for key in PROFILE_KEYS:
        if key in profile:
            logging.info(f"  {key}: {profile[key]}")


#=======================================================================
# Display Utilities
#=======================================================================

def _log_job(job):
    logging.info(f"Job {job.id}: {job.state.value}")
    logging.info(f"  Object: {job.object}, Operation: {job.operation}, "
                 f"Content type: {job.content_type.value if job.content_type else None}")
    logging.info(f"  Batches: {job.number_batches_total} total, "
                 f"{job.number_batches_queued} queued, "
                 f"{job.number_batches_in_progress} in progress, "
                 f"{job.number_batches_completed} completed, "
                 f"{job.number_batches_failed} failed")
    logging.info(f"  Records: {job.number_records_processed} processed, "
                 f"{job.number_records_failed} failed")


def _log_batch(batch):
    created = batch.created_date.isoformat() if batch.created_date else "unknown"
    message = f" ({batch.state_message})" if batch.state_message else ""
    logging.info(f"- Batch ID: {batch.id}, State: {batch.state.value}{message}, "
                 f"Records: {batch.number_records_processed} processed / "
                 f"{batch.number_records_failed} failed, Created at: {created}")


def _log_result_summary(batch_id, summary):
    logging.info(f"{'='*25}")
    logging.info(f"Results for batch {batch_id}:")
    logging.info(f"- Total: {summary['total']}")
    logging.info(f"- Succeeded: {summary['succeeded']} ({summary['created']} created)")
    logging.info(f"- Failed: {summary['failed']}")
    if summary['top_errors']:
        logging.warning("Most frequent errors:")
        for error, count in summary['top_errors']:
            logging.warning(f"  {count} x {error}")

