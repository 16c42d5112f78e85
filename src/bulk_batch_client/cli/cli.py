# -*- coding: utf-8 -*-

import sys
import click
import logging
from pathlib import Path

from ..core.batching.manager import BatchOperator
from ..core.batching.models import BatchState
from ..core.batching.polling import DEFAULT_NUMBER_OF_TRIES, DEFAULT_WAIT_TIME
from ..core.batching.utils import save_metadata, save_results, summarize_results
from ..core.errors import BulkClientError
from ..core.utils.registry import get_registry
from ..core.utils.clients import create_http_transport
from ..core.utils.misc import mask_path
from ..core.utils.environment import validate_required_env_vars
from .utils import (
    setup_logging,
    _validate_positive_integer_callback,
    _validate_non_negative_integer_callback,
    _validate_results_output_callback,
    _handle_client_errors,
    _handle_profile_configuration,
    _load_profile_settings,
    _log_job,
    _log_batch,
    _log_result_summary,
)

PROFILE_COMMANDS = ('configure', 'list-profiles', 'remove-profile')


@click.group()
@click.option(
    '-v', '--verbose', is_flag=True,
    help='Enable verbose (DEBUG) logging'
)
@click.option(
    '-q', '--quiet', is_flag=True,
    help='Only show warnings and errors'
)
@click.option(
    '-p', '--profile', type=str, default=None,
    help='Name of the connection profile to use.'
)
@click.option(
    '-j', '--job-id', type=str, default=None,
    help='ID of the job to operate on.'
)
@click.option(
    '--content-type', default='XML',
    type=click.Choice(['XML', 'CSV'], case_sensitive=False),
    help='Content type of the job records. Default is XML.'
)
@click.pass_context
def cli(ctx, verbose, quiet, profile, job_id, content_type):
    """
    Bulk Batch Client CLI - Submit batches to an existing bulk API job,
    wait for them to be processed and retrieve per-record results.

    \b
    Ensure the session id is set in your environment variables:
    - BULK_SESSION_ID
    - BULK_INSTANCE_URL (unless the profile provides an instance URL)
    """
    setup_logging(verbose=verbose, quiet=quiet)

    ctx.ensure_object(dict)
    ctx.obj['profile'] = profile

    # Skip checks if --help/-h is requested
    if any(arg in sys.argv for arg in ['--help', '-h']):
        return

    if ctx.invoked_subcommand in PROFILE_COMMANDS:
        return

    if not job_id:
        logging.error("Please specify a job ID using the -j or --job-id option.")
        raise click.UsageError("Job ID is required except for profile commands.")

    settings = _load_profile_settings(profile)

    missing_vars = validate_required_env_vars(
        instance_url_configured=bool(settings.get('instance_url'))
    )
    if missing_vars:
        logging.error(f"Missing required environment variables: {missing_vars}")
        logging.info("Please set these environment variables or create a "
                     ".env file at the repo root directory with:")
        for var in missing_vars:
            logging.info(f"  {var}=your_value_here")
        raise SystemExit(1)

    try:
        transport = create_http_transport(
            instance_url=settings.get('instance_url'),
            api_version=settings.get('api_version'),
        )
    except ValueError as e:
        logging.error(f"Error creating HTTP transport: {e}")
        raise SystemExit(1)
    ctx.call_on_close(transport.close)

    ctx.obj['operator'] = BatchOperator(transport, job_id, content_type.upper())
    ctx.obj['number_of_tries'] = settings.get('number_of_tries', DEFAULT_NUMBER_OF_TRIES)
    ctx.obj['wait_time'] = settings.get('wait_time', DEFAULT_WAIT_TIME)


#=======================================================================
# Profile Commands
#=======================================================================

@cli.command()
@click.option(
    '--instance-url', type=str, default=None,
    help='Base URL of the instance, e.g. https://example.my.salesforce.com. '
         'Required for new profiles.'
)
@click.option(
    '--api-version', type=str, default=None,
    help='API version used in resource paths, e.g. 59.0.'
)
@click.option(
    '--number-of-tries', type=int, default=None,
    callback=_validate_positive_integer_callback,
    help='Default number of state checks when waiting for results.'
)
@click.option(
    '--wait-time', type=int, default=None,
    callback=_validate_non_negative_integer_callback,
    help='Default milliseconds to wait before each state check.'
)
@click.option(
    '--force', is_flag=True, default=False,
    help='Skip confirmation prompts when updating existing profiles.'
)
@click.pass_context
def configure(ctx, instance_url, api_version, number_of_tries, wait_time, force):
    """
    Create a connection profile or update an existing one.

    \b
    Examples:
        # New profile (instance URL required)
        bulkbc -p prod configure --instance-url https://example.my.salesforce.com

        # Update polling defaults only
        bulkbc -p prod configure --number-of-tries 20 --wait-time 5000
    """
    profile = ctx.obj['profile']
    if not profile:
        raise click.UsageError("Please specify a profile name using -p or --profile.")

    _handle_profile_configuration(
        profile,
        {
            'instance_url': instance_url.rstrip('/') if instance_url else None,
            'api_version': api_version,
            'number_of_tries': number_of_tries,
            'wait_time': wait_time,
        },
        force=force
    )


@cli.command()
def list_profiles():
    """List all registered connection profiles."""
    profiles = get_registry().list_profiles()

    if not profiles:
        logging.info("No profiles registered. Use 'configure' command to create one.")
        return

    logging.info(f"Found {len(profiles)} registered profiles:")
    for profile in profiles:
        logging.info(f"  {profile['name']}")
        logging.info(f"    Instance URL: {profile.get('instance_url')}")
        logging.info(f"    API version: {profile.get('api_version', 'default')}")
        updated_at = profile.get('updated_at', '')
        logging.info(f"    Last updated: {updated_at[:19].replace('T', ' ')}")


@cli.command()
@click.argument('name', required=False)
@click.pass_context
def remove_profile(ctx, name):
    """Remove a connection profile from the registry."""
    name = name or ctx.obj['profile']
    if not name:
        logging.error("Please specify a profile name to remove.")
        raise SystemExit(1)

    if get_registry().remove_profile(name):
        logging.info(f"Successfully removed profile '{name}'")
    else:
        logging.error(f"Profile '{name}' not found in registry")
        raise SystemExit(1)


#=======================================================================
# Job Commands
#=======================================================================

@cli.command()
@click.option(
    '--save', type=click.Path(dir_okay=False), default=None,
    help='Save the job information to a .json file.'
)
@click.pass_context
@_handle_client_errors
def job_info(ctx, save):
    """Show the current information of the job."""
    job = ctx.obj['operator'].get_job_info()
    _log_job(job)
    if save:
        save_metadata(job.to_dict(), save)


@cli.command()
@click.pass_context
@_handle_client_errors
def close(ctx):
    """Close the job so no more batches can be added."""
    job = ctx.obj['operator'].close_job()
    _log_job(job)


@cli.command()
@click.option(
    '--force', is_flag=True, default=False,
    help='Skip the confirmation prompt.'
)
@click.pass_context
@_handle_client_errors
def abort(ctx, force):
    """
    Abort the job. Batches not yet processed will never be processed.
    """
    operator = ctx.obj['operator']
    if not force:
        click.confirm(f"Do you really want to abort job {operator.job_id}?", abort=True)
    job = operator.abort_job()
    _log_job(job)


#=======================================================================
# Batch Commands
#=======================================================================

@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path())
@click.pass_context
def submit(ctx, files):
    """
    Submit one batch per file to the job.

    \b
    FILES:
      Upload file(s) separated by spaces. Their extension must match the
      job content type (.xml or .csv).
    """
    operator = ctx.obj['operator']
    logging.info(f"Submitting {len(files)} batches to job {operator.job_id}")

    submitted = {}
    failed = []
    for file_path in files:
        try:
            batch = operator.submit_file(file_path)
            submitted[file_path] = batch.id
        except BulkClientError as e:
            logging.error(f"Failed to submit {mask_path(file_path)}: {e}")
            failed.append(file_path)

    for file_path, batch_id in submitted.items():
        logging.info(f"- {mask_path(file_path)}: {batch_id}")
    logging.info(f"Submissions complete: {len(submitted)} successful, {len(failed)} failed.")

    if failed:
        raise SystemExit(1)


@cli.command()
@click.argument('batch_id')
@click.option(
    '--save', type=click.Path(dir_okay=False), default=None,
    help='Save the batch information to a .json file.'
)
@click.pass_context
@_handle_client_errors
def batch_info(ctx, batch_id, save):
    """Show the current information of a batch."""
    batch = ctx.obj['operator'].get_batch_info(batch_id)
    _log_batch(batch)
    if save:
        save_metadata(batch.to_dict(), save)


@cli.command()
@click.option(
    '-s', '--state', default=None,
    type=click.Choice([s.value for s in BatchState], case_sensitive=False),
    help='Filter batches by state.'
)
@click.pass_context
@_handle_client_errors
def list_batches(ctx, state):
    """List all batches of the job with their state."""
    batches = ctx.obj['operator'].get_all_batches()
    if state is not None:
        batches = [b for b in batches if b.state.value.lower() == state.lower()]
        logging.info(f"Found {len(batches)} batches matching state '{state}'.")
    for batch in batches:
        _log_batch(batch)


@cli.command()
@click.argument('batch_id')
@click.option(
    '-o', '--output', type=click.Path(dir_okay=False), default=None,
    help='Write the request document to this file instead of stdout.'
)
@click.pass_context
@_handle_client_errors
def batch_request(ctx, batch_id, output):
    """Show the original document submitted for a batch."""
    document = ctx.obj['operator'].get_batch_request(batch_id)
    if output:
        Path(output).write_text(document, encoding='utf-8')
        logging.info(f"Batch request saved to {mask_path(output)}")
    else:
        click.echo(document)


@cli.command()
@click.argument('batch_id')
@click.option(
    '--number-of-tries', type=int, default=None,
    callback=_validate_positive_integer_callback,
    help=('Maximum number of state checks before giving up. '
          f'Defaults to the profile value or {DEFAULT_NUMBER_OF_TRIES}.')
)
@click.option(
    '--wait-time', type=int, default=None,
    callback=_validate_non_negative_integer_callback,
    help=('Milliseconds to wait before each state check. '
          f'Defaults to the profile value or {DEFAULT_WAIT_TIME}.')
)
@click.option(
    '-o', '--output', type=click.Path(dir_okay=False), default=None,
    callback=_validate_results_output_callback,
    help='Save the results to a .json, .jsonl or .csv file.'
)
@click.pass_context
@_handle_client_errors
def result(ctx, batch_id, number_of_tries, wait_time, output):
    """
    Wait for a batch to finish and retrieve its per-record results.

    The batch state is checked up to NUMBER_OF_TRIES times, waiting
    WAIT_TIME milliseconds before each check. Results are retrieved once the
    batch is Completed, Failed or Not Processed.
    """
    number_of_tries = number_of_tries or ctx.obj['number_of_tries']
    wait_time = wait_time if wait_time is not None else ctx.obj['wait_time']

    results = ctx.obj['operator'].get_result(
        batch_id, number_of_tries=number_of_tries, wait_time=wait_time
    )
    _log_result_summary(batch_id, summarize_results(results))
    if output:
        save_results(results, output)
