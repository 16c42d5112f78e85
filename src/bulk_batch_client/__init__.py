"""
Bulk Batch Client - Batch uploads through an asynchronous bulk data API

A client for batch-oriented data-upload jobs: submit batches of records to
an existing job, poll until each batch is processed and retrieve the
per-record results. It provides both a programmatic API and a command-line
interface.

Package Structure:
    batching: Batch operations (models, codec, files, jobs, polling, manager)
    utils:    Shared utilities (transport clients)
    errors:   Exception hierarchy

Example Usage:

    Basic Workflow:
        import bulk_batch_client as bbc

        transport = bbc.utils.clients.create_http_transport()
        operator = bbc.BatchOperator(transport, job_id='750...', content_type='CSV')

        batch = operator.submit_file('./accounts.csv')
        results = operator.get_result(batch.id, number_of_tries=20, wait_time=5000)
        operator.close_job()

    Error Handling:
        try:
            results = operator.get_result(batch.id, number_of_tries=3)
        except bbc.errors.PollExhaustedError as e:
            print(f"Batch {e.batch_id} still running after {e.attempts} checks")

    CLI Usage:
        $ bulkbc -p prod configure --instance-url https://example.my.salesforce.com
        $ bulkbc -p prod -j 750... --content-type CSV submit ./accounts.csv
        $ bulkbc -p prod -j 750... result 751... --number-of-tries 20 --output results.csv

Environment Setup:
    Required environment variables:
    - BULK_SESSION_ID (session id sent with every request)
    - BULK_INSTANCE_URL (unless provided by a CLI profile)
    Optional:
    - BULK_API_VERSION

    These can be set via .env files in:
    - Current working directory (.env, .env.local)
    - Project root directory
"""

__version__ = "0.1.0"

# Load environment on package import
from .core.utils.environment import setup_environment
setup_environment()

# Export core API modules
from . import core
batching = core.batching
utils = core.utils
errors = core.errors
BatchOperator = core.BatchOperator

__all__ = [
    '__version__',
    'batching',        # bbc.batching.*
    'utils',           # bbc.utils.*
    'errors',          # bbc.errors.*
    'BatchOperator',   # bbc.BatchOperator()
]

# Clean up namespace
del setup_environment
