"""
Command-line interface for the bulk batch client.

This module provides a CLI to operate on an existing bulk API job: submit
batches, inspect job and batch state, and wait for per-record results.

Command Categories:
    Configuration:
        - configure: Create or update a connection profile
        - list-profiles: Show available profiles
        - remove-profile: Remove a profile

    Job Management:
        - job-info: Show job information
        - close: Close the job
        - abort: Abort the job

    Batches:
        - submit: Submit one batch per file
        - batch-info: Show batch information
        - list-batches: List the job's batches
        - batch-request: Show the document submitted for a batch

    Results:
        - result: Wait for a batch to finish and retrieve its results

Environment Requirements:
    - BULK_SESSION_ID
    - BULK_INSTANCE_URL (unless the profile provides an instance URL)

Example Workflow:
    # 1. Set up a profile
    $ bulkbc -p prod configure --instance-url https://example.my.salesforce.com

    # 2. Submit batches
    $ bulkbc -p prod -j 750xx0000000001 --content-type CSV submit part1.csv part2.csv

    # 3. Close the job once every batch is submitted
    $ bulkbc -p prod -j 750xx0000000001 close

    # 4. Wait for results
    $ bulkbc -p prod -j 750xx0000000001 --content-type CSV result 751xx0000000001 \\
        --number-of-tries 20 --wait-time 5000 --output results.csv
"""

from .cli import cli

__all__ = [
    'cli',  # Main CLI interface (Click command group)
]
