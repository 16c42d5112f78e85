"""
Core functionality for the bulk batch client.

Architecture:
    errors      - Exception hierarchy (BulkClientError and subclasses)

    batching/   - Batch operations
      ├── models/   - Job, Batch, Result value objects
      ├── codec/    - XML/CSV wire codec
      ├── files/    - Upload file reading
      ├── jobs/     - One-call job and batch operations
      ├── polling/  - Bounded wait-then-check result polling
      ├── manager/  - BatchOperator job handle
      └── utils/    - Result summaries and persistence

    utils/      - Shared utilities and infrastructure
      ├── clients/     - Transport contract and HTTP transport
      ├── registry/    - Connection profiles (internal)
      ├── misc/        - General utilities (internal)
      └── environment/ - Environment setup (internal)
"""

from . import errors
from . import batching
from . import utils

# High-level interface
from .batching.manager import BatchOperator

__all__ = [
    'errors',         # Exception hierarchy
    'batching',       # Batch operations
    'utils',          # Essential utilities and infrastructure
    'BatchOperator',  # Job handle
]
