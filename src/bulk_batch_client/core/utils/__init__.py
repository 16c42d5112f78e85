"""
Shared utilities for the bulk batch client.

Submodules:
    clients:     Transport contract and the httpx based HTTP transport
    registry:    Named connection profiles (internal)
    misc:        Internal utilities (internal)
    environment: Environment configuration (internal)

Example Usage:
    import bulk_batch_client as bbc

    transport = bbc.utils.clients.create_http_transport(
        instance_url='https://example.my.salesforce.com',
        session_id='00D...',
    )
"""

from . import clients     # Transport creation utilities

__all__ = [
    'clients',      # bbc.utils.clients.* (Transport, HttpTransport, create_http_transport)
]

# Internal modules not exported:
# - registry (CLI profile management)
# - misc (internal utilities)
# - environment (internal environment setup)
