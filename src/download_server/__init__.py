"""
File download server.

A small REST API that keeps file metadata and categories as JSON documents
inside a GitHub repository and serves public listing/download endpoints plus
secret-gated admin endpoints.
"""

__version__ = "1.0.0"
