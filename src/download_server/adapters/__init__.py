"""
Adapter layer for the download server.

Contains the document store abstraction (GitHub/local) and the GitHub
contents API client it is built on.
"""
