"""
Record services for the download server.

Each service maps its operations onto read-modify-write cycles against one
collection of the document store.
"""

from .file_service import FileService
from .category_service import CategoryService
from .stats_service import StatsService

__all__ = ['FileService', 'CategoryService', 'StatsService']
