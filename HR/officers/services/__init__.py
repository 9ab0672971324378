"""
Officer Directory Services

Services:
- OfficerService: directory listing, detailed reads, visibility overrides
- OfficerExportService: xlsx export of rendered officer records
"""

from .officer_service import OfficerService
from .export_service import OfficerExportService

__all__ = [
    'OfficerService',
    'OfficerExportService',
]
