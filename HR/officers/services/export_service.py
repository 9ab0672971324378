"""
Excel export of the officer directory.

Every officer is rendered through FieldSecurityService.evaluate_and_render
with access_type='export', so each restricted field written to the sheet
is in the access log first. Redacted fields are left blank.
"""
import logging
from io import BytesIO

from django.db import transaction
from django.http import HttpResponse
from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from core.privacy.constants import AccessType
from core.privacy.services import get_field_security_service

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


class OfficerExportService:
    """Builds an xlsx workbook of officers as one caller may see them."""

    def __init__(self, service=None):
        self.service = service or get_field_security_service()

    def columns(self):
        return ['id'] + self.service.policy.known_fields()

    @transaction.atomic
    def build_workbook(self, officers, caller, meta=None) -> Workbook:
        wb = Workbook()
        ws = wb.active
        ws.title = 'Officers'

        columns = self.columns()
        header_fill = PatternFill(start_color='D9E1F2', end_color='D9E1F2', fill_type='solid')
        for col_idx, name in enumerate(columns, start=1):
            cell = ws.cell(row=1, column=col_idx, value=name.replace('_', ' ').title())
            cell.font = Font(bold=True)
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal='center')

        count = 0
        for row_idx, officer in enumerate(officers, start=2):
            record = self.service.evaluate_and_render(
                officer, caller, meta, access_type=AccessType.EXPORT
            )
            for col_idx, name in enumerate(columns, start=1):
                ws.cell(row=row_idx, column=col_idx, value=record.get(name, ''))
            count += 1

        for col_idx in range(1, len(columns) + 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = 20
        ws.freeze_panes = 'A2'

        logger.info(f"Exported {count} officer(s) for caller {caller.id} ({caller.role})")
        return wb

    def export_bytes(self, officers, caller, meta=None) -> bytes:
        wb = self.build_workbook(officers, caller, meta)
        output = BytesIO()
        wb.save(output)
        return output.getvalue()

    def export_response(self, officers, caller, meta=None) -> HttpResponse:
        """Workbook as a file download."""
        content = self.export_bytes(officers, caller, meta)
        filename = f"officers_{timezone.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response

    def export_to_path(self, officers, caller, path, meta=None) -> str:
        wb = self.build_workbook(officers, caller, meta)
        wb.save(path)
        return path
