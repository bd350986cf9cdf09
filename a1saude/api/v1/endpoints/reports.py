import logging
import re

from fastapi import APIRouter
from fastapi.responses import Response

from a1saude.exporters.masking import mask_payload
from a1saude.exporters.tabular import to_delimited_text, to_spreadsheet_markup
from a1saude.schemas.export import ExportRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/reports")

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9_.-]+")

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "xls": "application/vnd.ms-excel",
}


@router.post("/export", summary="Exportar registros em CSV ou XLS")
def export_report(payload: ExportRequest):
    rows = [mask_payload(r) for r in payload.rows] if payload.mask else payload.rows

    if payload.format == "xls":
        body = to_spreadsheet_markup(rows, payload.columns, payload.sheet_name)
    else:
        body = to_delimited_text(rows, payload.columns)

    filename = f"relatorio_{_UNSAFE_FILENAME.sub('_', payload.sheet_name)}.{payload.format}"
    logger.info(
        "Relatório exportado",
        extra={"extra": {"format": payload.format, "rows": len(rows), "masked": payload.mask}},
    )
    return Response(
        content=body,
        media_type=MEDIA_TYPES[payload.format],
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
