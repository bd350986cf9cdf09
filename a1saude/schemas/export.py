from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ExportRequest(BaseModel):
    """Corpo de POST /reports/export: registros já carregados pelo chamador."""
    model_config = ConfigDict(populate_by_name=True)

    rows: list[dict[str, Any]] = Field(default_factory=list)
    columns: list[str] | None = None
    format: Literal["csv", "xls"] = "csv"
    sheet_name: str = Field(default="Relatorio", alias="sheetName", min_length=1, max_length=31)
    mask: bool = False
