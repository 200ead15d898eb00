from __future__ import annotations

import csv
import io
import json
from dataclasses import asdict
from pathlib import Path
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill

from core.models import AuditLogEntry


CSV_HEADERS = [
    "ID",
    "Timestamp",
    "Action",
    "Entity Type",
    "Entity ID",
    "Entity Name",
    "User",
    "Project",
    "Severity",
    "Description",
    "Financial Impact",
]


def _row(entry: AuditLogEntry) -> list[str]:
    return [
        entry.id,
        entry.timestamp.isoformat(),
        entry.action,
        entry.entity_type,
        entry.entity_id,
        entry.entity_name or "",
        entry.user_name,
        entry.project_name or "",
        entry.severity.value,
        entry.description,
        str(entry.financial_impact.amount) if entry.financial_impact else "",
    ]


def entries_to_json(entries: Iterable[AuditLogEntry]) -> str:
    payload = []
    for entry in entries:
        item = asdict(entry)
        item["severity"] = entry.severity.value
        payload.append(item)
    return json.dumps(payload, indent=2, default=str, ensure_ascii=False)


def entries_to_csv(entries: Iterable[AuditLogEntry]) -> str:
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(CSV_HEADERS)
    rows = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for entry in entries:
        rows.writerow(_row(entry))
    return buffer.getvalue()


def entries_to_workbook(entries: Iterable[AuditLogEntry], output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb = Workbook()
    ws = wb.active
    ws.title = "Audit Log"

    header_font = Font(bold=True)
    header_fill = PatternFill("solid", fgColor="DDDDDD")
    center = Alignment(horizontal="center")
    for col_index, header in enumerate(CSV_HEADERS, start=1):
        cell = ws.cell(row=1, column=col_index, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = center

    for row_index, entry in enumerate(entries, start=2):
        for col_index, value in enumerate(_row(entry), start=1):
            ws.cell(row=row_index, column=col_index, value=value)

    ws.column_dimensions["A"].width = 36
    ws.column_dimensions["B"].width = 28
    ws.column_dimensions["J"].width = 60
    wb.save(output_path)
    return output_path


__all__ = ["CSV_HEADERS", "entries_to_json", "entries_to_csv", "entries_to_workbook"]
