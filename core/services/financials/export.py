from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from core.services.financials.models import JobCostingReport


def report_to_json(report: JobCostingReport) -> str:
    return json.dumps(asdict(report), indent=2, default=str, ensure_ascii=False)


def report_to_workbook(report: JobCostingReport, output_path: Path) -> Path:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb = Workbook()
    summary = report.summary

    header_font = Font(bold=True)
    title_font = Font(bold=True, size=14)
    center = Alignment(horizontal="center")
    thin_border = Border(
        left=Side(style="thin"),
        right=Side(style="thin"),
        top=Side(style="thin"),
        bottom=Side(style="thin"),
    )
    header_fill = PatternFill("solid", fgColor="DDDDDD")

    # ---------------- Summary ----------------
    ws = wb.active
    ws.title = "Summary"
    ws["A1"] = f"Job Costing - {report.project_name or report.project_id}"
    ws["A1"].font = title_font

    row = 3

    def kv(key, value):
        nonlocal row
        ws[f"A{row}"] = key
        ws[f"B{row}"] = value
        ws[f"A{row}"].font = header_font
        ws[f"A{row}"].border = thin_border
        ws[f"B{row}"].border = thin_border
        row += 1

    kv("Project ID", report.project_id)
    kv("Calculated at", summary.calculated_at.isoformat())
    kv("Financial health", summary.financial_health.value)

    row += 1
    kv("Total budget", summary.total_budget)
    kv("Total committed", summary.total_committed)
    kv("Total actual", summary.total_actual)
    kv("Budget variance", summary.budget_variance)
    kv("Projected profit", summary.projected_profit)
    kv("Projected margin (%)", summary.projected_margin)
    kv("Current margin (%)", summary.current_margin)

    row += 1
    kv("Percentage complete", summary.percentage_complete)
    kv("Earned value", summary.earned_value)
    kv("Estimate at completion", summary.estimate_at_completion)
    kv("Total retained", summary.total_retained)

    ws.column_dimensions["A"].width = 30
    ws.column_dimensions["B"].width = 25

    def table(title: str, headers: list[str], rows: list[list]) -> None:
        sheet = wb.create_sheet(title)
        for col_index, h in enumerate(headers, start=1):
            cell = sheet.cell(row=1, column=col_index, value=h)
            cell.font = header_font
            cell.alignment = center
            cell.fill = header_fill
            cell.border = thin_border
        for row_index, values in enumerate(rows, start=2):
            for col_index, value in enumerate(values, start=1):
                sheet.cell(row=row_index, column=col_index, value=value).border = thin_border
        sheet.column_dimensions["A"].width = 22
        sheet.column_dimensions["B"].width = 30

    table(
        "Cost Breakdown",
        ["Code", "Name", "Budgeted", "Committed", "Actual", "Variance", "Variance (%)", "% complete", "Status"],
        [
            [
                item.cost_code,
                item.cost_code_name,
                item.budgeted,
                item.committed,
                item.actual,
                item.variance,
                item.variance_percentage,
                item.percentage_complete,
                item.status,
            ]
            for item in report.cost_breakdown
        ],
    )
    table(
        "Subcontracts",
        ["Contract", "Subcontractor", "Total", "Certified", "Paid", "Retained", "Remaining", "Status"],
        [
            [
                item.contract_number,
                item.subcontractor,
                item.total_amount,
                item.certified,
                item.paid,
                item.retained,
                item.remaining,
                item.status.value,
            ]
            for item in report.subcontracts
        ],
    )
    table(
        "Expenses",
        ["Date", "Supplier", "Description", "Cost code", "Amount", "Status", "Invoice"],
        [
            [
                item.date.isoformat() if item.date else "",
                item.supplier,
                item.description,
                item.cost_code,
                item.amount,
                item.status.value,
                item.invoice_number or "",
            ]
            for item in report.expenses
        ],
    )
    table(
        "Alerts",
        ["Type", "Severity", "Message", "Amount"],
        [
            [alert.alert_type, alert.severity.value, alert.message, alert.amount]
            for alert in summary.alerts
        ],
    )

    wb.save(output_path)
    return output_path


__all__ = ["report_to_json", "report_to_workbook"]
