from __future__ import annotations

import io
from dataclasses import dataclass

import pandas as pd

from ..core.exceptions import ValidationError
from .model import SalaryBatchReport

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_SALARY_COLUMNS = [
    "teacher_id",
    "base_salary",
    "lateness_deduction",
    "absence_deduction",
    "waived_total",
    "bonus_total",
    "net_salary",
    "payment_status",
    "occurrences",
    "on_time",
    "late",
    "absent",
]

_LEDGER_COLUMNS = [
    "teacher_id",
    "date",
    "student_id",
    "outcome",
    "delay_minutes",
    "deduction_type",
    "amount",
    "charged",
    "waived",
    "waiver_reason",
]


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    mimetype: str
    filename: str


def salaries_frame(report: SalaryBatchReport) -> pd.DataFrame:
    rows = []
    for r in report.results:
        rows.append(
            {
                "teacher_id": r.teacher_id,
                "base_salary": float(r.base_salary),
                "lateness_deduction": float(r.lateness_deduction),
                "absence_deduction": float(r.absence_deduction),
                "waived_total": float(r.waived_total),
                "bonus_total": float(r.bonus_total),
                "net_salary": float(r.net_salary),
                "payment_status": r.payment_status.value,
                "occurrences": r.occurrences,
                "on_time": r.on_time,
                "late": r.late,
                "absent": r.absent,
            }
        )
    return pd.DataFrame(rows, columns=_SALARY_COLUMNS)


def ledger_frame(report: SalaryBatchReport) -> pd.DataFrame:
    rows = []
    for r in report.results:
        for e in r.ledger:
            d = e.to_dict()
            rows.append({"teacher_id": r.teacher_id, **{c: d[c] for c in _LEDGER_COLUMNS if c in d}})
    return pd.DataFrame(rows, columns=_LEDGER_COLUMNS)


def export_report(report: SalaryBatchReport, fmt: str = "xlsx") -> ExportFile:
    fmt = (fmt or "xlsx").lower()
    stem = f"salaries_{report.tenant_id}_{report.period_start:%Y%m%d}_{report.period_end:%Y%m%d}"

    if fmt == "csv":
        content = salaries_frame(report).to_csv(index=False).encode("utf-8")
        return ExportFile(content=content, mimetype="text/csv", filename=f"{stem}.csv")

    if fmt == "xlsx":
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            salaries_frame(report).to_excel(writer, index=False, sheet_name="Salaries")
            ledger_frame(report).to_excel(writer, index=False, sheet_name="Ledger")
        return ExportFile(content=output.getvalue(), mimetype=XLSX_MIMETYPE, filename=f"{stem}.xlsx")

    raise ValidationError(f"Unsupported export format: {fmt}")
