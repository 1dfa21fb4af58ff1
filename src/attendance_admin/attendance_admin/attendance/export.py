from __future__ import annotations

import csv
import io
from typing import Optional
from zoneinfo import ZoneInfo

import pandas as pd

from ..common.datetime_utils import format_local, get_zone
from ..common.validators import format_cpf
from ..core.enums import AttendanceStatus
from .classification import classify, is_absent, is_present, summarize, summarize_by_day
from .model import AttendanceRecord, EventAttendanceReport

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

PROFILE_COLUMNS = ["Nome", "CPF", "Cargo", "Loja", "Setor", "Função"]
PRESENCE_COLUMNS = [*PROFILE_COLUMNS, "Horario_CheckIn", "Horario_CheckOut", "Motivo_Nota"]
ABSENCE_COLUMNS = [*PROFILE_COLUMNS, "Status"]

CSV_FIELDS = [
    "Dia",
    "Nome",
    "CPF",
    "Loja",
    "Cargo",
    "Setor",
    "Função",
    "Evento",
    "Local do Evento",
    "Check-in",
    "Check-out",
    "Manual",
    "Motivo",
    "Status",
]

STATUS_LABELS = {
    AttendanceStatus.PRESENT: "Presente",
    AttendanceStatus.ABSENT: "Ausente",
    AttendanceStatus.PROBLEM: "Sem check-out",
}


def _na(value: Optional[str]) -> str:
    return value or "N/A"


def _profile(r: AttendanceRecord) -> dict:
    # Internal employees are described by store/position/sector, external ones by role.
    return {
        "Nome": r.employee_name or f"ID: {r.employee_id}",
        "CPF": format_cpf(r.cpf),
        "Cargo": _na(r.position),
        "Loja": _na(r.store) if r.is_internal else "N/A",
        "Setor": _na(r.sector),
        "Função": "N/A" if r.is_internal else _na(r.role),
    }


def _presence_row(r: AttendanceRecord, tz: ZoneInfo) -> dict:
    return {
        **_profile(r),
        "Horario_CheckIn": format_local(r.checkin_at, tz) or "N/A",
        "Horario_CheckOut": format_local(r.checkout_at, tz) or "N/A",
        "Motivo_Nota": r.note or ("Manual" if r.manual else "N/A"),
    }


def _stats_frame(stats: dict, total_label: str) -> pd.DataFrame:
    rows = [
        (total_label, stats["total"]),
        ("Total Presentes", stats["present"]),
        ("Total Ausentes", stats["absent"]),
        ("Sem Check-out", stats["problem"]),
        ("Check-ins Manuais", stats["manual"]),
        ("% Presentes", f"{stats['pct_present']:.2f}%"),
        ("% Ausentes", f"{stats['pct_absent']:.2f}%"),
        ("% Check-ins Manuais", f"{stats['pct_manual']:.2f}%"),
    ]
    return pd.DataFrame(rows, columns=["Métrica", "Valor"])


def build_attendance_workbook(report: EventAttendanceReport, tz: Optional[ZoneInfo] = None) -> io.BytesIO:
    """Workbook with presence, absence and statistics sheets per event day."""

    tz = tz or get_zone()
    per_day = summarize_by_day(report)

    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        for day in report.days:
            records = report.records_for(day)
            if not records:
                continue
            label = day.strftime("%d-%m")

            presence = [_presence_row(r, tz) for r in records if is_present(r)]
            pd.DataFrame(presence, columns=PRESENCE_COLUMNS).to_excel(
                writer, sheet_name=f"Presenças {label}", index=False
            )

            absent = [{**_profile(r), "Status": "Ausente"} for r in records if is_absent(r)]
            if absent:
                pd.DataFrame(absent, columns=ABSENCE_COLUMNS).to_excel(
                    writer, sheet_name=f"Faltas {label}", index=False
                )

            _stats_frame(per_day[day], "Total Participantes").to_excel(
                writer, sheet_name=f"Percentual {label}", index=False
            )

        _stats_frame(summarize(report.records), "Total Inscritos").to_excel(
            writer, sheet_name="Percentual Geral", index=False
        )

    output.seek(0)
    return output


def _single_sheet(report: EventAttendanceReport, rows: list, columns: list, sheet_name: str) -> io.BytesIO:
    # Multi-day reports repeat employees, so the day leads each row.
    if report.is_multi_day:
        columns = ["Dia", *columns]
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        pd.DataFrame(rows, columns=columns).to_excel(writer, sheet_name=sheet_name, index=False)
    output.seek(0)
    return output


def build_presence_workbook(report: EventAttendanceReport, tz: Optional[ZoneInfo] = None) -> io.BytesIO:
    """Single ``Presença`` sheet with every checked-in record."""

    tz = tz or get_zone()
    rows = [
        {"Dia": r.attendance_day.strftime("%d/%m/%Y"), **_presence_row(r, tz)}
        for r in report.records
        if is_present(r)
    ]
    return _single_sheet(report, rows, PRESENCE_COLUMNS, "Presença")


def build_absence_workbook(report: EventAttendanceReport) -> io.BytesIO:
    """Single ``Faltaram`` sheet with every record lacking a check-in."""

    rows = [{"Dia": r.attendance_day.strftime("%d/%m/%Y"), **_profile(r)} for r in report.records if is_absent(r)]
    return _single_sheet(report, rows, PROFILE_COLUMNS, "Faltaram")


def build_attendance_csv(report: EventAttendanceReport, tz: Optional[ZoneInfo] = None) -> bytes:
    tz = tz or get_zone()
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for r in report.records:
        profile = _profile(r)
        writer.writerow(
            {
                "Dia": r.attendance_day.strftime("%d/%m/%Y"),
                "Nome": profile["Nome"],
                "CPF": profile["CPF"],
                "Loja": profile["Loja"],
                "Cargo": profile["Cargo"],
                "Setor": profile["Setor"],
                "Função": profile["Função"],
                "Evento": report.event.name or "-",
                "Local do Evento": report.event.location or "-",
                "Check-in": format_local(r.checkin_at, tz) or "-",
                "Check-out": format_local(r.checkout_at, tz) or "-",
                "Manual": "Sim" if r.manual else "Não",
                "Motivo": r.note or "-",
                "Status": STATUS_LABELS[classify(r)],
            }
        )
    return out.getvalue().encode("utf-8-sig")
