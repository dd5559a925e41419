from __future__ import annotations

import io
import os
import time

from openpyxl import load_workbook

from app.services.export_service import (
    EXPORT_SHEET_TITLE,
    build_export,
    cleanup_old_exports,
    export_columns,
    resolve_export,
    save_export,
)

ROWS = [
    {
        "name": "Ann",
        "phone": 4155552671,
        "Valid Mobile Number": "+14155552671",
        "Line Type": "Mobile",
        "Error": "",
    },
    {
        "name": "Bob",
        "phone": None,
        "Valid Mobile Number": "Not Found",
        "Line Type": "Invalid",
        "Error": "Validation failed",
    },
]


def test_export_columns_appends_annotations_once():
    assert export_columns(["name", "Line Type", "phone"]) == [
        "name",
        "phone",
        "Valid Mobile Number",
        "Line Type",
        "Error",
    ]


def test_build_csv_export():
    data = build_export("contacts.csv", ["name", "phone"], ROWS)
    text = data.decode("utf-8-sig").splitlines()

    assert text[0] == "name,phone,Valid Mobile Number,Line Type,Error"
    assert text[1] == "Ann,4155552671,+14155552671,Mobile,"
    assert text[2] == "Bob,,Not Found,Invalid,Validation failed"


def test_build_xlsx_export():
    data = build_export("contacts.xlsx", ["name", "phone"], ROWS)
    wb = load_workbook(io.BytesIO(data))
    ws = wb[EXPORT_SHEET_TITLE]
    values = list(ws.iter_rows(values_only=True))

    assert values[0] == ("name", "phone", "Valid Mobile Number", "Line Type", "Error")
    assert values[1][:4] == ("Ann", 4155552671, "+14155552671", "Mobile")
    assert values[1][4] in (None, "")
    assert values[2][2:] == ("Not Found", "Invalid", "Validation failed")


def test_save_and_resolve_export(api_settings):
    record = save_export("../uploads/my list.csv", ["name", "phone"], ROWS)

    assert record.filename == "processed_my_list.csv"
    assert record.media_type == "text/csv"
    assert record.path.exists()

    resolved = resolve_export(record.export_id)
    assert resolved is not None
    assert resolved.filename == "processed_my_list.csv"
    assert resolved.path == record.path
    assert resolved.media_type == "text/csv"


def test_resolve_export_rejects_unknown_or_malformed_ids(api_settings):
    assert resolve_export("0" * 32) is None
    assert resolve_export("../../etc/passwd") is None


def test_cleanup_old_exports(api_settings):
    old = save_export("old.xlsx", ["name"], ROWS)
    fresh = save_export("fresh.csv", ["name"], ROWS)
    two_days_ago = time.time() - 48 * 3600
    os.utime(old.path, (two_days_ago, two_days_ago))

    assert cleanup_old_exports(ttl_hours=24) == 1
    assert not old.path.exists()
    assert fresh.path.exists()
    assert resolve_export(old.export_id) is None


def test_cleanup_without_export_dir(api_settings):
    assert cleanup_old_exports() == 0
