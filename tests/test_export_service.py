import csv
import io
from datetime import datetime, timezone

from models.brief import Brief
from services.export_service import EXPORT_COLUMNS, export_briefs_csv


def _brief(**overrides):
    values = dict(
        company_name="Acme",
        website="https://acme.io",
        user_intent="pitch",
        summary="Line one\nLine two, with comma",
        pitch_angle="Pitch",
        subject_line="Subject",
        what_not_to_pitch="Nothing",
        signal_tag="Tag",
        tech_stack=["Python", "AWS"],
        created_at=datetime(2025, 3, 14, 12, 30, tzinfo=timezone.utc),
    )
    values.update(overrides)
    return Brief(**values)


def test_export_writes_header_and_rows():
    rows = list(csv.reader(io.StringIO(export_briefs_csv([_brief(), _brief(company_name="Globex", website=None, tech_stack=[])]))))

    assert rows[0] == EXPORT_COLUMNS
    assert rows[1] == [
        "Acme",
        "https://acme.io",
        "Line one\nLine two, with comma",
        "Pitch",
        "Subject",
        "Tag",
        "Python; AWS",
        "2025-03-14",
    ]
    assert rows[2][0] == "Globex"
    assert rows[2][1] == ""
    assert rows[2][6] == ""


def test_export_with_no_briefs_is_header_only():
    rows = list(csv.reader(io.StringIO(export_briefs_csv([]))))
    assert rows == [EXPORT_COLUMNS]
