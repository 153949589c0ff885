"""CSV export of a user's briefs."""

import csv
import io
from typing import Sequence

from models.brief import Brief

EXPORT_COLUMNS = [
    "Company Name",
    "Website",
    "Summary",
    "Pitch Angle",
    "Subject Line",
    "Signal Tag",
    "Tech Stack",
    "Created At",
]


def export_briefs_csv(briefs: Sequence[Brief]) -> str:
    """One row per brief; tech stack joined with "; ", creation date without time."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    for brief in briefs:
        writer.writerow([
            brief.company_name,
            brief.website or "",
            brief.summary,
            brief.pitch_angle,
            brief.subject_line,
            brief.signal_tag,
            "; ".join(brief.tech_stack or []),
            brief.created_at.date().isoformat() if brief.created_at else "",
        ])
    return buffer.getvalue()
