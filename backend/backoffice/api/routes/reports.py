import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from backoffice.api.deps import Period, expiry_window, get_current_identity, get_period, request_now
from backoffice.db import crud
from backoffice.db.session import get_db
from backoffice.services import aggregation
from backoffice.services.lifecycle import BOOKING_PROJECTION, PAYMENT_PROJECTION
from backoffice.services.reports import SECTIONS, build_rows, report_filename, to_csv

router = APIRouter(dependencies=[Depends(get_current_identity)])
logger = logging.getLogger(__name__)


@router.get("/{section}")
def export_report(
    section: str,
    fmt: str = Query("json", alias="format", pattern="^(json|csv)$"),
    period: Period = Depends(get_period),
    db: Session = Depends(get_db),
    now: datetime = Depends(request_now),
    window_days: int = Depends(expiry_window),
):
    """Bookings or payments report for a month/year.

    JSON returns headers, rows and the status counts of the same rows; CSV
    returns the rows as an attachment named after the section and period.
    """
    if section not in SECTIONS:
        raise HTTPException(status_code=400, detail=f"unknown report section: {section}")
    if section == "payments":
        projection, date_of = PAYMENT_PROJECTION, aggregation.payment_date_of
    else:
        projection, date_of = BOOKING_PROJECTION, aggregation.booking_date_of
    records = aggregation.filter_by_period(
        crud.load_booking_records(db), now, period.month, period.year, period.day, date_of=date_of
    )
    phones = crud.agent_phones(db, (r.assigned_agent for r in records)) if section == "payments" else None
    headers, rows = build_rows(section, records, now, agent_phones=phones, window_days=window_days)
    if fmt == "csv":
        filename = report_filename(section, now, period.month, period.year)
        logger.info("Exporting %s report (%d rows) as %s", section, len(rows), filename)
        return Response(
            to_csv(headers, rows),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
    summary = aggregation.summarize(records, now, projection, window_days)
    return {
        "section": section,
        "headers": headers,
        "rows": rows,
        "total": summary["total"],
        "counts": summary["counts"],
        "revenue": float(summary["revenue"]),
    }
