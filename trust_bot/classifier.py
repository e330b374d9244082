"""
Status classification for a single instance.

Only the latest incident (last in the list) and its first impact are
considered; when there are no incidents, only the first maintenance is.
"""

from datetime import datetime, timezone
from typing import Optional

from .models import InstanceRecord, StatusCategory, StatusReport
from .utils import from_now

NO_INCIDENTS = "No incidents reported"


def classify_status(record: InstanceRecord, now: Optional[datetime] = None) -> StatusReport:
    """
    Work out the display category and text for an instance.

    Args:
        record: Instance status from the API
        now: Reference time (defaults to current UTC time)

    Returns:
        StatusReport with category, text, fallback, footer and fields
    """
    now = now or datetime.now(timezone.utc)
    category = StatusCategory.HEALTHY
    report = StatusReport(category=category, text=NO_INCIDENTS, fallback=NO_INCIDENTS)

    if record.incidents:
        incident = record.incidents[-1]
        impact = incident.impacts[0] if incident.impacts else None

        if impact is not None:
            window_end = impact.end_time or now
            if window_end >= now:
                if impact.type == "performanceDegradation":
                    category = StatusCategory.DEGRADATION
                else:
                    category = StatusCategory.DISRUPTION

        if incident.root_cause is not None:
            report.text = incident.root_cause
        else:
            severity = impact.severity if impact is not None else ""
            report.text = f"{severity[:1].upper()}{severity[1:]} {category.value}".strip()
        report.fallback = f"{category.value} - {report.text}"
        report.footer = f"Last updated {from_now(incident.updated_at, now)}"

        if incident.service_keys and category != StatusCategory.HEALTHY:
            report.fields = [
                {
                    "title": "Services",
                    "value": ",".join(incident.service_keys),
                    "short": False,
                }
            ]

    elif record.maintenances:
        maint = record.maintenances[0]

        if maint.planned_start_time <= now <= maint.planned_end_time:
            if maint.availability == "unavailable":
                category = StatusCategory.MAINTENANCE
            else:
                category = StatusCategory.HEALTHY_MAINTENANCE

        report.text = maint.name
        report.fallback = f"{category.value} - {maint.name}"
        report.footer = f"Last updated {from_now(maint.updated_at, now)}"

    report.category = category

    # A closed window reads as healthy; drop whatever was filled in above
    if category == StatusCategory.HEALTHY:
        report.text = NO_INCIDENTS
        report.fallback = NO_INCIDENTS
        report.footer = None

    return report
