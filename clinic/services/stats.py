"""
Dashboard counters.

Each table is read once with conditional aggregates, so the numbers in a
response come from a single snapshot per table.
"""
from django.db.models import Count, Q

from clinic.models import Case, Patient


def dashboard_stats(scope) -> dict:
    cases = scope(Case).aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status=Case.STATUS_ACTIVE)),
        upcoming=Count('id', filter=Q(status=Case.STATUS_UPCOMING)),
        closed=Count('id', filter=Q(status=Case.STATUS_CLOSED)),
    )
    patients = scope(Patient).aggregate(
        total=Count('id'),
        admitted=Count('id', filter=Q(status=Patient.STATUS_ADMITTED)),
        stable=Count('id', filter=Q(status=Patient.STATUS_STABLE)),
        critical=Count('id', filter=Q(status=Patient.STATUS_CRITICAL)),
        discharged=Count('id', filter=Q(status=Patient.STATUS_DISCHARGED)),
    )
    return {
        'total': patients['total'],
        'active': cases['active'],
        'upcoming': cases['upcoming'],
        'closed': cases['closed'],
        'cases': cases['total'],
        'by_patient_status': {
            'admitted': patients['admitted'],
            'stable': patients['stable'],
            'critical': patients['critical'],
            'discharged': patients['discharged'],
            'active': max(patients['total'] - patients['discharged'], 0),
        },
    }
