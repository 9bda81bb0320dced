"""
URL mappings for the patient tracker API.

Paths carry no trailing slash; ``APPEND_SLASH`` is off to match.
"""
from django.urls import path, include

from .views import appointments, cases, doctors, health, patients


urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Patients
    path('api/patients', patients.patients_collection, name='patients'),
    path('api/patients/stats', patients.patient_stats, name='patient-stats'),
    path('api/patients/<uuid:pk>', patients.patient_detail, name='patient-detail'),
    path('api/patients/<uuid:pk>/profile', patients.patient_profile, name='patient-profile'),
    path('api/patients/<uuid:pk>/status', patients.patient_status, name='patient-status'),
    path('api/patients/<uuid:pk>/attachment', patients.patient_attachment, name='patient-attachment'),
    path('api/patients/<uuid:pk>/notes', patients.patient_notes, name='patient-notes'),
    # Cases
    path('api/cases', cases.cases_collection, name='cases'),
    path('api/cases/<uuid:pk>', cases.case_detail, name='case-detail'),
    path('api/cases/<uuid:pk>/status', cases.case_status, name='case-status'),
    path('api/cases/<uuid:pk>/attachment', cases.case_attachment, name='case-attachment'),
    path('api/cases/<uuid:pk>/notes', cases.case_notes, name='case-notes'),
    # Appointments
    path('api/appointments', appointments.appointments_collection, name='appointments'),
    path('api/appointments/<uuid:pk>', appointments.appointment_detail, name='appointment-detail'),
    path('api/appointments/<uuid:pk>/status', appointments.appointment_status, name='appointment-status'),
    # Doctors
    path('api/doctors/me', doctors.doctor_me, name='doctor-me'),
    path('api/doctors/me/avatar', doctors.doctor_avatar, name='doctor-avatar'),
]
