"""
Django admin registrations for the clinic models.

Rows are owned by identity-provider users, so ``user_id`` is shown as a
plain column and kept read-only.
"""

from django.contrib import admin

from .models import Appointment, AuditEvent, Case, DoctorProfile, Patient, VisitNote


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'dob', 'gender', 'status', 'user_id', 'created_at')
    list_filter = ('gender', 'status')
    search_fields = ('first_name', 'last_name', 'email', 'phone')
    readonly_fields = ('user_id', 'created_at')


@admin.register(Case)
class CaseAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'status', 'admit_type', 'started_at', 'user_id')
    list_filter = ('status', 'admit_type')
    search_fields = ('diagnosis', 'admit_reason', 'patient__first_name', 'patient__last_name')
    readonly_fields = ('user_id', 'created_at')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'case', 'scheduled_at', 'status', 'user_id')
    list_filter = ('status',)
    search_fields = ('reason', 'patient__first_name', 'patient__last_name')
    readonly_fields = ('user_id', 'created_at')


@admin.register(VisitNote)
class VisitNoteAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'case', 'appointment', 'created_at')
    search_fields = ('note', 'patient__last_name')
    readonly_fields = ('user_id', 'created_at')


@admin.register(DoctorProfile)
class DoctorProfileAdmin(admin.ModelAdmin):
    list_display = ('user_id', 'display_name', 'title', 'department', 'updated_at')
    search_fields = ('display_name', 'department')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('object_id',)
