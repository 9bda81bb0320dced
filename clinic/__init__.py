"""Clinic application for the patient tracker.

This package contains models, serializers, services, views and route
registrations for patients, cases, appointments, visit notes and the
practitioner profile.
"""
