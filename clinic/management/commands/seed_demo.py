"""
Management command to populate the database with a demo practice.
"""
import random
import uuid
from datetime import date, timedelta

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils import timezone

from clinic.models import Appointment, Case, DoctorProfile, Patient, VisitNote


class Command(BaseCommand):
    help = 'Populate the database with demo patients, cases and appointments for one practitioner'

    PATIENTS = [
        ('Ada', 'Lovelace', date(1985, 12, 10), Patient.GENDER_FEMALE),
        ('Alan', 'Turing', date(1972, 6, 23), Patient.GENDER_MALE),
        ('Grace', 'Hopper', date(1956, 12, 9), Patient.GENDER_FEMALE),
        ('Edsger', 'Dijkstra', date(1960, 5, 11), Patient.GENDER_MALE),
        ('Barbara', 'Liskov', date(1979, 11, 7), Patient.GENDER_FEMALE),
        ('Sam', 'Rivers', date(1994, 3, 2), Patient.GENDER_UNKNOWN),
    ]
    DIAGNOSES = ['Hypertension', 'Type 2 diabetes', 'Pneumonia', 'Fractured wrist', 'Asthma', 'Migraine']
    REASONS = ['Follow-up', 'Lab review', 'Medication check', 'Post-op review', 'Annual physical']

    def add_arguments(self, parser):
        parser.add_argument('--user-id', required=True, help='Practitioner id (token subject) to own the data')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for repeatable data')

    def handle(self, *args, **options):
        try:
            user_id = uuid.UUID(options['user_id'])
        except ValueError:
            raise CommandError('--user-id must be a UUID')
        rng = random.Random(options['seed'])

        with transaction.atomic():
            DoctorProfile.objects.update_or_create(
                user_id=user_id,
                defaults={'display_name': 'Dr. Demo', 'department': 'General Medicine', 'updated_at': timezone.now()},
            )
            patients = self.create_patients(user_id)
            cases = self.create_cases(user_id, patients, rng)
            appointments = self.create_appointments(user_id, cases, rng)
            self.create_notes(user_id, appointments)

        self.stdout.write(self.style.SUCCESS(
            f'Seeded {len(patients)} patients, {len(cases)} cases, {len(appointments)} appointments'
        ))

    def create_patients(self, user_id):
        patients = []
        for first, last, dob, gender in self.PATIENTS:
            patient, _ = Patient.objects.get_or_create(
                user_id=user_id, first_name=first, last_name=last, dob=dob,
                defaults={'gender': gender, 'email': f'{first.lower()}.{last.lower()}@example.com'},
            )
            patients.append(patient)
            self.stdout.write(f'patient: {patient}')
        return patients

    def create_cases(self, user_id, patients, rng):
        now = timezone.now()
        statuses = [Case.STATUS_ACTIVE, Case.STATUS_UPCOMING, Case.STATUS_CLOSED]
        cases = []
        for i, patient in enumerate(patients):
            cases.append(Case.objects.create(
                user_id=user_id,
                patient=patient,
                status=statuses[i % len(statuses)],
                admit_type=rng.choice([Case.ADMIT_EMERGENCY, Case.ADMIT_ROUTINE]),
                admit_reason=rng.choice(self.REASONS),
                diagnosis=rng.choice(self.DIAGNOSES),
                started_at=now - timedelta(days=rng.randint(0, 60)),
            ))
        return cases

    def create_appointments(self, user_id, cases, rng):
        now = timezone.now()
        appointments = []
        for case in cases:
            for offset in (-7, 7):
                appointments.append(Appointment.objects.create(
                    user_id=user_id,
                    patient_id=case.patient_id,
                    case=case,
                    scheduled_at=now + timedelta(days=offset, hours=rng.randint(8, 16)),
                    status=Appointment.STATUS_COMPLETED if offset < 0 else Appointment.STATUS_SCHEDULED,
                    reason=rng.choice(self.REASONS),
                ))
        return appointments

    def create_notes(self, user_id, appointments):
        for appt in appointments:
            if appt.status == Appointment.STATUS_COMPLETED:
                VisitNote.objects.create(
                    user_id=user_id,
                    patient_id=appt.patient_id,
                    case_id=appt.case_id,
                    appointment=appt,
                    note=f'Seen for {appt.reason.lower()}. Plan unchanged.',
                )
