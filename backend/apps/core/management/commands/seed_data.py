"""
Seed demo data for development.
Usage: python manage.py seed_data
"""

from datetime import timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.patients.models import Patient
from apps.pharmacies.models import Pharmacy
from apps.prescriptions.models import Prescription


class Command(BaseCommand):
    help = "Seed database with a demo pharmacy, patients and prescriptions"

    def handle(self, *args, **options):
        self.stdout.write("Seeding database...")
        today = timezone.localdate()

        pharmacy, _ = Pharmacy.objects.get_or_create(
            name="Farmacia Centrale",
            defaults={
                "address": "Via Roma 1, Milano",
                "phone": "02-555-0100",
                "email": "info@farmaciacentrale.example",
            },
        )
        self.stdout.write(f"  Pharmacy: {pharmacy.name} (id={pharmacy.id})")

        patients_data = [
            {
                "first_name": "Alice",
                "last_name": "Williams",
                "phone": "555-0101",
                "fulfillment": Patient.FULFILLMENT_PICKUP,
                "consensus": True,
            },
            {
                "first_name": "Bob",
                "last_name": "Martinez",
                "email": "bob.martinez@example.com",
                "delivery_address": "Via Verdi 12, Milano",
                "fulfillment": Patient.FULFILLMENT_SHIPPING,
                "consensus": True,
            },
            {
                "first_name": "Carol",
                "last_name": "Thompson",
                "phone": "555-0103",
                "fulfillment": Patient.FULFILLMENT_PICKUP,
                "consensus": True,
            },
            {
                "first_name": "David",
                "last_name": "Kim",
                "phone": "555-0104",
                "fulfillment": Patient.FULFILLMENT_PICKUP,
                # no consent yet: prescriptions cannot be added
                "consensus": False,
            },
        ]

        patients = []
        for data in patients_data:
            if data["consensus"]:
                data["consensus_date"] = today - timedelta(days=90)
            patient, _ = Patient.objects.get_or_create(
                pharmacy=pharmacy,
                first_name=data["first_name"],
                last_name=data["last_name"],
                defaults=data,
            )
            patients.append(patient)
        self.stdout.write(f"  Created {len(patients)} patients")

        # (patient, medication, units, per day, days since box start)
        # 30 units at 1/day started 10 days ago -> 20 days left (ok)
        # 28 units at 1/day started 23 days ago -> 5 days left (approaching)
        # 60 units at 2/day started 32 days ago -> depleted 2 days ago
        # 100 units at 3/day started 28 days ago -> 5 days left (approaching)
        prescriptions_data = [
            (patients[0], "Metformin 500 mg", 30, "1", 10),
            (patients[0], "Atorvastatin 20 mg", 28, "1", 23),
            (patients[1], "Levothyroxine 50 mcg", 60, "2", 32),
            (patients[2], "Paracetamol 1000 mg", 100, "3", 28),
        ]

        created = 0
        for patient, medication, units, per_day, age in prescriptions_data:
            _, was_created = Prescription.objects.get_or_create(
                patient=patient,
                medication_name=medication,
                defaults={
                    "units_per_box": units,
                    "daily_consumption": Decimal(per_day),
                    "box_start_date": today - timedelta(days=age),
                },
            )
            created += int(was_created)
        self.stdout.write(f"  Created {created} prescriptions")

        self.stdout.write(self.style.SUCCESS(
            f"Done. Open /api/v1/pharmacies/{pharmacy.id}/dashboard/ to generate orders."
        ))
