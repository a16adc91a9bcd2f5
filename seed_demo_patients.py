"""
Seed Demo Patients — Adds a small, mixed set of census entries so the report,
chart and recent-patients table have something to show.

Entries that already exist (same name, gender, age and condition) are skipped,
so the script can be run repeatedly.

Usage:
    python seed_demo_patients.py
"""
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from src.adapters.storage_adapter import JsonFileStorage
from src.core.config import CensusConfig, configure_logging
from src.services.census_service import CensusService

DEMO_PATIENTS = [
    {"name": "Maria Santos", "gender": "Female", "age": 45, "condition": "High Blood Pressure"},
    {"name": "James Wilson", "gender": "Male", "age": 68, "condition": "High Blood Pressure"},
    {"name": "Sarah Chen", "gender": "Female", "age": 72, "condition": "Diabetes"},
    {"name": "David Okafor", "gender": "Male", "age": 54, "condition": "Diabetes"},
    {"name": "Priya Raman", "gender": "Female", "age": 38, "condition": "Thyroid"},
    {"name": "Tom Becker", "gender": "Male", "age": 61, "condition": "Diabetes"},
    {"name": "Lena Novak", "gender": "Female", "age": 29, "condition": "Thyroid"},
]


def _key(name, gender, age, condition):
    return (name.lower().strip(), gender, int(age), condition)


def seed(census: CensusService):
    existing = {
        _key(r.name, r.gender.value, r.age, r.condition.value) for r in census.records
    }
    created = 0
    skipped = 0

    for demo in DEMO_PATIENTS:
        if _key(**demo) in existing:
            print(f"  ⏭️  Skipped (already exists): {demo['name']}")
            skipped += 1
            continue

        record = census.add_patient(**demo)
        print(f"  ✅ Created: {record.name} (ID: {record.id})")
        created += 1

    print(f"\nDone! Created {created}, skipped {skipped} (duplicates).")
    print(f"Total patients now: {len(census.records)}")


if __name__ == "__main__":
    config = CensusConfig.from_env()
    configure_logging(config.log_level)
    print(f"🌱 Seeding Health Census at {config.storage_file}...\n")
    seed(CensusService(JsonFileStorage(config.storage_file), config))
