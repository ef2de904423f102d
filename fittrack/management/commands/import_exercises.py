import csv
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from fittrack.models import Exercise
from fittrack.domains.workout.contract import canonicalize_muscle, infer_equipment, is_valid_muscle


def normalize_muscle_group(body_part_raw: str) -> str:
    """Nhãn body_part của CSV -> 1 muscle trong taxonomy (nhãn đầu tiên hợp lệ).

    Nhãn lạ bị bỏ; không có nhãn hợp lệ -> "" (resolver không match category được).
    """
    for part in (body_part_raw or "").split(","):
        m = canonicalize_muscle(part)
        if m and is_valid_muscle(m):
            return m
    return ""


class Command(BaseCommand):
    help = "Import exercises from a CSV file into the exercise catalog."

    def add_arguments(self, parser):
        parser.add_argument("--csv", required=True, help="Path to exercises.csv")

    def handle(self, *args, **options):
        csv_path = Path(options["csv"])
        if not csv_path.exists():
            raise CommandError(f"CSV not found: {csv_path}")

        created, updated, skipped = 0, 0, 0
        with csv_path.open("r", encoding="utf-8-sig", newline="") as f:
            reader = csv.DictReader(f)
            required_cols = {"name", "body_part"}
            if not required_cols.issubset(set(reader.fieldnames or [])):
                raise CommandError(f"CSV columns must include: {sorted(required_cols)}. Got: {reader.fieldnames}")

            for row in reader:
                name = (row.get("name") or "").strip()
                if not name:
                    skipped += 1
                    continue

                equipment = (row.get("equipment") or "").strip().lower() or infer_equipment(name)

                _, is_created = Exercise.objects.update_or_create(
                    name=name,
                    defaults={
                        "muscle_group": normalize_muscle_group(row.get("body_part") or ""),
                        "equipment": equipment,
                        "image_url": (row.get("image_url") or "").strip() or None,
                    },
                )
                if is_created:
                    created += 1
                else:
                    updated += 1

        self.stdout.write(self.style.SUCCESS(f"Import done. created={created}, updated={updated}, skipped={skipped}"))
