"""
Print row counts of the timetable tables and the current school settings row.
Use this to confirm which database the API is pointed at before debugging data issues.

Usage:
  python -m app.scripts.check_tables
  python -m app.scripts.check_tables --sample 10
"""

import argparse
import asyncio

from sqlalchemy import text

from app.db.session import AsyncSessionLocal

TABLES = ["subjects", "teachers", "classrooms", "school_settings", "conditions"]


async def run_checks(sample: int = 5) -> None:
    async with AsyncSessionLocal() as session:
        # Raw SQL so a half-migrated table still reports
        for table in TABLES:
            result = await session.execute(text(f"SELECT COUNT(*) FROM {table}"))
            print(f"{table}: {result.scalar()} rows")

        result = await session.execute(
            text(
                "SELECT grade1_classes, grade2_classes, grade3_classes, daily_periods, saturday_periods "
                "FROM school_settings WHERE id = 'default'"
            )
        )
        row = result.fetchone()
        print("\nSchool settings:")
        if row is None:
            print("  (missing; run python -m app.db.init_db)")
        else:
            print(
                f"  classes per grade={row[0]}/{row[1]}/{row[2]} "
                f"daily_periods={row[3]} saturday_periods={row[4]}"
            )

        result = await session.execute(
            text("SELECT id, name, target_grades, special_classroom FROM subjects ORDER BY name LIMIT :n"),
            {"n": sample},
        )
        subjects = result.fetchall()
        print(f"\nFirst {sample} subjects:")
        if not subjects:
            print("  (no rows)")
        for s in subjects:
            print(f"  id={s[0]} name={s[1]!r} target_grades={s[2]!r} special_classroom={s[3]!r}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Check timetable tables and the settings row")
    parser.add_argument("--sample", type=int, default=5, help="Number of subject rows to print")
    args = parser.parse_args()
    asyncio.run(run_checks(sample=args.sample))


if __name__ == "__main__":
    main()
