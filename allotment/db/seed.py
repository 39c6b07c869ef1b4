"""
Seed script: demo classes, sections, students and users for a fresh database.

Creates the tables first (init_db), then inserts each reference row only when a row with the
same name (email for users) does not exist yet, so running it twice is safe.

Usage:
  python -m allotment.db.seed
  python -m allotment.db.seed --skip-users
"""
import argparse
import asyncio
import logging
from typing import List, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from allotment.core.models import SchoolClass, Section, Student, User
from allotment.db.session import AsyncSessionLocal, init_db

logger = logging.getLogger(__name__)

CLASSES: List[str] = ["Nursery", "LKG", "UKG", "1st Grade", "2nd Grade", "3rd Grade"]

SECTIONS: List[str] = ["A", "B", "C"]

# (name, age)
STUDENTS: List[Tuple[str, int]] = [
    ("Amy Parker", 7),
    ("Ben Carter", 8),
    ("Chloe Diaz", 6),
    ("Dev Sharma", 7),
    ("Ella Brooks", 5),
    ("Finn Murphy", 8),
    ("Gia Romano", 6),
    ("Hari Menon", 7),
]

# (name, age, email)
USERS: List[Tuple[str, int, str]] = [
    ("Alice Johnson", 25, "alice@example.com"),
    ("Bob Smith", 30, "bob@example.com"),
    ("Charlie Brown", 22, "charlie@example.com"),
    ("David Lee", 28, "david@example.com"),
    ("Eva Green", 35, "eva@example.com"),
]


async def _existing(db: AsyncSession, column) -> set:
    result = await db.execute(select(column))
    return set(result.scalars().all())


async def seed(db: AsyncSession, include_users: bool = True) -> None:
    class_names = await _existing(db, SchoolClass.name)
    new_classes = [SchoolClass(name=n) for n in CLASSES if n not in class_names]
    section_names = await _existing(db, Section.name)
    new_sections = [Section(name=n) for n in SECTIONS if n not in section_names]
    student_names = await _existing(db, Student.name)
    new_students = [Student(name=n, age=a) for n, a in STUDENTS if n not in student_names]
    db.add_all(new_classes + new_sections + new_students)

    new_users = []
    if include_users:
        emails = await _existing(db, User.email)
        new_users = [User(name=n, age=a, email=e) for n, a, e in USERS if e not in emails]
        db.add_all(new_users)

    await db.commit()
    logger.info(
        f"Seeded {len(new_classes)} classes, {len(new_sections)} sections, "
        f"{len(new_students)} students, {len(new_users)} users"
    )


async def main(include_users: bool = True) -> None:
    await init_db()
    async with AsyncSessionLocal() as session:
        await seed(session, include_users=include_users)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    parser = argparse.ArgumentParser(description="Seed demo reference data")
    parser.add_argument("--skip-users", action="store_true", help="Do not insert demo users")
    args = parser.parse_args()
    asyncio.run(main(include_users=not args.skip_users))
