"""
Demo data: a few users in each role and three months of random shifts.

Runs on startup when SEED_DEMO_DATA=true, or directly:

    python -m app.seed

which also prints a bearer token for every seeded user.
"""

import logging
import random
from datetime import date, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .authorization import SCHEDULE_ADMINISTRATORS_ROLE, SCHEDULE_MANAGERS_ROLE
from .models import Role, Schedule, ScheduleStatus, User
from .utils.dates import start_of_week

logger = logging.getLogger(__name__)

# (email, role) pairs; user name is the email
SEED_USERS = [
    ("admin@contoso.com", SCHEDULE_ADMINISTRATORS_ROLE),
    ("manager@contoso.com", SCHEDULE_MANAGERS_ROLE),
    ("user@contoso.com", None),
    ("tim.cook@mail.com", SCHEDULE_MANAGERS_ROLE),
    ("sally.server@mail.com", None),
    ("billy.barback@mail.com", None),
]

# Users who get shifts
SEED_WORKERS = ["tim.cook@mail.com", "user@contoso.com", "sally.server@mail.com", "billy.barback@mail.com"]

SEED_SHIFTS = [
    (time(8, 0), time(16, 0)),
    (time(9, 0), time(17, 0)),
    (time(10, 0), time(18, 0)),
    (time(12, 0), time(20, 0)),
]

WEEKS_BEFORE = 4
DAYS_AFTER = 60


def ensure_role(db: Session, name: str) -> Role:
    role = db.query(Role).filter(Role.name == name).first()
    if not role:
        role = Role(name=name)
        db.add(role)
        db.flush()
        logger.info(f"🆕 Created role {name}")
    return role


def ensure_user(db: Session, email: str, role_name: Optional[str] = None) -> User:
    user = db.query(User).filter(User.email == email).first()
    if not user:
        user = User(user_name=email, email=email)
        db.add(user)
        db.flush()
        logger.info(f"🆕 Created user {email}")
    if role_name:
        role = ensure_role(db, role_name)
        if role not in user.roles:
            user.roles.append(role)
    return user


def generate_schedules(
    worker_ids: list[str], today: date, rng: random.Random
) -> list[Schedule]:
    """3 or 4 random workers per day from four weeks before this Monday to 60 days after"""
    recent_monday = start_of_week(today)
    current = recent_monday - timedelta(days=WEEKS_BEFORE * 7)
    end = recent_monday + timedelta(days=DAYS_AFTER)
    statuses = list(ScheduleStatus)

    schedules = []
    while current <= end:
        workers = rng.sample(worker_ids, min(rng.randint(3, 4), len(worker_ids)))
        for owner_id in workers:
            start_time, end_time = rng.choice(SEED_SHIFTS)
            schedules.append(
                Schedule(
                    owner_id=owner_id,
                    date=current,
                    start_time=start_time,
                    end_time=end_time,
                    status=rng.choice(statuses),
                )
            )
        current += timedelta(days=1)
    return schedules


def seed_database(db: Session, today: Optional[date] = None, rng: Optional[random.Random] = None) -> dict:
    """Create seed users and, if the schedules table is empty, demo shifts"""
    users = {email: ensure_user(db, email, role) for email, role in SEED_USERS}
    db.commit()

    if db.query(Schedule).first() is not None:
        logger.info("Schedules already seeded")
        return users

    worker_ids = [users[email].id for email in SEED_WORKERS]
    schedules = generate_schedules(worker_ids, today or date.today(), rng or random.Random())
    db.add_all(schedules)
    db.commit()
    logger.info(f"🌱 Seeded {len(schedules)} schedules for {len(worker_ids)} workers")
    return users


def main():
    from .database import Base, SessionLocal, engine
    from .security_utils import create_access_token

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    Base.metadata.create_all(bind=engine, checkfirst=True)

    db = SessionLocal()
    try:
        users = seed_database(db)
        for email, user in users.items():
            print(f"{email}: {create_access_token(user.id)}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
