"""Seed a demo user and a starter tag vocabulary."""
import os

from taskboard.database import create_tables, get_session
from taskboard.models import Tag, User
from taskboard.routers.auth import get_password_hash

DEMO_EMAIL = os.getenv("DEMO_EMAIL", "test@example.com")
DEMO_PASSWORD = os.getenv("DEMO_PASSWORD", "password")

STARTER_TAGS = [
    ("work", "#3B82F6"),
    ("personal", "#10B981"),
    ("urgent", "#EF4444"),
]

# Create tables if not exist
create_tables()

with get_session() as db:
    # Check if user already exists
    existing_user = db.query(User).filter(User.email == DEMO_EMAIL).first()
    if existing_user:
        print("User already exists")
    else:
        db.add(User(email=DEMO_EMAIL, hashed_password=get_password_hash(DEMO_PASSWORD)))
        print(f"Test user created: {DEMO_EMAIL} / {DEMO_PASSWORD}")

    existing_tags = {name for (name,) in db.query(Tag.name).all()}
    for name, color in STARTER_TAGS:
        if name not in existing_tags:
            db.add(Tag(name=name, color=color))
            print(f"Tag created: {name}")

    db.commit()
