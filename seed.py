#!/usr/bin/env python3
"""
Reset the database and load the sample accounts and tasks.

Drops every table, recreates the schema, then seeds one admin, two regular
users and three tasks created by the admin (assignment alternates between
the first regular user and the admin).
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.database import Base, SessionLocal, engine
from app.models import Task, TaskPriority, TaskStatus, User, UserRole
from app.utils.security import hash_password

logger = logging.getLogger("seed")

SAMPLE_USERS = [
    {
        "name": "Admin User",
        "email": "admin@taskmanager.com",
        "password": "admin123",
        "role": UserRole.ADMIN,
    },
    {
        "name": "John Doe",
        "email": "john@example.com",
        "password": "user123",
        "role": UserRole.USER,
    },
    {
        "name": "Jane Smith",
        "email": "jane@example.com",
        "password": "user123",
        "role": UserRole.USER,
    },
]

SAMPLE_TASKS = [
    {
        "title": "Welcome to Task Manager",
        "description": "This is your first task! You can edit, complete, or delete it.",
        "due_in_days": 7,
        "priority": TaskPriority.HIGH,
        "status": TaskStatus.PENDING,
    },
    {
        "title": "Set up project documentation",
        "description": "Create comprehensive documentation for the project including API endpoints and user guides.",
        "due_in_days": 14,
        "priority": TaskPriority.MEDIUM,
        "status": TaskStatus.PENDING,
    },
    {
        "title": "Review code quality",
        "description": "Perform code review and ensure all best practices are followed.",
        "due_in_days": 3,
        "priority": TaskPriority.LOW,
        "status": TaskStatus.COMPLETED,
    },
]


def reset_schema():
    """Drop and recreate all tables"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    logger.info("Recreated all tables")


def seed_users(db: Session) -> list:
    users = []
    for data in SAMPLE_USERS:
        user = User(
            name=data["name"],
            email=data["email"],
            hashed_password=hash_password(data["password"]),
            role=data["role"],
        )
        db.add(user)
        users.append(user)
    db.commit()
    for user in users:
        db.refresh(user)
        logger.info("Created user: %s (%s)", user.name, user.email)
    return users


def seed_tasks(db: Session, users: list) -> list:
    admin = next(u for u in users if u.role == UserRole.ADMIN)
    regular = next(u for u in users if u.role == UserRole.USER)

    tasks = []
    for i, data in enumerate(SAMPLE_TASKS):
        assignee = regular if i % 2 == 0 else admin
        task = Task(
            title=data["title"],
            description=data["description"],
            due_date=datetime.utcnow() + timedelta(days=data["due_in_days"]),
            priority=data["priority"],
            status=data["status"],
            assigned_user_id=assignee.id,
            created_by_id=admin.id,
        )
        db.add(task)
        tasks.append(task)
        logger.info("Created task: %s (assigned to %s)", task.title, assignee.name)
    db.commit()
    return tasks


def seed_database():
    reset_schema()
    db = SessionLocal()
    try:
        users = seed_users(db)
        seed_tasks(db, users)
    except Exception:
        db.rollback()
        logger.exception("Error seeding database")
        raise
    finally:
        db.close()

    print("\n✅ Database seeded successfully!")
    print("\n📋 Sample Accounts:")
    for data in SAMPLE_USERS:
        print(f"{data['role'].value.title()}: {data['email']} / {data['password']}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed_database()
