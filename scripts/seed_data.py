#!/usr/bin/env python3
"""
Seed Data Script for SprintOps

Creates a demo team for development:
- 1 Team
- 4 Users (1 admin, 3 members)
- 13 Tasks across every status, with back-dated completions and blockers
- 7 Bugs, some linked to tasks

Usage:
    python scripts/seed_data.py              # Add seed data
    python scripts/seed_data.py --clear      # Clear all data first
"""
import asyncio
import sys
import os
from datetime import datetime, timedelta, timezone
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sprintops.database import async_session, engine
from sprintops.models import Base, Team, User, Task, Bug
from sprintops.models.enums import UserRole, TaskStatus, TaskPriority, BugSeverity, BugStatus
from sprintops.core.security import hash_password


DEMO_PASSWORD = "sprintops123"

# ==================== DATA DEFINITIONS ====================

TEAM_NAME = "SprintOps Demo Team"

USERS_DATA = [
    {"email": "demo@sprintops.com", "name": "Alex Chen", "role": UserRole.ADMIN},
    {"email": "sarah@sprintops.com", "name": "Sarah Miller", "role": UserRole.MEMBER},
    {"email": "james@sprintops.com", "name": "James Wilson", "role": UserRole.MEMBER},
    {"email": "emma@sprintops.com", "name": "Emma Davis", "role": UserRole.MEMBER},
]

# Offsets are in days relative to now; negative is the past
TASKS_DATA = [
    # Done, completed over the past week
    {"title": "Set up CI pipeline", "description": "Run the test suite and deploy on every merge",
     "status": TaskStatus.DONE, "priority": TaskPriority.HIGH, "assignee": "james@sprintops.com",
     "created": -7, "updated": -5},
    {"title": "Design system documentation", "description": "Document palette, typography and components",
     "status": TaskStatus.DONE, "priority": TaskPriority.MEDIUM, "assignee": "sarah@sprintops.com",
     "created": -6, "updated": -4},
    {"title": "User authentication flow", "description": "Login, signup and password reset",
     "status": TaskStatus.DONE, "priority": TaskPriority.HIGH, "assignee": "demo@sprintops.com",
     "created": -10, "updated": -6},
    {"title": "Database schema design", "description": "Model teams, users, tasks and bugs",
     "status": TaskStatus.DONE, "priority": TaskPriority.HIGH, "assignee": "demo@sprintops.com",
     "created": -12, "updated": -8},
    {"title": "Landing page copy", "description": "Write the marketing landing page text",
     "status": TaskStatus.DONE, "priority": TaskPriority.MEDIUM, "assignee": "emma@sprintops.com",
     "created": -5, "updated": -3},

    # In progress
    {"title": "Analytics dashboard charts", "description": "Completion and bug trend charts",
     "status": TaskStatus.IN_PROGRESS, "priority": TaskPriority.HIGH, "assignee": "sarah@sprintops.com",
     "created": -3, "due": 2},
    {"title": "API rate limiting", "description": "Throttle requests per user on every endpoint",
     "status": TaskStatus.IN_PROGRESS, "priority": TaskPriority.MEDIUM, "assignee": "james@sprintops.com",
     "created": -2, "due": 3},
    {"title": "Email notification system", "description": "Notify assignees about new tasks and blockers",
     "status": TaskStatus.IN_PROGRESS, "priority": TaskPriority.MEDIUM, "assignee": "emma@sprintops.com",
     "created": -1, "due": 4},

    # Blocked
    {"title": "Payment integration", "description": "Subscription billing through the payment provider",
     "status": TaskStatus.BLOCKED, "priority": TaskPriority.HIGH, "assignee": "demo@sprintops.com",
     "block_reason": "Waiting for payment provider account approval", "blocked": -2,
     "created": -4, "due": 5},
    {"title": "Mobile responsive redesign", "description": "Make every page usable on phones",
     "status": TaskStatus.BLOCKED, "priority": TaskPriority.MEDIUM, "assignee": "sarah@sprintops.com",
     "block_reason": "Waiting for updated design specs", "blocked": -1,
     "created": -3, "due": 7},

    # To do
    {"title": "Performance optimization", "description": "Profile and speed up slow queries",
     "status": TaskStatus.TODO, "priority": TaskPriority.MEDIUM, "assignee": "james@sprintops.com",
     "created": -1, "due": 10},
    {"title": "User onboarding flow", "description": "Guided tour for new users",
     "status": TaskStatus.TODO, "priority": TaskPriority.LOW, "assignee": "emma@sprintops.com",
     "created": -1, "due": 14},
    {"title": "Export functionality", "description": "Export tasks and analytics as CSV",
     "status": TaskStatus.TODO, "priority": TaskPriority.LOW, "assignee": None,
     "created": 0, "due": 21},
]

BUGS_DATA = [
    # Open
    {"title": "Login fails with special characters in password",
     "description": "Passwords containing & or < are rejected",
     "severity": BugSeverity.CRITICAL, "status": BugStatus.OPEN,
     "linked_task": "User authentication flow", "created": -1},
    {"title": "Dashboard charts not rendering on Safari",
     "description": "Charts throw on first render in Safari 16+",
     "severity": BugSeverity.MEDIUM, "status": BugStatus.OPEN,
     "linked_task": "Analytics dashboard charts", "created": -2},
    {"title": "Task due date shows wrong timezone",
     "description": "Due dates display in UTC instead of local time",
     "severity": BugSeverity.LOW, "status": BugStatus.OPEN, "created": -3},
    {"title": "Memory leak in live updates",
     "description": "Connections are not closed on page navigation",
     "severity": BugSeverity.MEDIUM, "status": BugStatus.OPEN, "created": 0},

    # Fixed
    {"title": "Signup form allows duplicate emails",
     "description": "Email uniqueness was not checked before insert",
     "severity": BugSeverity.CRITICAL, "status": BugStatus.FIXED, "created": -7, "updated": -5},
    {"title": "Task deletion not refreshing list",
     "description": "Deleted tasks stay visible until reload",
     "severity": BugSeverity.MEDIUM, "status": BugStatus.FIXED, "created": -6, "updated": -4},
    {"title": "Overflow on long task titles",
     "description": "Task cards break layout past 100 characters",
     "severity": BugSeverity.LOW, "status": BugStatus.FIXED, "created": -8, "updated": -6},
]


def days_from_now(now: datetime, offset):
    if offset is None:
        return None
    return now + timedelta(days=offset)


# ==================== SEED FUNCTIONS ====================

async def clear_all_data(session: AsyncSession):
    """Clear all data from the database"""
    print("🗑️  Clearing existing data...")

    # Delete in correct order (respecting foreign keys)
    await session.execute(delete(Bug))
    await session.execute(delete(Task))
    await session.execute(delete(User))
    await session.execute(delete(Team))

    await session.commit()
    print("✅ All data cleared")


async def create_team_and_users(session: AsyncSession):
    """Create the demo team with hashed passwords for every member"""
    print("\n🏢 Creating team and users...")

    team = Team(name=TEAM_NAME)
    session.add(team)
    await session.flush()  # Get team ID
    print(f"  ✓ Created team: {team.name}")

    password_hash = hash_password(DEMO_PASSWORD)  # All users share the demo password
    users_map = {}
    for user_data in USERS_DATA:
        user = User(
            email=user_data["email"],
            password_hash=password_hash,
            name=user_data["name"],
            role=user_data["role"].value,
            team_id=team.id,
        )
        session.add(user)
        users_map[user_data["email"]] = user
        print(f"  ✓ Created: {user.name} ({user.email}) - Role: {user.role}")

    await session.commit()

    # Refresh to get IDs
    for user in users_map.values():
        await session.refresh(user)

    return team, users_map


async def create_tasks(session: AsyncSession, team, users_map, now: datetime):
    """Create tasks with back-dated timestamps"""
    print(f"\n📋 Creating tasks for {team.name}...")

    tasks_map = {}
    counts = {status: 0 for status in TaskStatus}

    for task_data in TASKS_DATA:
        assignee = users_map.get(task_data["assignee"]) if task_data["assignee"] else None
        created_at = days_from_now(now, task_data["created"])

        task = Task(
            title=task_data["title"],
            description=task_data["description"],
            status=task_data["status"].value,
            priority=task_data["priority"].value,
            team_id=team.id,
            assigned_to_id=assignee.id if assignee else None,
            due_date=days_from_now(now, task_data.get("due")),
            block_reason=task_data.get("block_reason"),
            blocked_at=days_from_now(now, task_data.get("blocked")),
            created_at=created_at,
            updated_at=days_from_now(now, task_data.get("updated")) or created_at,
        )
        session.add(task)
        tasks_map[task.title] = task
        counts[task_data["status"]] += 1

    await session.commit()

    print(f"  ✓ Created {len(TASKS_DATA)} tasks:")
    for status, count in counts.items():
        print(f"    - {status.value}: {count}")

    return tasks_map


async def create_bugs(session: AsyncSession, team, tasks_map, now: datetime):
    """Create bugs, linking some of them to tasks"""
    print(f"\n🐛 Creating bugs for {team.name}...")

    for bug_data in BUGS_DATA:
        linked_task = tasks_map.get(bug_data.get("linked_task"))
        created_at = days_from_now(now, bug_data["created"])

        bug = Bug(
            title=bug_data["title"],
            description=bug_data["description"],
            severity=bug_data["severity"].value,
            status=bug_data["status"].value,
            team_id=team.id,
            linked_task_id=linked_task.id if linked_task else None,
            created_at=created_at,
            updated_at=days_from_now(now, bug_data.get("updated")) or created_at,
        )
        session.add(bug)

    await session.commit()
    print(f"  ✓ Created {len(BUGS_DATA)} bugs")


# ==================== MAIN ====================

async def seed_database(clear_first: bool = False):
    """Main seed function"""
    print("=" * 60)
    print("🌱 SprintOps - Database Seeding")
    print("=" * 60)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    now = datetime.now(timezone.utc)

    async with async_session() as session:
        if clear_first:
            await clear_all_data(session)

        team, users_map = await create_team_and_users(session)
        tasks_map = await create_tasks(session, team, users_map, now)
        await create_bugs(session, team, tasks_map, now)

    print("\n" + "=" * 60)
    print("✅ Database seeding complete!")
    print("=" * 60)
    print("\n🔑 Login Credentials:")
    print(f"  Admin: {USERS_DATA[0]['email']}")
    print(f"  Password: {DEMO_PASSWORD}")
    print("\n💡 Other accounts (same password):")
    for user_data in USERS_DATA[1:]:
        print(f"  - {user_data['email']} ({user_data['role'].value})")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Seed SprintOps database")
    parser.add_argument("--clear", action="store_true", help="Clear all data before seeding")
    args = parser.parse_args()

    asyncio.run(seed_database(clear_first=args.clear))
