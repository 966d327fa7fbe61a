"""
Database initialization script.

Run this to create the database tables:
    python -m taskflow.db.init_db

Add --seed to create a demo project with a few members.
"""

import sys
from taskflow.db.database import get_session, init_db
from taskflow.db.repository import TaskRepository

DEMO_MEMBERS = [
    {"username": "amira", "email": "amira@example.com", "experience_level": "senior",
     "skills": {"React": 5, "Node.js": 4, "Testing": 3}},
    {"username": "youssef", "email": "youssef@example.com", "experience_level": "junior",
     "skills": {"JavaScript": 3, "CSS": 4}},
    {"username": "lina", "email": "lina@example.com", "experience_level": "mid-level",
     "skills": {"Docker": 4, "CI/CD": 3, "Git": 5}},
]


def seed_demo_data() -> str:
    """Create a demo project with members and skills. Returns the project id."""
    db = get_session()
    try:
        repo = TaskRepository(db)
        project = repo.create_project("Demo project", description="Seeded by init_db")
        lead = repo.add_user("leader", "leader@example.com", role="TeamLeader", experience_level="lead")
        repo.add_to_project(project.id, lead.id, role="admin")

        for profile in DEMO_MEMBERS:
            user = repo.add_user(
                profile["username"],
                profile["email"],
                experience_level=profile["experience_level"]
            )
            for skill_name, proficiency in profile["skills"].items():
                repo.set_skill(user.id, skill_name, proficiency)
            repo.add_to_project(project.id, user.id)

        return project.id
    finally:
        db.close()


if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    if "--seed" in sys.argv:
        project_id = seed_demo_data()
        print(f"Seeded demo project: {project_id}")
    print("Database initialization complete!")
