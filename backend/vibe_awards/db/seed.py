"""Database seeding script for development.

Populates an empty database with sample developers, apps, an active
battle and collaboration posts. Engagement counters start at zero so
they agree with the (empty) like/nomination/vote tables.
Run with: python -m vibe_awards.db.seed
"""

import asyncio
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vibe_awards.db.session import async_session_factory, engine
from vibe_awards.db.utils import create_tables
from vibe_awards.models import Battle, CollaborationPost, Submission, SubmissionFeature, User
from vibe_awards.services.auth_service import hash_password

SAMPLE_PASSWORD = "password123"

USERS_DATA = [
    {"username": "lukekist", "email": "luke@tinkybink.com"},
    {"username": "edutech_labs", "email": "hello@edutechlabs.com"},
    {"username": "sonic_innovations", "email": "team@sonicinnovations.com"},
]

APPS_DATA = [
    {
        "name": "TinkyBink AAC",
        "short_description": "Revolutionary AI-powered Augmentative and Alternative Communication platform",
        "full_description": (
            "AI-powered Augmentative and Alternative Communication platform that transforms "
            "speech therapy through predictive analytics and real-time family engagement."
        ),
        "category": "Healthcare",
        "platform": "Cross-Platform",
        "featured": True,
        "trending": True,
        "battle_ready": True,
        "features": ["Automated IEP goal generation", "Breakthrough prediction", "Insurance billing integration"],
    },
    {
        "name": "StudyBuddy AI",
        "short_description": "AI-powered study companion that adapts to your learning style",
        "full_description": (
            "Study companion that helps you master any subject faster with personalized "
            "study plans, intelligent flashcards and progress tracking."
        ),
        "category": "Education",
        "platform": "Cross-Platform",
        "trending": True,
        "battle_ready": True,
        "features": ["Personalized study plans", "Intelligent flashcards", "Progress tracking"],
    },
    {
        "name": "BeatMaker Studio",
        "short_description": "Professional music production studio in your pocket",
        "full_description": (
            "Music production studio with AI-assisted composition and mixing. Create beats, "
            "melodies and full tracks with intuitive tools and powerful effects."
        ),
        "category": "Entertainment",
        "platform": "iOS",
        "project_type": "music",
        "staff_pick": True,
        "battle_ready": True,
        "features": ["AI-assisted composition", "Mixing console", "Effects rack"],
    },
]

POSTS_DATA = [
    {
        "title": "AI Health Monitoring App - Need iOS Developer",
        "description": (
            "Prototype that uses machine learning to predict health issues from wearable data. "
            "The backend is solid, the iOS app still needs building."
        ),
        "project_stage": "prototype",
        "collaboration_type": "developer",
        "skills_needed": "Swift, iOS Development, HealthKit, Core ML",
        "project_category": "Healthcare",
        "tech_stack": "Python, TensorFlow, FastAPI, PostgreSQL",
        "repo_url": "https://github.com/lukekist/health-monitor",
        "equity_offered": True,
        "time_commitment": "10-20 hours/week",
        "contact_method": "luke@tinkybink.com",
    },
    {
        "title": "EdTech Startup - Seeking Co-Founder",
        "description": (
            "Platform that personalizes learning using AI. MVP with 500+ beta users; looking "
            "for a business-minded co-founder for marketing, partnerships and funding."
        ),
        "project_stage": "mvp",
        "collaboration_type": "co_founder",
        "skills_needed": "Business Development, Marketing, Fundraising",
        "project_category": "Education",
        "tech_stack": "React, Node.js, MongoDB, AWS",
        "demo_url": "https://studybuddy-beta.com",
        "equity_offered": True,
        "time_commitment": "Full-time",
        "contact_method": "hello@edutechlabs.com",
    },
    {
        "title": "Music Production App - Need UI/UX Designer",
        "description": (
            "Next-generation mobile music production tool. The audio engine is complete; we need "
            "a designer who understands music workflow."
        ),
        "project_stage": "near_complete",
        "collaboration_type": "designer",
        "skills_needed": "UI/UX Design, Music Production Knowledge, Figma",
        "project_category": "Entertainment",
        "tech_stack": "React Native, C++ Audio Engine, Firebase",
        "paid_opportunity": True,
        "time_commitment": "5-10 hours/week",
        "deadline": "2024-12-31",
        "contact_method": "team@sonicinnovations.com",
    },
]


async def seed_sample_data(session: AsyncSession) -> bool:
    """Insert the sample data set unless users already exist.

    Returns:
        True if data was inserted, False if the database was not empty
    """
    result = await session.execute(select(User.id).limit(1))
    if result.first() is not None:
        return False

    hashed = hash_password(SAMPLE_PASSWORD)
    users = [User(hashed_password=hashed, role="developer", **data) for data in USERS_DATA]
    session.add_all(users)
    await session.flush()

    apps = []
    for developer, data in zip(users, APPS_DATA):
        data = dict(data)
        features = data.pop("features")
        app = Submission(developer_id=developer.id, status="approved", **data)
        app.features = [SubmissionFeature(name=name) for name in features]
        apps.append(app)
    session.add_all(apps)
    await session.flush()

    session.add(
        Battle(
            submission_a_id=apps[0].id,
            submission_b_id=apps[1].id,
            category="Featured",
            battle_date=date.today(),
            status="active",
        )
    )

    session.add_all(
        [CollaborationPost(user_id=owner.id, **data) for owner, data in zip(users, POSTS_DATA)]
    )
    await session.commit()
    return True


async def main():
    """Create tables and seed sample data."""
    print("Starting database seeding...")

    try:
        await create_tables(engine)
        async with async_session_factory() as session:
            seeded = await seed_sample_data(session)
        if seeded:
            print(f"Seeded {len(USERS_DATA)} users, {len(APPS_DATA)} apps, 1 battle and {len(POSTS_DATA)} posts")
        else:
            print("Users already present. Skipping...")
    except Exception as e:
        print(f"Error during seeding: {e}")
        raise
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
