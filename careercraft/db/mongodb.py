"""
MongoDB Connection Utility

MongoDB is the only data store:
- users: seekers, recruiters, admins (credentials + profile)
- jobs: postings owned by recruiters
- applications: seeker <-> job links with a status lifecycle
- mock_tests: question banks
- test_attempts: scored attempts with a per-question review
"""
import logging

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.collection import Collection
from careercraft.core.config import get_settings

logger = logging.getLogger(__name__)

# Global client (connection pooling handled internally by pymongo)
_client: MongoClient = None
_db: Database = None


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client (singleton pattern)"""
    global _client
    if _client is None:
        _client = MongoClient(get_settings().mongodb_uri)
    return _client


def get_mongo_db() -> Database:
    """
    Get the application database.

    Also used as a FastAPI dependency, so tests can override it with an
    in-memory database.
    """
    global _db
    if _db is None:
        client = get_mongo_client()
        _db = client[get_settings().mongodb_db]
    return _db


def get_collection(name: str, db: Database = None) -> Collection:
    """Get a specific collection (see COLLECTIONS)."""
    db = db if db is not None else get_mongo_db()
    return db[name]


def test_mongo_connection() -> bool:
    """
    Test if MongoDB is reachable.
    Returns True if connection successful, False otherwise.
    """
    try:
        client = get_mongo_client()
        # ping command checks connection
        client.admin.command('ping')
        return True
    except Exception as e:
        logger.warning("MongoDB connection failed: %s", e)
        return False


# Collection name constants (avoid typos)
COLLECTIONS = {
    "users": "users",
    "jobs": "jobs",
    "applications": "applications",
    "mock_tests": "mock_tests",
    "test_attempts": "test_attempts",
}


def init_mongo_indexes(db: Database = None):
    """
    Create indexes, including the unique constraints the services rely on:
    - users.email
    - applications (job_id, seeker_id): one application per seeker per job
    - mock_tests.title
    Call this once during app startup.
    """
    db = db if db is not None else get_mongo_db()

    db[COLLECTIONS["users"]].create_index("email", unique=True)
    db[COLLECTIONS["users"]].create_index("password_reset_token")

    jobs = db[COLLECTIONS["jobs"]]
    jobs.create_index("posted_by")
    jobs.create_index("status")
    jobs.create_index("category")
    jobs.create_index("job_type")
    jobs.create_index("experience_level")
    jobs.create_index([("created_at", DESCENDING)])

    applications = db[COLLECTIONS["applications"]]
    applications.create_index([("job_id", ASCENDING), ("seeker_id", ASCENDING)], unique=True)
    applications.create_index([("seeker_id", ASCENDING), ("application_date", DESCENDING)])
    applications.create_index("recruiter_id")

    mock_tests = db[COLLECTIONS["mock_tests"]]
    mock_tests.create_index("title", unique=True)
    mock_tests.create_index("category")
    mock_tests.create_index("difficulty_level")
    mock_tests.create_index("status")

    db[COLLECTIONS["test_attempts"]].create_index([("seeker_id", ASCENDING), ("created_at", DESCENDING)])
    db[COLLECTIONS["test_attempts"]].create_index("mock_test_id")

    logger.info("MongoDB indexes created successfully")
