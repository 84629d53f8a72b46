"""
Database module - MongoDB connection.
"""
from careercraft.db.mongodb import get_mongo_db, init_mongo_indexes, test_mongo_connection

__all__ = [
    "get_mongo_db",
    "init_mongo_indexes",
    "test_mongo_connection"
]
