"""
Database module - relational store and MongoDB connections.
"""
from campus_recruit.db.postgres import get_db_session, ping_database
from campus_recruit.db.mongodb import get_mongo_db, ping_mongo

__all__ = [
    "get_db_session",
    "ping_database",
    "get_mongo_db",
    "ping_mongo"
]
