#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the database and MongoDB connections are working.
Usage: python scripts/test_connections.py
"""
import sys

from campus_recruit.core.config import get_settings
from campus_recruit.db.mongodb import ping_mongo
from campus_recruit.db.postgres import ping_database


def main() -> int:
    settings = get_settings()
    print("=" * 50)
    print("CAMPUS RECRUITMENT PORTAL - CONNECTION TEST")
    print("=" * 50)

    print("\n[1] Testing database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    database_ok = ping_database()
    print("    Database: CONNECTED" if database_ok else "    Database: FAILED")

    print("\n[2] Testing MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if settings.rate_limit_backend != "mongo":
        print("    (rate limiting uses the in-memory store; MongoDB is optional)")
    mongo_ok = ping_mongo()
    print("    MongoDB: CONNECTED" if mongo_ok else "    MongoDB: FAILED")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)

    required_ok = database_ok and (mongo_ok or settings.rate_limit_backend != "mongo")
    return 0 if required_ok else 1


if __name__ == "__main__":
    sys.exit(main())
