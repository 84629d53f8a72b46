#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB and the AI endpoint are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from careercraft.db.mongodb import test_mongo_connection
from careercraft.services.ai_client import get_ai_client
from careercraft.core.config import get_settings


def main():
    settings = get_settings()
    print("=" * 50)
    print("CAREERCRAFT AI - CONNECTION CHECK")
    print("=" * 50)

    # MongoDB
    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    MongoDB: CONNECTED")
    else:
        print("    MongoDB: FAILED")

    # AI endpoint (only if API key is set)
    print("\n[2] Checking AI endpoint...")
    if settings.ai_api_key:
        print(f"    Base URL: {settings.ai_base_url}")
        print(f"    Model: {settings.ai_model}")
        if get_ai_client().test_connection():
            print("    AI: CONNECTED")
        else:
            print("    AI: FAILED")
    else:
        print("    AI: API key not configured (skipped)")

    # Resume storage
    print("\n[3] Resume storage...")
    if settings.storage_backend.lower() == "s3":
        print(f"    Backend: s3 (bucket {settings.s3_bucket or 'NOT SET'})")
    else:
        print(f"    Backend: local ({settings.local_upload_dir}/)")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
