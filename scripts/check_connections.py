#!/usr/bin/env python3
"""
Connection Check Script

Verifies the database and the AI gateway are reachable, and creates any
missing tables.
Usage: python scripts/check_connections.py
"""
from placement_hub.core.config import get_settings
from placement_hub.db.postgres import init_db, test_db_connection
from placement_hub.services.ai_gateway_client import get_ai_client


def main():
    settings = get_settings()
    print("=" * 50)
    print("CAMPUS PLACEMENT HUB - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Database...")
    if settings.database_url:
        print(f"    URL: {settings.database_url.split('@')[-1]}")
    else:
        print(f"    URL: postgresql://{settings.postgres_user}:****@{settings.postgres_host}:{settings.postgres_port}/{settings.postgres_db}")
    if test_db_connection():
        init_db()
        print("    ✅ Database: CONNECTED (tables ready)")
    else:
        print("    ❌ Database: FAILED")

    print("\n[2] AI gateway...")
    client = get_ai_client()
    if client.configured:
        print(f"    Base URL: {client.base_url}")
        print(f"    Model: {client.model}")
        if client.test_connection():
            print("    ✅ AI gateway: CONNECTED")
        else:
            print("    ❌ AI gateway: FAILED (features will use fallbacks)")
    else:
        print("    ⚠️  AI gateway: API key not configured (features will use fallbacks)")

    print("\n" + "=" * 50)


if __name__ == "__main__":
    main()
