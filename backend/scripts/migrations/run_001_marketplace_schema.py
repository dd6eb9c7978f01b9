#!/usr/bin/env python3
"""
Script: run_001_marketplace_schema.py
Purpose: Create the marketplace tables (migrations/001_marketplace_schema.sql)

This script:
1. Checks which marketplace tables already exist
2. Runs the SQL migration in a single transaction
3. Verifies every table was created

Usage:
    cd backend && source venv/bin/activate
    python scripts/migrations/run_001_marketplace_schema.py [--dry-run]

Options:
    --dry-run    Show what would be done without making changes
"""

import os
import sys
import argparse
import psycopg2
from pathlib import Path
from datetime import datetime

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).parent.parent.parent
MIGRATION_FILE = BACKEND_DIR / 'migrations' / '001_marketplace_schema.sql'

# Load environment
env_path = BACKEND_DIR / '.env.development'
if env_path.exists():
    load_dotenv(env_path)
else:
    load_dotenv(BACKEND_DIR / '.env')

DATABASE_URL = os.getenv("DATABASE_URL")

TABLES = [
    'users',
    'producers',
    'products',
    'cart',
    'orders',
    'order_items',
    'reviews',
]


def print_header(title: str):
    """Print formatted header"""
    print(f"\n{'='*60}")
    print(f"  {title}")
    print(f"{'='*60}\n")


def print_step(step: int, description: str):
    """Print step indicator"""
    print(f"\n[Step {step}] {description}")
    print("-" * 50)


def check_tables_exist(cursor) -> dict:
    """Check which marketplace tables currently exist"""
    result = {}
    for table in TABLES:
        cursor.execute("""
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_schema = 'public'
                AND table_name = %s
            )
        """, (table,))
        result[table] = cursor.fetchone()[0]
    return result


def run_sql_migration(cursor, dry_run: bool = False) -> bool:
    """Execute the SQL migration file"""
    sql = MIGRATION_FILE.read_text()

    if dry_run:
        print(f"  [DRY RUN] Would execute {MIGRATION_FILE.name} ({len(sql.splitlines())} lines)")
        return True

    print(f"  Executing {MIGRATION_FILE.name}")
    cursor.execute(sql)
    return True


def main():
    parser = argparse.ArgumentParser(description='Create the marketplace schema')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be done without making changes')
    args = parser.parse_args()

    dry_run = args.dry_run

    print_header("Migration 001: Marketplace Schema")
    print(f"Timestamp: {datetime.now().isoformat()}")
    print(f"Mode: {'DRY RUN' if dry_run else 'EXECUTE'}")

    if not DATABASE_URL:
        print("\nERROR: DATABASE_URL not set")
        sys.exit(1)

    print_step(1, "Connecting to database")
    try:
        conn = psycopg2.connect(DATABASE_URL)
        conn.autocommit = False
        cursor = conn.cursor()
        print("  Connected successfully")
    except psycopg2.Error as e:
        print(f"  ERROR: {e}")
        sys.exit(1)

    print_step(2, "Checking current database state")
    before_state = check_tables_exist(cursor)
    for table, exists in before_state.items():
        print(f"    {table}: {'EXISTS' if exists else 'not found'}")

    print_step(3, "Executing SQL migration")
    try:
        run_sql_migration(cursor, dry_run)
        if not dry_run:
            conn.commit()
            print("  Migration committed successfully")
    except psycopg2.Error as e:
        conn.rollback()
        print(f"  ERROR: {e}")
        print("  Migration rolled back")
        cursor.close()
        conn.close()
        sys.exit(1)

    print_step(4, "Verifying database changes")
    after_state = check_tables_exist(cursor)
    missing = [table for table, exists in after_state.items() if not exists]

    for table, existed_before in before_state.items():
        if existed_before:
            print(f"  - Table already present: {table}")
        elif after_state[table]:
            print(f"  + Created table: {table}")
        else:
            print(f"  x Missing table: {table}")

    cursor.close()
    conn.close()

    print_header("Summary")
    if dry_run:
        print("DRY RUN COMPLETE - No changes were made")
        print("\nRun without --dry-run to execute changes")
    elif missing:
        print(f"MIGRATION INCOMPLETE - missing tables: {', '.join(missing)}")
        sys.exit(1)
    else:
        print("MIGRATION COMPLETE")
        print(f"\n{len(TABLES)} marketplace tables present")


if __name__ == '__main__':
    main()
