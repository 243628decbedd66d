"""
Migration: persist the declined-completion marker.

- user_progress: add completion_deferred (BOOLEAN, default 0).

Databases created before the completion-confirmation flow only had
status/percentage, so a declined offer was lost on re-fetch.
"""

import os
import sqlite3


def run_migration():
    db_path = os.getenv("DATABASE_URL", "sqlite:///./campus-progress.db").replace("sqlite:///", "")
    conn = None
    try:
        conn = sqlite3.connect(db_path)
        cursor = conn.cursor()

        cursor.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='user_progress'"
        )
        if cursor.fetchone():
            try:
                cursor.execute(
                    "ALTER TABLE user_progress ADD COLUMN completion_deferred BOOLEAN NOT NULL DEFAULT 0"
                )
                print("user_progress: added completion_deferred")
            except sqlite3.OperationalError as e:
                if "duplicate column" in str(e).lower():
                    print("user_progress.completion_deferred already exists. Skipping.")
                else:
                    raise
        else:
            print("user_progress table not found. Skipping column add.")

        conn.commit()
        print("Migration add_completion_deferred completed successfully!")

    except sqlite3.Error as e:
        print(f"Error during migration: {e}")
        if conn:
            conn.rollback()
        raise
    finally:
        if conn:
            conn.close()


if __name__ == "__main__":
    run_migration()
