"""Create the ledger tables in the configured database if they are missing."""

from ledger.core.database import init_db

if __name__ == "__main__":
    init_db()
    print("Ledger tables ready")
