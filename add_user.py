"""Seed a demo account: ``python add_user.py [email] [password] [nome]``."""
import sys

from taskshare import config
from taskshare.database import Database
from taskshare.logging_setup import setup_logging
from taskshare.services.users import register_user


def main(argv):
    email = argv[1] if len(argv) > 1 else "test@example.com"
    password = argv[2] if len(argv) > 2 else "password"
    nome = argv[3] if len(argv) > 3 else "Test User"

    setup_logging(config.LOG_LEVEL)
    database = Database(config.DATABASE_URL)
    database.connect()
    try:
        database.create_tables()
        with database.session() as db:
            result = register_user(db, email, password, nome)
    finally:
        database.disconnect()

    if result.ok:
        print(f"Test user created: {email} / {password}")
        return 0
    print(f"Could not create {email}: {result.message}")
    return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
