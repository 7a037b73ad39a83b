import os

# Every store-backed suite runs against an in-memory SQLite database.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.setdefault("ORM", "peewee")
