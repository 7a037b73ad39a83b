import os

from dotenv import load_dotenv
from playhouse.db_url import connect

load_dotenv()

# Default to SQLite
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///tasks.db")

# Initialize the database connection
db = connect(DATABASE_URL)


def get_db():
    return db
