from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import os

# --- CONFIGURATION ---
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(os.path.dirname(__file__), 'db', 'trainr.db')}")

# Render/Heroku hand out postgres:// but SQLAlchemy only accepts postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

IS_POSTGRES = DATABASE_URL.startswith("postgresql")

# --- ENGINE & SESSION ---
if IS_POSTGRES:
    engine = create_engine(
        DATABASE_URL,
        pool_size=20,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800
    )
else:
    if DATABASE_URL.startswith("sqlite:///"):
        db_dir = os.path.dirname(DATABASE_URL.replace("sqlite:///", "", 1))
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False}
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# --- EARLY MIGRATIONS ---
# Trainer search/matching columns were added after the first deployments.
# Older databases get them here, before any ORM query touches the table.
TRAINER_LATE_COLUMNS = [
    ('fitness_goals_json', 'TEXT'),
    ('client_age_ranges_json', 'TEXT'),
    ('location', 'TEXT'),
    ('day_specific_session_times_json', 'TEXT'),
    ('day_specific_session_durations_json', 'TEXT'),
]


def run_early_migrations():
    """Add missing trainer columns to an existing database."""
    from sqlalchemy import inspect, text
    inspector = inspect(engine)
    if not inspector.has_table("trainers"):
        return  # create_all will build the full table

    existing = {col["name"] for col in inspector.get_columns("trainers")}
    with engine.begin() as conn:
        for col_name, col_type in TRAINER_LATE_COLUMNS:
            if col_name not in existing:
                conn.execute(text(f"ALTER TABLE trainers ADD COLUMN {col_name} {col_type}"))


# --- DEPENDENCY ---
def get_db():
    """
    Dependency for FastAPI Routes.
    Yields a database session and closes it after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# --- UTILS ---
def get_db_session():
    return SessionLocal()
