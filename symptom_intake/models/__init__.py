# symptom_intake/models/__init__.py
from symptom_intake.db.session import Base, engine

# Import model modules so SQLAlchemy registers all mappers.
from . import user  # noqa: F401
from . import search_history  # noqa: F401
from . import prediction_history  # noqa: F401


def init_db() -> None:
    """Create tables if they don't exist."""
    Base.metadata.create_all(bind=engine)
