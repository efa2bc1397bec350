from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy_utils import create_database, database_exists

from .config import Environment, settings
from .logger import logger

Base = declarative_base()


def _connect_args() -> dict:
    if settings.ENVIRONMENT == Environment.TEST:
        return {}
    # Statements cannot outlive the request timeout
    timeout_ms = int(settings.CHECK_IN_TIMEOUT_SECONDS * 1000)
    return {'options': f'-c statement_timeout={timeout_ms}'}


engine = create_engine(settings.DATABASE_URL, connect_args=_connect_args())

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Create the database and its tables on the shared engine
def create_db():
    if not database_exists(engine.url):
        logger.info('Database does not exist. Creating...')
        create_database(engine.url)
        logger.info('Database created successfully!')

    Base.metadata.create_all(bind=engine)


def get_session_factory() -> sessionmaker:
    """
    Dependency returning the session factory.

    The check-in pipeline opens its own session inside the worker thread, so a
    request that times out never shares a session with the request teardown.
    """
    return SessionLocal
