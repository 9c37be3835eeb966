from contextlib import contextmanager

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from config import DATABASE_URL
from errors import StoreError


connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)


def create_db_and_tables(bind=None):
    import models  # noqa: F401  registers the tables on SQLModel.metadata

    SQLModel.metadata.create_all(bind or engine)


# get a session
def get_session():
    with Session(engine) as session:
        yield session


@contextmanager
def store_operation(db: Session, action: str):
    """
    Wrap one registry/scheduler operation.

    Any persistence failure is rolled back and surfaced once as
    StoreError("Failed to <action>"); domain errors pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.exception("Store error while trying to {}", action)
        try:
            db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback failed after {}", action)
        raise StoreError(f"Failed to {action}") from e
