from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from stock_ledger.config import settings
from stock_ledger.exceptions import InternalError, LedgerError


def configure_sqlite(engine: Engine) -> Engine:
    """Let SQLAlchemy own BEGIN on SQLite so savepoints and rollbacks are real.

    BEGIN IMMEDIATE takes the write lock up front, which serializes
    concurrent ledger writers the way row locks do on PostgreSQL.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
if engine.dialect.name == "sqlite":
    configure_sqlite(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None):
    # Import all models so Base.metadata knows about them
    import stock_ledger.models.audit_log  # noqa: F401
    import stock_ledger.models.catalog  # noqa: F401
    import stock_ledger.models.inventory  # noqa: F401
    import stock_ledger.models.user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


@contextmanager
def unit_of_work(db: Session):
    """Commit on success, roll back everything on any failure.

    Store errors surface as InternalError so callers only ever see the
    ledger error taxonomy.
    """
    try:
        yield db
        db.commit()
    except LedgerError:
        db.rollback()
        raise
    except SQLAlchemyError as e:
        db.rollback()
        raise InternalError(f"Database error: {e}") from e
    except Exception:
        db.rollback()
        raise
