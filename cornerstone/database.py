import os
from contextlib import contextmanager
from datetime import datetime, timezone

from dotenv import load_dotenv
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.orm import Session, declarative_base, sessionmaker

load_dotenv()

SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./cornerstone.db")
SNAPSHOT_ISOLATION_LEVEL = "SERIALIZABLE"


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {}


def configure_sqlite_transactions(target_engine) -> None:
    """Let SQLAlchemy own transaction boundaries on a pysqlite engine.

    pysqlite only emits BEGIN ahead of writes, so consecutive SELECTs would
    each see the latest commit. Its own handling is switched off and BEGIN
    is sent whenever SQLAlchemy starts a transaction. WAL journaling lets a
    writer commit while a read transaction keeps its snapshot.
    """

    @event.listens_for(target_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
        finally:
            cursor.close()

    @event.listens_for(target_engine, "begin")
    def _on_begin(connection):
        connection.exec_driver_sql("BEGIN")


engine = create_engine(SQLALCHEMY_DATABASE_URL, **_engine_kwargs(SQLALCHEMY_DATABASE_URL))
if engine.dialect.name == "sqlite":
    configure_sqlite_transactions(engine)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

DEFAULT_BUDGET_CATEGORIES = (
    ("bc-materials", "Materials", "Raw materials and building supplies", "#3B82F6"),
    ("bc-labor", "Labor", "Contractor and worker labor costs", "#EF4444"),
    ("bc-permits", "Permits", "Building permits and regulatory fees", "#F59E0B"),
    ("bc-design", "Design", "Architectural and design services", "#8B5CF6"),
    ("bc-equipment", "Equipment", "Tools and equipment rental or purchase", "#06B6D4"),
    ("bc-landscaping", "Landscaping", "Outdoor landscaping and hardscaping", "#22C55E"),
    ("bc-utilities", "Utilities", "Utility connections and installations", "#F97316"),
    ("bc-insurance", "Insurance", "Construction and builder risk insurance", "#6366F1"),
    ("bc-contingency", "Contingency", "Reserve funds for unexpected costs", "#EC4899"),
    ("bc-other", "Other", "Miscellaneous costs not covered by other categories", "#6B7280"),
)

_INDEX_STATEMENTS = (
    "CREATE INDEX IF NOT EXISTS idx_invoices_work_item_budget_status ON invoices (work_item_budget_id, status)",
    "CREATE INDEX IF NOT EXISTS idx_work_item_budgets_work_item_category ON work_item_budgets (work_item_id, budget_category_id)",
)


def _run_schema_statement(connection, sql: str) -> None:
    try:
        connection.execute(text(sql))
    except Exception as exc:  # noqa: BLE001
        print(f"[database] schema statement skipped: {exc} | sql={sql}")


def ensure_runtime_schema(bind=None) -> None:
    """Create tables, lookup indexes and the default category catalog."""
    from . import models  # noqa: F401  register tables on Base.metadata

    target = bind if bind is not None else engine
    Base.metadata.create_all(bind=target)

    with target.begin() as connection:
        table_names = set(inspect(connection).get_table_names())
        if {"invoices", "work_item_budgets"} <= table_names:
            for statement in _INDEX_STATEMENTS:
                _run_schema_statement(connection, statement)

    ensure_default_budget_categories(bind=target)


def ensure_default_budget_categories(bind=None) -> None:
    """Seed the default category catalog (idempotent, never overwrites edits)."""
    from . import models

    session = Session(bind=bind if bind is not None else engine)
    try:
        existing_ids = {row.id for row in session.query(models.BudgetCategory.id).all()}
        existing_names = {
            (row.name or "").strip().lower()
            for row in session.query(models.BudgetCategory.name).all()
        }
        now_iso = datetime.now(timezone.utc).isoformat()
        for sort_order, (category_id, name, description, color) in enumerate(DEFAULT_BUDGET_CATEGORIES):
            if category_id in existing_ids or name.lower() in existing_names:
                continue
            session.add(
                models.BudgetCategory(
                    id=category_id,
                    name=name,
                    description=description,
                    color=color,
                    sort_order=sort_order,
                    created_at=now_iso,
                    updated_at=now_iso,
                )
            )
        session.commit()
    except Exception as exc:  # noqa: BLE001
        session.rollback()
        print(f"[database] default budget category seeding skipped: {exc}")
    finally:
        session.close()


@contextmanager
def read_snapshot(db: Session):
    """Run a group of reads inside one transaction.

    An already open transaction is reused as-is. Otherwise a fresh one is
    started at snapshot isolation and rolled back once the reads are done.
    SQLite transactions are serializable already and rely on the explicit
    BEGIN from configure_sqlite_transactions.
    """
    if db.in_transaction():
        yield db
        return

    if db.get_bind().dialect.name == "sqlite":
        db.connection()
    else:
        db.connection(execution_options={"isolation_level": SNAPSHOT_ISOLATION_LEVEL})
    try:
        yield db
    finally:
        db.rollback()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
