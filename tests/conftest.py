from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from stock_ledger.database import Base, configure_sqlite, get_db, init_db
from stock_ledger.main import app
from stock_ledger.models.catalog import Product, Warehouse, WarehouseZone
from stock_ledger.models.user import User


def _seed_reference_data(session):
    actor = User(username="alice", display_name="Alice")
    product = Product(
        sku="ELE-GAMEMO-PCS",
        barcode="4006381333931",
        name="Game Mouse",
        category="Electronics",
        unit="PCS",
    )
    main = Warehouse(code="WHMAIN", name="Main")
    north = Warehouse(code="NORTH", name="North")
    session.add_all([actor, product, main, north])
    session.flush()

    receiving = WarehouseZone(warehouse_id=main.id, code="WHMAIN-RECE", name="Receiving")
    storage = WarehouseZone(warehouse_id=main.id, code="WHMAIN-STOR", name="Storage")
    north_dock = WarehouseZone(warehouse_id=north.id, code="NORTH-DOCK", name="Dock")
    session.add_all([receiving, storage, north_dock])
    session.commit()

    return SimpleNamespace(
        actor=actor,
        product_id=product.id,
        warehouse_id=main.id,
        other_warehouse_id=north.id,
        zone_a=receiving.id,
        zone_b=storage.id,
        foreign_zone=north_dock.id,
    )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    configure_sqlite(engine)
    init_db(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def seed(db):
    """Two warehouses, three zones, one product and one actor."""
    return _seed_reference_data(db)


@pytest.fixture
def file_session_factory(tmp_path):
    """Sessionmaker over a file-backed SQLite database, one pooled connection per thread."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
        pool_size=10,
    )
    configure_sqlite(engine)
    init_db(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture
def file_seed(file_session_factory):
    session = file_session_factory()
    try:
        return _seed_reference_data(session)
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
