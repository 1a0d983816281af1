from concurrent.futures import ThreadPoolExecutor

from stock_ledger.exceptions import InsufficientStockError
from stock_ledger.models.inventory import StockLogType
from stock_ledger.schemas.inventory import InventoryAdjust, InventoryMove
from stock_ledger.services import inventory_service, ledger_store

WORKERS = 8


def _run_all(session_factory, calls):
    """Run each ``(operation, data)`` in its own thread and session.

    Returns "ok" or "rejected" per call; any other error fails the test.
    """

    def run(call):
        operation, data = call
        session = session_factory()
        try:
            operation(session, data)
            return "ok"
        except InsufficientStockError:
            return "rejected"
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        futures = [pool.submit(run, call) for call in calls]
        return [future.result(timeout=60) for future in futures]


def _adjust(seed, zone, change):
    return InventoryAdjust(
        product_id=seed.product_id, warehouse_id=seed.warehouse_id, zone_id=zone, quantity_change=change
    )


def _move(seed, source, destination, quantity):
    return InventoryMove(
        product_id=seed.product_id,
        warehouse_id=seed.warehouse_id,
        source_zone_id=source,
        destination_zone_id=destination,
        quantity=quantity,
    )


def _assert_log_chain(session, inventory):
    logs = inventory_service.get_stock_logs(session, inventory.id, limit=1000)
    previous_after = 0
    for log in logs:
        assert log.quantity_after == log.quantity_before + log.quantity_change
        assert log.quantity_before == previous_after
        previous_after = log.quantity_after
    assert previous_after == inventory.quantity
    return logs


def test_concurrent_decrements_never_oversell(file_session_factory, file_seed):
    zone = file_seed.zone_a
    _run_all(file_session_factory, [(inventory_service.adjust_inventory, _adjust(file_seed, zone, 10))])

    results = _run_all(
        file_session_factory,
        [(inventory_service.adjust_inventory, _adjust(file_seed, zone, -1)) for _ in range(25)],
    )

    assert results.count("ok") == 10
    assert results.count("rejected") == 15

    session = file_session_factory()
    try:
        inventory = ledger_store.find_inventory(session, file_seed.product_id, file_seed.warehouse_id, zone)
        assert inventory.quantity == 0
        logs = _assert_log_chain(session, inventory)
        assert len(logs) == 11
    finally:
        session.close()


def test_concurrent_first_receipts_share_one_inventory_row(file_session_factory, file_seed):
    zone = file_seed.zone_b
    results = _run_all(
        file_session_factory,
        [(inventory_service.adjust_inventory, _adjust(file_seed, zone, 1)) for _ in range(20)],
    )
    assert results == ["ok"] * 20

    session = file_session_factory()
    try:
        rows = inventory_service.list_inventory(session, product_id=file_seed.product_id)
        assert len(rows) == 1
        assert rows[0].quantity == 20
        _assert_log_chain(session, rows[0])
    finally:
        session.close()


def test_opposite_moves_conserve_stock(file_session_factory, file_seed):
    a, b = file_seed.zone_a, file_seed.zone_b
    _run_all(
        file_session_factory,
        [
            (inventory_service.adjust_inventory, _adjust(file_seed, a, 30)),
            (inventory_service.adjust_inventory, _adjust(file_seed, b, 30)),
        ],
    )

    calls = []
    for _ in range(20):
        calls.append((inventory_service.move_inventory, _move(file_seed, a, b, 2)))
        calls.append((inventory_service.move_inventory, _move(file_seed, b, a, 3)))
    results = _run_all(file_session_factory, calls)

    session = file_session_factory()
    try:
        rows = inventory_service.list_inventory(session, product_id=file_seed.product_id)
        assert len(rows) == 2
        assert sum(row.quantity for row in rows) == 60
        issues = 0
        for row in rows:
            assert row.quantity >= 0
            logs = _assert_log_chain(session, row)
            issues += sum(1 for log in logs if log.type == StockLogType.GOODS_ISSUE)
        assert issues == results.count("ok")
    finally:
        session.close()
