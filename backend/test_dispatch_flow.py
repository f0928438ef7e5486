"""Inventory edits, stock summary and transfers between stores."""
from decimal import Decimal

import pytest

from retailhub.core.exceptions import DuplicateBarcode, RecordNotFound, ValidationFailed
from retailhub.models.batch import Batch, ADMITTED_NO, ADMITTED_YES
from retailhub.models.dispatch import Dispatch, DISPATCH_COMPLETED, DISPATCH_IN_TRANSIT
from retailhub.models.inventory import InventoryItem, STATUS_AVAILABLE, STATUS_IN_TRANSIT, STATUS_SOLD
from retailhub.models.product import Product
from retailhub.services import dispatch_service, inventory_service
from retailhub.services.admission_service import BatchAdmission, STATE_ACTIVE
from retailhub.services.category_service import CategoryTree


@pytest.fixture
def stocked(db, make_batch, warehouse):
    """Three units admitted into the warehouse."""
    batch = make_batch(quantity=3)
    admission = BatchAdmission(db, batch.id)
    barcodes = [admission.submit(admission.state().expected_code).item.barcode for _ in range(3)]
    return batch, barcodes


def test_manual_entry_defaults_to_warehouse(db, product, warehouse):
    item = inventory_service.add_item(db, {
        "product_id": product.id, "barcode": "LEGACY-0001", "cost_price": "10", "selling_price": "12.5",
    })
    assert item.location == warehouse.name
    assert item.status == STATUS_AVAILABLE
    assert item.selling_price == Decimal("12.50")


def test_manual_entry_rejects_duplicates_and_missing_fields(db, product, stocked):
    _, barcodes = stocked
    with pytest.raises(DuplicateBarcode):
        inventory_service.add_item(db, {
            "product_id": product.id, "barcode": barcodes[0], "cost_price": "1", "selling_price": "2",
        })
    with pytest.raises(ValidationFailed):
        inventory_service.add_item(db, {"product_id": product.id, "barcode": "X-1"})


def _manual_unit(product, batch, barcode):
    return {
        "product_id": product.id, "batch_id": batch.id, "barcode": barcode,
        "cost_price": "100", "selling_price": "150",
    }


def test_manual_entry_fills_batch_slots_up_to_quantity(db, product, make_batch):
    batch = make_batch(quantity=1)
    inventory_service.add_item(db, _manual_unit(product, batch, "X-1"))
    db.refresh(batch)
    assert batch.admitted == ADMITTED_YES

    with pytest.raises(ValidationFailed):
        inventory_service.add_item(db, _manual_unit(product, batch, "X-2"))
    assert db.query(InventoryItem).filter(InventoryItem.batch_id == batch.id).count() == 1
    assert db.query(InventoryItem).filter(InventoryItem.barcode == "X-2").first() is None


def test_manual_entry_into_batch_of_another_product(db, make_batch):
    other = Product(name="Linen Shirt", attributes={})
    db.add(other)
    db.commit()
    batch = make_batch(quantity=2)
    with pytest.raises(ValidationFailed):
        inventory_service.add_item(db, _manual_unit(other, batch, "X-1"))


def test_deleting_a_unit_reopens_a_complete_batch(db, make_batch):
    batch = make_batch(quantity=1)
    admission = BatchAdmission(db, batch.id)
    item = admission.submit(f"{batch.base_code}-01").item
    db.refresh(batch)
    assert batch.admitted == ADMITTED_YES

    inventory_service.delete_item(db, item.id)
    db.expire_all()
    assert db.get(Batch, batch.id).admitted == ADMITTED_NO
    assert admission.state().state == STATE_ACTIVE

    # the freed slot can be admitted again
    admission.submit(f"{batch.base_code}-01")
    db.expire_all()
    assert db.get(Batch, batch.id).admitted == ADMITTED_YES


def test_deleting_a_unit_without_batch(db, product):
    item = inventory_service.add_item(db, {
        "product_id": product.id, "barcode": "LOOSE-1", "cost_price": "5", "selling_price": "8",
    })
    item_id = item.id
    inventory_service.delete_item(db, item_id)
    assert db.query(InventoryItem).count() == 0
    with pytest.raises(RecordNotFound):
        inventory_service.delete_item(db, item_id)


def test_marking_sold_stamps_sold_at(db, stocked):
    _, barcodes = stocked
    item = db.query(InventoryItem).filter(InventoryItem.barcode == barcodes[0]).one()
    updated = inventory_service.update_item(db, item.id, {"status": STATUS_SOLD})
    assert updated.status == STATUS_SOLD
    assert updated.sold_at is not None


def test_update_rejects_unknown_status_and_barcode_change(db, stocked):
    _, barcodes = stocked
    item = db.query(InventoryItem).filter(InventoryItem.barcode == barcodes[0]).one()
    with pytest.raises(ValidationFailed):
        inventory_service.update_item(db, item.id, {"status": "lost"})
    with pytest.raises(ValidationFailed):
        inventory_service.update_item(db, item.id, {"barcode": "NEW"})


def test_stock_summary_counts_per_outlet(db, product, stocked, warehouse):
    root = CategoryTree(db).create("Men")
    tees = CategoryTree(db).create("Tees", parent_id=root.id)
    product.category_id = tees.id
    db.commit()

    _, barcodes = stocked
    items = {i.barcode: i for i in db.query(InventoryItem).all()}
    inventory_service.update_item(db, items[barcodes[0]].id, {"status": "damaged"})
    inventory_service.update_item(db, items[barcodes[1]].id, {"status": STATUS_SOLD})

    [row] = inventory_service.stock_summary(db)
    assert row["product_id"] == product.id
    assert row["category"] == "Men > Tees"
    assert row["total_stock"] == 1
    assert row["outlets"] == {warehouse.name: {"available": 1, "damaged": 1, "in_transit": 0}}


def test_dispatch_by_barcode_and_receive(db, stocked, warehouse, outlet, admin):
    _, barcodes = stocked
    [record] = dispatch_service.dispatch_stock(db, warehouse.id, outlet.id, barcodes=[barcodes[0]], user=admin)

    assert record.status == DISPATCH_IN_TRANSIT
    assert record.dispatched_by == admin.id
    unit = db.get(InventoryItem, record.inventory_id)
    assert unit.status == STATUS_IN_TRANSIT
    assert unit.location == f"In Transit to {outlet.name}"

    received = dispatch_service.receive_unit(db, outlet.id, barcodes[0], user=admin)
    assert received.status == DISPATCH_COMPLETED
    assert received.received_at is not None
    db.refresh(unit)
    assert unit.status == STATUS_AVAILABLE
    assert unit.location == outlet.name


def test_dispatch_by_quantity(db, product, stocked, warehouse, outlet):
    records = dispatch_service.dispatch_stock(
        db, warehouse.id, outlet.id, products=[{"product_id": product.id, "quantity": 2}],
    )
    assert len(records) == 2
    assert db.query(InventoryItem).filter(InventoryItem.status == STATUS_IN_TRANSIT).count() == 2


def test_dispatch_more_than_available_writes_nothing(db, product, stocked, warehouse, outlet):
    with pytest.raises(ValidationFailed) as exc_info:
        dispatch_service.dispatch_stock(
            db, warehouse.id, outlet.id, products=[{"product_id": product.id, "quantity": 5}],
        )
    assert exc_info.value.message == f"Not enough stock for product {product.id}. Available: 3, Requested: 5"
    assert db.query(Dispatch).count() == 0
    assert db.query(InventoryItem).filter(InventoryItem.status == STATUS_AVAILABLE).count() == 3


def test_dispatch_rejects_same_store_and_empty_selection(db, stocked, warehouse, outlet):
    with pytest.raises(ValidationFailed):
        dispatch_service.dispatch_stock(db, warehouse.id, warehouse.id, barcodes=["x"])
    with pytest.raises(ValidationFailed):
        dispatch_service.dispatch_stock(db, warehouse.id, outlet.id)


def test_unit_not_at_source_cannot_be_dispatched(db, stocked, warehouse, outlet):
    _, barcodes = stocked
    with pytest.raises(ValidationFailed):
        dispatch_service.dispatch_stock(db, outlet.id, warehouse.id, barcodes=[barcodes[0]])


def test_receive_requires_upcoming_unit(db, stocked, outlet):
    _, barcodes = stocked
    with pytest.raises(RecordNotFound) as exc_info:
        dispatch_service.receive_unit(db, outlet.id, barcodes[0])
    assert exc_info.value.message == "Upcoming stock not found"


def test_list_dispatches_filters(db, stocked, warehouse, outlet):
    _, barcodes = stocked
    dispatch_service.dispatch_stock(db, warehouse.id, outlet.id, barcodes=barcodes[:2])
    dispatch_service.receive_unit(db, outlet.id, barcodes[0])

    assert len(dispatch_service.list_dispatches(db, to_store=outlet.name)) == 2
    [pending] = dispatch_service.list_dispatches(db, status=DISPATCH_IN_TRANSIT)
    assert pending.barcode == barcodes[1]
