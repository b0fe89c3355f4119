import pytest

from core import inventory_ledger, product_service


def _fields(**overrides):
    fields = {
        "name": "Thé vert bio",
        "barcode": "8992761132022",
        "purchasePrice": 8.0,
        "salePrice": 14.5,
        "stock": 150,
    }
    fields.update(overrides)
    return fields


def test_add_product_generates_id_and_normalises_fields():
    product = product_service.add_product(_fields(name="  Thé vert bio  ", barcode=" 8992 7611 32022 "))

    assert product.id.startswith("p")
    assert product.name == "Thé vert bio"
    assert product.barcode == "8992761132022"
    assert product_service.get_product(product.id) == product


def test_add_product_collects_field_errors():
    with pytest.raises(product_service.ProductValidationError) as excinfo:
        product_service.add_product(_fields(name="", barcode="   ", salePrice=0, stock=-1))

    assert set(excinfo.value.fields) == {"name", "barcode", "sale_price", "stock"}


def test_add_product_coerces_numeric_strings():
    product = product_service.add_product(_fields(purchasePrice="3.50", salePrice="7", stock="12"))

    assert product.purchase_price == 3.5
    assert product.sale_price == 7.0
    assert product.stock == 12


def test_add_product_rejects_duplicate_barcode():
    product_service.add_product(_fields())

    with pytest.raises(product_service.DuplicateBarcodeError) as excinfo:
        product_service.add_product(_fields(name="Autre thé"))

    assert excinfo.value.field == "barcode"
    assert len(product_service.list_products()) == 1


def test_update_product_keeps_missing_fields():
    product = product_service.add_product(_fields())

    updated = product_service.update_product(product.id, {"salePrice": 15.0})

    assert updated.sale_price == 15.0
    assert updated.name == product.name
    assert product_service.get_product(product.id).sale_price == 15.0


def test_update_product_allows_own_barcode_but_not_another():
    first = product_service.add_product(_fields())
    second = product_service.add_product(_fields(name="Café", barcode="111"))

    product_service.update_product(first.id, {"barcode": first.barcode, "name": "Thé vert"})
    with pytest.raises(product_service.DuplicateBarcodeError):
        product_service.update_product(second.id, {"barcode": first.barcode})

    assert product_service.get_product(second.id).barcode == "111"


def test_update_unknown_product_raises():
    with pytest.raises(product_service.ProductNotFoundError):
        product_service.update_product("p-missing", {"name": "X"})


def test_delete_product_refused_when_used_in_sale(make_product):
    make_product("A", stock=5)
    sale_id = inventory_ledger.record_sale(
        [{"product_id": "A", "product_name": "A", "quantity": 1, "sale_price": 5.0}], 5.0
    )

    with pytest.raises(product_service.ProductInUseError):
        product_service.delete_product("A")

    inventory_ledger.delete_sale(sale_id)
    product_service.delete_product("A")
    with pytest.raises(product_service.ProductNotFoundError):
        product_service.get_product("A")


def test_list_products_sorted_and_filtered(make_product):
    make_product("1", name="Pain au levain", barcode="300")
    make_product("2", name="Café en grains", barcode="100")
    make_product("3", name="Chocolat noir", barcode="200")

    assert [p.name for p in product_service.list_products()] == [
        "Café en grains",
        "Chocolat noir",
        "Pain au levain",
    ]
    assert [p.id for p in product_service.list_products(search="CHOCO")] == ["3"]
    assert [p.id for p in product_service.list_products(search="30")] == ["1"]


def test_get_product_by_barcode(make_product):
    make_product("A", barcode="8992761132015")

    assert product_service.get_product_by_barcode(" 8992761132015 ").id == "A"
    with pytest.raises(product_service.ProductNotFoundError):
        product_service.get_product_by_barcode("000")
