import pytest

pytest.importorskip('fastapi')

from fastapi.testclient import TestClient

from backend.main import app


@pytest.fixture
def api_client():
    return TestClient(app)


def _product_payload(**overrides):
    payload = {
        'name': 'Premium Coffee Beans',
        'barcode': '8992761132015',
        'purchasePrice': 15.5,
        'salePrice': 25.0,
        'stock': 10,
    }
    payload.update(overrides)
    return payload


def _create_product(client, **overrides):
    response = client.post('/catalog/products', json=_product_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


def test_health_endpoint(api_client):
    response = api_client.get('/health')
    assert response.status_code == 200
    assert response.json() == {'status': 'ok'}


def test_product_crud_flow(api_client):
    product = _create_product(api_client)

    listing = api_client.get('/catalog/products', params={'search': 'coffee'})
    assert listing.json()['total'] == 1

    response = api_client.put(f"/catalog/products/{product['id']}", json={'salePrice': 26.0})
    assert response.status_code == 200
    assert response.json()['sale_price'] == 26.0

    by_code = api_client.get('/catalog/products/barcode/8992761132015')
    assert by_code.json()['id'] == product['id']

    assert api_client.delete(f"/catalog/products/{product['id']}").status_code == 204
    assert api_client.get(f"/catalog/products/{product['id']}").status_code == 404


def test_duplicate_barcode_is_a_field_error(api_client):
    _create_product(api_client)

    response = api_client.post('/catalog/products', json=_product_payload(name='Autre'))

    assert response.status_code == 409
    detail = response.json()['detail']
    assert detail['code'] == 'duplicate_barcode'
    assert 'barcode' in detail['fields']


def test_record_and_delete_sale(api_client):
    product = _create_product(api_client, stock=10)
    line = {'productId': product['id'], 'productName': product['name'], 'quantity': 3, 'salePrice': 25.0}

    created = api_client.post('/sales', json={'items': [line], 'total': 75.0})
    assert created.status_code == 201, created.text
    sale_id = created.json()['id']

    assert api_client.get(f"/catalog/products/{product['id']}").json()['stock'] == 7
    sale = api_client.get(f'/sales/{sale_id}').json()
    assert sale['items'][0]['subtotal'] == 75.0
    assert api_client.get('/sales').json()['total'] == 1

    in_use = api_client.delete(f"/catalog/products/{product['id']}")
    assert in_use.status_code == 409
    assert in_use.json()['detail']['code'] == 'product_in_use'

    assert api_client.delete(f'/sales/{sale_id}').status_code == 204
    assert api_client.get(f"/catalog/products/{product['id']}").json()['stock'] == 10


def test_sale_errors_are_structured(api_client):
    product = _create_product(api_client, stock=1)
    line = {'productId': product['id'], 'productName': product['name'], 'quantity': 2, 'salePrice': 25.0}

    short = api_client.post('/sales', json={'items': [line], 'total': 50.0})
    assert short.status_code == 409
    assert short.json()['detail']['code'] == 'insufficient_stock'

    line['quantity'] = 1
    mismatch = api_client.post('/sales', json={'items': [line], 'total': 99.0})
    assert mismatch.status_code == 422
    assert 'total' in mismatch.json()['detail']['fields']

    missing = api_client.delete('/sales/s-unknown')
    assert missing.status_code == 404
    assert missing.json()['detail']['code'] == 'not_found'

    assert api_client.get(f"/catalog/products/{product['id']}").json()['stock'] == 1


def test_dashboard_metrics(api_client):
    product = _create_product(api_client, stock=5)
    line = {'productId': product['id'], 'productName': product['name'], 'quantity': 1, 'salePrice': 25.0}
    api_client.post('/sales', json={'items': [line], 'total': 25.0})

    response = api_client.get('/dashboard/metrics')

    assert response.status_code == 200
    body = response.json()
    assert body['kpis']['total_revenue'] == 25.0
    assert body['kpis']['total_sales'] == 1
    assert body['low_stock'][0]['stock'] == 4


def test_request_validation_errors_use_structured_detail(api_client):
    empty = api_client.post('/sales', json={'items': [], 'total': 0})
    assert empty.status_code == 422
    detail = empty.json()['detail']
    assert detail['code'] == 'validation_error'
    assert 'items' in detail['fields']

    line = {'productId': 'p1', 'productName': 'Café', 'quantity': 0, 'salePrice': 2.0}
    zero = api_client.post('/sales', json={'items': [line], 'total': 0})
    assert zero.status_code == 422
    assert 'items[0].quantity' in zero.json()['detail']['fields']

    product = api_client.post('/catalog/products', json=_product_payload(salePrice=-1))
    assert product.status_code == 422
    assert product.json()['detail']['code'] == 'validation_error'
    assert 'sale_price' in product.json()['detail']['fields']
