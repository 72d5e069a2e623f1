from stockdesk.models import InventoryItem
from stockdesk import db


def _create(client, name, parent_id=None):
    return client.post('/categories', json={'name': name, 'parent_id': parent_id})


def test_create_and_list_categories(client):
    resp = _create(client, 'Gıda')
    assert resp.status_code == 200
    assert resp.get_json()['source'] == 'remote'

    resp = client.get('/categories')
    assert [c['name'] for c in resp.get_json()['categories']] == ['Gıda']


def test_list_runs_implicit_sync(client, app):
    db.session.add(InventoryItem(id='1', sku='S1', name='Defter', category='Kırtasiye'))
    db.session.commit()

    resp = client.get('/categories')

    assert resp.get_json()['categories'] == [{'id': 'cat-kirtasiye', 'name': 'Kırtasiye', 'parent_id': None}]


def test_tree(client):
    root = _create(client, 'Gıda').get_json()['categories'][0]
    _create(client, 'Süt Ürünleri', root['id'])

    tree = client.get('/categories/tree').get_json()['categories']

    assert tree[0]['name'] == 'Gıda'
    assert [c['name'] for c in tree[0]['children']] == ['Süt Ürünleri']


def test_validation_error_is_400(client):
    resp = _create(client, 'Elektronik', 'nonexistent-id')

    assert resp.status_code == 400
    assert resp.get_json()['kind'] == 'validation'
    assert resp.get_json()['categories'] == []


def test_duplicate_is_409(client):
    _create(client, 'Gıda')

    resp = _create(client, 'Gıda')

    assert resp.status_code == 409
    assert resp.get_json()['kind'] == 'duplicate'


def test_delete_blocked_reports_usage(client):
    root = _create(client, 'Gıda').get_json()['categories'][0]
    client.post('/stock-cards', json={'barcode': '1', 'name': 'Süt', 'category_id': root['id']})

    usage = client.get(f"/categories/{root['id']}/usage").get_json()
    resp = client.delete(f"/categories/{root['id']}")

    assert usage['usage_count'] == 1
    assert resp.status_code == 409
    body = resp.get_json()
    assert body['kind'] == 'in_use'
    assert body['usage_count'] == 1
    assert [c['name'] for c in body['categories']] == ['Gıda']


def test_delete_unused(client):
    root = _create(client, 'Gıda').get_json()['categories'][0]

    resp = client.delete(f"/categories/{root['id']}")

    assert resp.status_code == 200
    assert resp.get_json()['categories'] == []


def test_sync_endpoint(client, app):
    db.session.add(InventoryItem(id='1', sku='S1', name='Kablo', category='Elektronik'))
    db.session.commit()

    assert client.post('/categories/sync').get_json() == {'created': 1}
    assert client.post('/categories/sync').get_json() == {'created': 0}


def test_stock_card_endpoints(client):
    resp = client.post('/stock-cards', json={'barcode': '1', 'name': 'Kalem'})
    assert resp.status_code == 201
    card_id = resp.get_json()['id']

    assert client.post('/stock-cards', json={'barcode': '1', 'name': 'Silgi'}).status_code == 409

    resp = client.put(f'/stock-cards/{card_id}', json={'unit': 'KG'})
    assert resp.get_json()['unit'] == 'KG'

    assert len(client.get('/stock-cards').get_json()['stock_cards']) == 1


def test_health(client):
    body = client.get('/health').get_json()

    assert body['remote']['state'] == 'closed'
    assert body['cache_backend'] == 'file'


def test_synced_category_with_punctuation_is_addressable(client, app):
    db.session.add(InventoryItem(id='1', sku='S1', name='Şampuan', category='Temizlik/Kozmetik'))
    db.session.commit()
    client.post('/categories/sync')

    usage = client.get('/categories/cat-temizlik-kozmetik/usage')
    resp = client.delete('/categories/cat-temizlik-kozmetik')

    assert usage.get_json()['usage_count'] == 0
    assert resp.status_code == 200
    assert resp.get_json()['categories'] == []
