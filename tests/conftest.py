import pytest

from stockdesk import create_app, db
from stockdesk.models import StockCard, InventoryItem
from stockdesk.services.circuit_breaker import CircuitBreaker
from stockdesk.services.category import CategoryRepository
from stockdesk.services.errors import RemoteStoreError
from stockdesk.services.remote_store import RemoteStore


class TestConfig:
    TESTING = True
    SECRET_KEY = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOGGING_ENABLED = False
    LOCAL_CACHE_BACKEND = 'file'
    LOCAL_CACHE_DIR = None
    REMOTE_FAILURE_THRESHOLD = 3
    REMOTE_COOLDOWN_SECONDS = 60


class SwitchableRemote:
    """包装真实 RemoteStore，offline=True 时所有调用抛出 RemoteStoreError"""

    def __init__(self, inner):
        self.inner = inner
        self.offline = False
        self.calls = []

    def __getattr__(self, name):
        attr = getattr(self.inner, name)

        def wrapper(*args, **kwargs):
            self.calls.append(name)
            if self.offline:
                raise RemoteStoreError(f'{name}: connection refused')
            return attr(*args, **kwargs)
        return wrapper


@pytest.fixture
def app(tmp_path):
    config = type('Config', (TestConfig,), {'LOCAL_CACHE_DIR': str(tmp_path / 'cache')})
    app = create_app(config)
    ctx = app.app_context()
    ctx.push()
    yield app
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cache(app):
    return app.extensions['stockdesk']['cache']


@pytest.fixture
def remote(app):
    return SwitchableRemote(RemoteStore(CircuitBreaker('remote', failure_threshold=1000)))


@pytest.fixture
def repository(remote, cache):
    return CategoryRepository(remote, cache)


@pytest.fixture
def add_stock_card(app):
    def _add(card_id, barcode, category_id=None, name='Ürün'):
        card = StockCard(id=card_id, barcode=barcode, name=name, unit='ADET', category_id=category_id)
        db.session.add(card)
        db.session.commit()
        return card
    return _add


@pytest.fixture
def add_inventory_item(app):
    def _add(item_id, category, name='Eski ürün'):
        item = InventoryItem(id=item_id, sku=f'SKU-{item_id}', name=name, category=category)
        db.session.add(item)
        db.session.commit()
        return item
    return _add
