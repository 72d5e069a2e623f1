from unittest.mock import MagicMock

from stockdesk.services.category_view import CategoryView, ViewState
from stockdesk.services.errors import VALIDATION


def test_refresh_syncs_before_loading(repository, add_inventory_item):
    add_inventory_item('1', 'Aksesuar')
    view = CategoryView(repository, 'stock-card')
    assert view.state == ViewState.IDLE

    view.refresh()

    assert view.state == ViewState.READY
    assert [c['name'] for c in view.categories] == ['Aksesuar']
    assert view.source == 'remote'


def test_roots_and_children_split(repository):
    view = CategoryView(repository)
    view.refresh()
    view.create('Gıda')
    root = view.roots[0]
    view.create('Süt Ürünleri', root['id'])

    assert [c['name'] for c in view.roots] == ['Gıda']
    assert [c['name'] for c in view.children_of(root['id'])] == ['Süt Ürünleri']


def test_views_converge_after_mutation(repository):
    product_group = CategoryView(repository, 'product-group')
    stock_card = CategoryView(repository, 'stock-card')
    product_group.refresh()
    stock_card.refresh()

    product_group.create('Elektronik')
    stock_card.refresh()

    assert stock_card.categories == product_group.categories


def test_failed_mutation_keeps_last_list(repository):
    view = CategoryView(repository)
    view.refresh()
    view.create('Gıda')
    rendered = list(view.categories)

    error = view.create('Elektronik', 'nonexistent-id')

    assert error.kind == VALIDATION
    assert view.state == ViewState.ERROR
    assert view.error is error
    assert view.categories == rendered


def test_mutation_reloads_instead_of_patching():
    repository = MagicMock()
    repository.create.return_value = ([{'id': 'optimistic', 'name': 'X', 'parent_id': None}], None)
    repository.load.return_value = [{'id': 'a', 'name': 'X', 'parent_id': None}]
    repository.source = 'remote'
    view = CategoryView(repository)

    assert view.create('X') is None

    repository.load.assert_called_once_with()
    assert view.categories == [{'id': 'a', 'name': 'X', 'parent_id': None}]
    assert view.state == ViewState.READY


def test_successful_mutation_clears_previous_error(repository):
    view = CategoryView(repository)
    view.refresh()
    view.create('')
    assert view.state == ViewState.ERROR

    view.create('Giyim')

    assert view.state == ViewState.READY
    assert view.error is None
