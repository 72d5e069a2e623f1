import pytest

from stockdesk.utils.category_slug import category_slug, implicit_category_id


@pytest.mark.parametrize('name, expected', [
    ('Süt Ürünleri', 'sut-urunleri'),
    ('İÇECEK', 'icecek'),
    ('  Kırtasiye ', 'kirtasiye'),
    ('Temizlik/Kozmetik', 'temizlik-kozmetik'),
    ('Ev & Bahçe', 'ev-bahce'),
    ('Oyuncak?', 'oyuncak'),
])
def test_slug_is_url_safe(name, expected):
    assert category_slug(name) == expected


def test_implicit_id_prefix():
    assert implicit_category_id('Gıda') == 'cat-gida'
