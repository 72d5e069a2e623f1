"""隐式分类 ID 生成

旧库存记录中的分类名同步为正式分类时，ID 由名称确定性生成，
保证重复同步落到同一行：'Süt Ürünleri' -> 'cat-sut-urunleri'
ID 会出现在 URL 路径中，只保留 [a-z0-9-]：'Temizlik/Kozmetik' -> 'cat-temizlik-kozmetik'
"""
import re

# 土耳其语字母折叠为 ASCII（大小写都处理，避免 'İ'.lower() 产生组合点）
_TURKISH_FOLD = str.maketrans({
    'ı': 'i', 'İ': 'i', 'I': 'i',
    'ş': 's', 'Ş': 's',
    'ğ': 'g', 'Ğ': 'g',
    'ü': 'u', 'Ü': 'u',
    'ö': 'o', 'Ö': 'o',
    'ç': 'c', 'Ç': 'c',
})

_NON_SLUG = re.compile(r'[^a-z0-9]+')


def category_slug(name: str) -> str:
    folded = name.strip().translate(_TURKISH_FOLD).lower()
    return _NON_SLUG.sub('-', folded).strip('-')


def implicit_category_id(name: str) -> str:
    return f'cat-{category_slug(name)}'
