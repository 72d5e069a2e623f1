"""库存卡服务

条码唯一性以权威存储为准，远程不可达时不允许创建/修改。
每次成功读取库存卡列表都会刷新本地镜像，供离线时的分类引用检查使用。
"""
import logging
import uuid

from stockdesk.services.errors import (
    RemoteStoreError, LocalCacheError, OperationError,
    VALIDATION, DUPLICATE, NOT_FOUND, UNAVAILABLE
)
from stockdesk.services.local_cache import STOCK_CARD_SLOT

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('barcode', 'name', 'brand', 'unit', 'category_id', 'description', 'image', 'supplier_id')
DEFAULT_UNIT = 'ADET'

_UNAVAILABLE_MESSAGE = 'Sunucuya ulaşılamıyor; stok kartı kaydedilemedi.'


def _clean(data: dict) -> dict:
    fields = {}
    for key in EDITABLE_FIELDS:
        if key not in data:
            continue
        value = data[key]
        if isinstance(value, str):
            value = value.strip()
        # 空字符串视为未设置
        fields[key] = value if value not in ('', None) else None
    return fields


class StockCardService:

    def __init__(self, remote, cache, id_factory=None):
        self.remote = remote
        self.cache = cache
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def list_cards(self) -> list:
        """库存卡列表：远程优先并刷新本地镜像，远程失败读镜像"""
        try:
            cards = self.remote.list_stock_cards()
        except RemoteStoreError as e:
            logger.warning(f"[库存卡] 远程读取失败，使用本地镜像: {e}")
            try:
                return self.cache.read(STOCK_CARD_SLOT) or []
            except LocalCacheError as cache_error:
                logger.error(f"[库存卡] 本地镜像读取失败: {cache_error}")
                return []

        try:
            self.cache.write(STOCK_CARD_SLOT, cards)
        except LocalCacheError as e:
            logger.warning(f"[库存卡] 本地镜像刷新失败: {e}")
        return cards

    def create_card(self, data: dict):
        """创建库存卡，返回 (card, error)"""
        fields = _clean(data or {})
        if not fields.get('barcode'):
            return None, OperationError(VALIDATION, 'Barkod zorunludur.')
        if not fields.get('name'):
            return None, OperationError(VALIDATION, 'Ürün adı zorunludur.')
        fields['unit'] = fields.get('unit') or DEFAULT_UNIT

        try:
            if self.remote.get_stock_card_by_barcode(fields['barcode']):
                return None, OperationError(DUPLICATE, 'Bu barkod numarası zaten kullanılıyor!')

            category_id = fields.get('category_id')
            if category_id and not self.remote.category_exists(category_id):
                return None, OperationError(VALIDATION, 'Seçilen kategori bulunamadı.')

            fields['id'] = self._id_factory()
            card = self.remote.create_stock_card(fields)
        except RemoteStoreError as e:
            logger.warning(f"[库存卡] 创建失败: {e}")
            return None, OperationError(UNAVAILABLE, _UNAVAILABLE_MESSAGE)

        logger.info(f"[库存卡] 已创建 {card['id']} 条码={card['barcode']}")
        self.list_cards()
        return card, None

    def update_card(self, card_id: str, data: dict):
        """修改库存卡（分类可自由变更），返回 (card, error)"""
        fields = _clean(data or {})
        if 'barcode' in fields and not fields['barcode']:
            return None, OperationError(VALIDATION, 'Barkod zorunludur.')
        if 'name' in fields and not fields['name']:
            return None, OperationError(VALIDATION, 'Ürün adı zorunludur.')
        if 'unit' in fields and not fields['unit']:
            fields['unit'] = DEFAULT_UNIT

        try:
            if fields.get('barcode'):
                existing = self.remote.get_stock_card_by_barcode(fields['barcode'])
                if existing and existing['id'] != card_id:
                    return None, OperationError(DUPLICATE, 'Bu barkod numarası zaten kullanılıyor!')

            card = self.remote.update_stock_card(card_id, fields)
        except RemoteStoreError as e:
            logger.warning(f"[库存卡] 修改失败: {e}")
            return None, OperationError(UNAVAILABLE, _UNAVAILABLE_MESSAGE)

        if card is None:
            return None, OperationError(NOT_FOUND, 'Stok kartı bulunamadı.')

        self.list_cards()
        return card, None
