"""引用完整性守卫

删除分类前统计引用它的库存卡数量，数量不为 0 时拒绝删除。
远程存储可达时以远程为准；不可达时扫描本地缓存的库存卡镜像；
本地也没有数据时无法核实，按失败安全原则拒绝删除。

只按分类 ID 自身计数，一级分类不汇总其子分类的引用。
"""
import logging

from stockdesk.services.errors import (
    RemoteStoreError, LocalCacheError, OperationError, IN_USE, UNVERIFIABLE
)
from stockdesk.services.local_cache import STOCK_CARD_SLOT

logger = logging.getLogger(__name__)


class UsageGuard:

    def __init__(self, remote, cache):
        self.remote = remote
        self.cache = cache

    def check_usage(self, category_id):
        """返回引用数；无法核实时返回 None"""
        try:
            return self.remote.count_category_usage(category_id)
        except RemoteStoreError as e:
            logger.info(f"[引用检查] 远程不可用，改为扫描本地库存卡: {e}")

        try:
            cards = self.cache.read(STOCK_CARD_SLOT)
        except LocalCacheError as e:
            logger.warning(f"[引用检查] 本地库存卡读取失败: {e}")
            return None

        if cards is None:
            return None
        if not isinstance(cards, list):
            logger.warning(f"[引用检查] 本地库存卡格式异常（{type(cards).__name__}），无法核实")
            return None
        return sum(1 for card in cards if isinstance(card, dict) and card.get('category_id') == category_id)

    def check_deletion(self, category_id):
        """返回 (usage_count, error)，error 为 None 才允许删除"""
        usage = self.check_usage(category_id)

        if usage is None:
            logger.warning(f"[引用检查] 分类 {category_id} 引用数无法核实，拒绝删除")
            return None, OperationError(
                UNVERIFIABLE,
                'Sunucuya ulaşılamıyor ve yerel stok kartı verisi yok; kategori kullanımı doğrulanamadı.'
            )

        if usage > 0:
            logger.info(f"[引用检查] 分类 {category_id} 被 {usage} 张库存卡引用，拒绝删除")
            return usage, OperationError(
                IN_USE,
                f'Bu kategoriye ait {usage} adet ürün/stok kartı var. Önce ürünleri taşıyın veya silin.',
                usage_count=usage
            )

        return 0, None
