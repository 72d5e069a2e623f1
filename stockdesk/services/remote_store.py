"""远程权威存储客户端

对权威数据库（SQLite / CockroachDB）的类型化请求封装。
每个请求单次执行，不重试；任何数据库错误都转换为 RemoteStoreError，
由上层决定是否切换到本地缓存。
"""
import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from stockdesk import db
from stockdesk.models import Category, StockCard, InventoryItem
from stockdesk.services.circuit_breaker import CircuitBreaker
from stockdesk.services.errors import RemoteStoreError
from stockdesk.utils.category_slug import implicit_category_id

logger = logging.getLogger(__name__)


class RemoteStore:
    """权威存储适配器（需在应用上下文中调用）"""

    def __init__(self, breaker: CircuitBreaker = None):
        self.breaker = breaker or CircuitBreaker('remote')

    def _call(self, op_name: str, func, *args):
        if not self.breaker.is_available():
            raise RemoteStoreError(f'{op_name}: 远程存储熔断中')

        try:
            result = func(*args)
        except SQLAlchemyError as e:
            try:
                db.session.rollback()
            except SQLAlchemyError as rollback_error:
                logger.debug(f"[远程存储] {op_name} 回滚失败: {rollback_error}")
            self.breaker.record_failure()
            logger.warning(f"[远程存储] {op_name} 失败: {e}")
            raise RemoteStoreError(f'{op_name}: {e}') from e

        self.breaker.record_success()
        return result

    # ---------- 分类 ----------

    def sync_implicit_categories(self) -> int:
        """把旧库存记录中出现的分类名物化为一级分类，返回新建数量"""
        return self._call('sync_implicit_categories', self._sync_implicit_categories)

    def _sync_implicit_categories(self) -> int:
        rows = db.session.query(InventoryItem.category).filter(
            InventoryItem.category.isnot(None),
            InventoryItem.category != ''
        ).distinct().all()

        known_ids = {c.id for c in Category.query.all()}
        # 与同级重名检查一致，名称不区分大小写
        root_names = {c.name.casefold() for c in Category.query.filter_by(parent_id=None).all()}

        created = 0
        for (raw_name,) in rows:
            name = raw_name.strip()
            if not name or name.casefold() in root_names:
                continue
            category_id = implicit_category_id(name)
            if category_id in known_ids:
                continue
            db.session.add(Category(id=category_id, name=name, parent_id=None))
            known_ids.add(category_id)
            root_names.add(name.casefold())
            created += 1

        if created:
            db.session.commit()
        return created

    def list_categories(self) -> list:
        return self._call('list_categories', lambda: [
            c.to_dict() for c in Category.query.order_by(Category.name).all()
        ])

    def category_exists(self, category_id: str) -> bool:
        return self._call('category_exists', lambda: db.session.get(Category, category_id) is not None)

    def create_category(self, record: dict) -> dict:
        return self._call('create_category', self._create_category, record)

    def _create_category(self, record: dict) -> dict:
        category = Category(id=record['id'], name=record['name'], parent_id=record.get('parent_id'))
        db.session.add(category)
        db.session.commit()
        return category.to_dict()

    def delete_category(self, category_id: str) -> int:
        """删除分类及其直接子分类，返回删除行数"""
        return self._call('delete_category', self._delete_category, category_id)

    def _delete_category(self, category_id: str) -> int:
        removed = Category.query.filter_by(parent_id=category_id).delete(synchronize_session=False)
        removed += Category.query.filter_by(id=category_id).delete(synchronize_session=False)
        db.session.commit()
        return removed

    def count_category_usage(self, category_id: str) -> int:
        return self._call('count_category_usage', lambda: StockCard.query.filter_by(category_id=category_id).count())

    # ---------- 库存卡 ----------

    def list_stock_cards(self) -> list:
        return self._call('list_stock_cards', lambda: [
            card.to_dict() for card in StockCard.query.order_by(StockCard.name).all()
        ])

    def get_stock_card_by_barcode(self, barcode: str):
        def _query():
            card = StockCard.query.filter_by(barcode=barcode).first()
            return card.to_dict() if card else None
        return self._call('get_stock_card_by_barcode', _query)

    def create_stock_card(self, record: dict) -> dict:
        return self._call('create_stock_card', self._create_stock_card, record)

    def _create_stock_card(self, record: dict) -> dict:
        card = StockCard(**record)
        db.session.add(card)
        db.session.commit()
        return card.to_dict()

    def update_stock_card(self, card_id: str, fields: dict):
        """更新库存卡，不存在返回 None"""
        return self._call('update_stock_card', self._update_stock_card, card_id, fields)

    def _update_stock_card(self, card_id: str, fields: dict):
        card = db.session.get(StockCard, card_id)
        if card is None:
            return None
        for key, value in fields.items():
            setattr(card, key, value)
        card.updated_at = datetime.utcnow()
        db.session.commit()
        return card.to_dict()
