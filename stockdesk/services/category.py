"""分类树仓库

分类的唯一事实来源，屏蔽远程权威存储与本地回退缓存的差异：
- 读：先读远程，失败则读本地缓存槽位，都失败返回空列表，从不抛出
- 写：先写远程并重新加载；远程失败则修改本地缓存快照并持久化
- 树约束：最多两级，子分类只能挂在一级分类下
"""
import logging
import uuid

from stockdesk.services.errors import (
    RemoteStoreError, LocalCacheError, OperationError,
    VALIDATION, DUPLICATE, NOT_FOUND, WRITE_LOST
)
from stockdesk.services.local_cache import CATEGORY_SLOT
from stockdesk.services.usage_guard import UsageGuard
from stockdesk.utils.log_utils import log_operation

logger = logging.getLogger(__name__)

SOURCE_REMOTE = 'remote'
SOURCE_CACHE = 'cache'


def _normalize(record: dict) -> dict:
    return {
        'id': record['id'],
        'name': record['name'],
        'parent_id': record.get('parent_id') or None,
    }


class CategoryRepository:
    MAX_NAME_LENGTH = 50

    def __init__(self, remote, cache, guard=None, id_factory=None, slow_seconds=None):
        self.remote = remote
        self.cache = cache
        self.guard = guard or UsageGuard(remote, cache)
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self.slow_seconds = slow_seconds
        self._categories = None
        self.source = None

    @property
    def categories(self) -> list:
        return [dict(c) for c in self._categories or []]

    def _publish(self, categories: list, source: str):
        self._categories = [_normalize(c) for c in categories]
        self.source = source

    def _current_view(self) -> list:
        if self._categories is None:
            return self.load()
        return self.categories

    def _read_snapshot(self) -> list:
        """读取本地缓存快照，槽位不存在返回空列表；读取失败抛出 LocalCacheError"""
        data = self.cache.read(CATEGORY_SLOT)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(f"[分类仓库] 本地缓存格式异常（{type(data).__name__}），按空处理")
            return []
        return [_normalize(c) for c in data if isinstance(c, dict) and c.get('id') and c.get('name')]

    # ---------- 读 ----------

    def load(self) -> list:
        """加载完整分类列表（远程优先，本地回退，从不抛出）"""
        with log_operation(logger, "分类仓库.加载", level=logging.DEBUG, slow_seconds=self.slow_seconds) as op:
            try:
                categories = self.remote.list_categories()
                source = SOURCE_REMOTE
            except RemoteStoreError as e:
                logger.warning(f"[分类仓库] 远程加载失败，回退到本地缓存: {e}")
                source = SOURCE_CACHE
                try:
                    categories = self._read_snapshot()
                except LocalCacheError as cache_error:
                    logger.error(f"[分类仓库] 本地缓存也不可用，返回空列表: {cache_error}")
                    categories = []
            op.set_message(f"{len(categories)}条, 来源={source}")

        self._publish(categories, source)
        return self.categories

    def sync(self) -> int:
        """物化旧库存记录中的隐式分类（幂等），返回新建数量"""
        with log_operation(logger, "分类仓库.同步隐式分类", slow_seconds=self.slow_seconds) as op:
            try:
                created = self.remote.sync_implicit_categories()
                op.set_message(f"新建 {created} 个")
            except RemoteStoreError as e:
                logger.warning(f"[分类仓库] 远程不可用，跳过隐式分类同步: {e}")
                created = 0
                op.set_message("远程不可用，跳过")
        return created

    def get_tree(self) -> list:
        """一级分类及其子分类的树形结构"""
        view = self._current_view()
        result = []
        for root in (c for c in view if not c['parent_id']):
            item = dict(root)
            item['children'] = [c for c in view if c['parent_id'] == root['id']]
            result.append(item)
        return result

    # ---------- 写 ----------

    def _check_new_category(self, view: list, name: str, parent_id):
        """两级约束与同级重名检查，返回 OperationError 或 None"""
        if parent_id:
            parent = next((c for c in view if c['id'] == parent_id), None)
            if parent is None:
                return OperationError(VALIDATION, 'Seçilen ana kategori bulunamadı.')
            if parent['parent_id']:
                return OperationError(VALIDATION, 'Alt kategorinin altına kategori eklenemez.')

        folded = name.casefold()
        for c in view:
            if c['parent_id'] == parent_id and c['name'].casefold() == folded:
                return OperationError(DUPLICATE, f'"{name}" adında bir kategori zaten var.')
        return None

    def create(self, name, parent_id=None):
        """创建分类，返回 (categories, error)，categories 始终是操作后的完整列表"""
        name = name.strip() if name else ''
        if not name:
            return self.categories, OperationError(VALIDATION, 'Kategori adı zorunludur.')
        if len(name) > self.MAX_NAME_LENGTH:
            return self.categories, OperationError(
                VALIDATION, f'Kategori adı en fazla {self.MAX_NAME_LENGTH} karakter olabilir.'
            )
        parent_id = parent_id or None

        view = self._current_view()
        error = self._check_new_category(view, name, parent_id)
        if error:
            return view, error

        # 视图可能已过期，写入前按目标层重新校验
        record = {'id': self._id_factory(), 'name': name, 'parent_id': parent_id}
        view = self.load()
        if self.source != SOURCE_REMOTE:
            return self._create_in_cache(record)
        error = self._check_new_category(view, name, parent_id)
        if error:
            return view, error

        try:
            self.remote.create_category(record)
        except RemoteStoreError as e:
            logger.warning(f"[分类仓库] 远程创建失败，写入本地缓存: {e}")
            return self._create_in_cache(record)

        logger.info(f"[分类仓库] 已创建分类 {record['id']} ({name})")
        return self.load(), None

    def _create_in_cache(self, record: dict):
        try:
            snapshot = self._read_snapshot()
        except LocalCacheError as e:
            logger.error(f"[分类仓库] 本地缓存读取失败，创建丢失: {e}")
            return self.categories, OperationError(WRITE_LOST, 'Kategori kaydedilemedi: sunucu ve yerel önbellek kullanılamıyor.')

        # 快照可能与当前视图不同，按快照重新校验
        error = self._check_new_category(snapshot, record['name'], record['parent_id'])
        if error:
            return self.categories, error

        snapshot.append(record)
        try:
            self.cache.write(CATEGORY_SLOT, snapshot)
        except LocalCacheError as e:
            logger.error(f"[分类仓库] 本地缓存写入失败，创建丢失: {e}")
            return self.categories, OperationError(WRITE_LOST, 'Kategori kaydedilemedi: sunucu ve yerel önbellek kullanılamıyor.')

        self._publish(snapshot, SOURCE_CACHE)
        logger.info(f"[分类仓库] 已在本地缓存创建分类 {record['id']} ({record['name']})")
        return self.categories, None

    def delete(self, category_id):
        """删除分类（一级分类连同直接子分类），返回 (categories, error)"""
        _, error = self.guard.check_deletion(category_id)
        if error:
            return self._current_view(), error

        try:
            removed = self.remote.delete_category(category_id)
        except RemoteStoreError as e:
            logger.warning(f"[分类仓库] 远程删除失败，改为修改本地缓存: {e}")
            return self._delete_in_cache(category_id)

        if not removed:
            return self.load(), OperationError(NOT_FOUND, 'Kategori bulunamadı.')

        logger.info(f"[分类仓库] 已删除分类 {category_id}，共 {removed} 条（含子分类）")
        return self.load(), None

    def _delete_in_cache(self, category_id):
        lost = OperationError(WRITE_LOST, 'Kategori silinemedi: sunucuya ulaşılamıyor ve kategori yerel önbellekte yok.')
        try:
            snapshot = self._read_snapshot()
        except LocalCacheError as e:
            logger.error(f"[分类仓库] 本地缓存读取失败，删除丢失: {e}")
            return self.categories, lost

        remaining = [c for c in snapshot if c['id'] != category_id and c['parent_id'] != category_id]
        if len(remaining) == len(snapshot):
            logger.warning(f"[分类仓库] 本地缓存中不存在分类 {category_id}，删除丢失")
            return self.categories, lost

        try:
            self.cache.write(CATEGORY_SLOT, remaining)
        except LocalCacheError as e:
            logger.error(f"[分类仓库] 本地缓存写入失败，删除丢失: {e}")
            return self.categories, lost

        self._publish(remaining, SOURCE_CACHE)
        logger.info(f"[分类仓库] 已在本地缓存删除分类 {category_id}，共 {len(snapshot) - len(remaining)} 条")
        return self.categories, None
