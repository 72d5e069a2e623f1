"""分类视图（界面侧订阅者）

每个界面持有一份分类列表用于渲染（一级/二级拆分）。
任何增删之后都通过仓库 load() 重新获取，不做乐观修改，
多个界面因此收敛到同一份权威（或同一份回退）数据。

状态机: IDLE -> LOADING -> {READY, ERROR}；READY 在每次增删时回到 LOADING
"""
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class ViewState(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class CategoryView:

    def __init__(self, repository, name: str = 'view'):
        self.repository = repository
        self.name = name
        self.state = ViewState.IDLE
        self.categories = []
        self.source = None
        self.error = None

    @property
    def roots(self) -> list:
        return [c for c in self.categories if not c['parent_id']]

    def children_of(self, root_id: str) -> list:
        return [c for c in self.categories if c['parent_id'] == root_id]

    def _reload(self):
        self.categories = self.repository.load()
        self.source = self.repository.source

    def refresh(self):
        """同步隐式分类后重新加载"""
        self.state = ViewState.LOADING
        self.repository.sync()
        self._reload()
        self.error = None
        self.state = ViewState.READY
        return self.categories

    def _mutate(self, action, *args):
        self.state = ViewState.LOADING
        _, error = action(*args)
        if error:
            # 保留上一次的列表供渲染
            self.error = error
            self.state = ViewState.ERROR
            logger.info(f"[分类视图] {self.name} 操作失败: {error.message}")
            return error

        self._reload()
        self.error = None
        self.state = ViewState.READY
        return None

    def create(self, name, parent_id=None):
        """返回 OperationError 或 None"""
        return self._mutate(self.repository.create, name, parent_id)

    def delete(self, category_id):
        return self._mutate(self.repository.delete, category_id)
