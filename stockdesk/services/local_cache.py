"""本地回退缓存

远程存储不可达时使用的设备本地持久化键值存储。
每个槽位保存一个 JSON 数组，整体读写（不做局部更新）。

后端：
- FileSlotCache: 每个槽位一个 JSON 文件，临时文件 + 原子替换
- RedisSlotCache: 本机 Redis，键为 {prefix}slot:{name}，不设过期
"""
import json
import logging
import os
import threading
from typing import Any, Optional

import redis

from stockdesk.services.errors import LocalCacheError

logger = logging.getLogger(__name__)

CATEGORY_SLOT = 'categories'
STOCK_CARD_SLOT = 'stock_cards'


class FileSlotCache:
    """JSON 文件槽位缓存"""

    backend = 'file'

    def __init__(self, cache_dir: str):
        self.cache_dir = cache_dir
        self._lock = threading.Lock()

    def _slot_path(self, slot: str) -> str:
        return os.path.join(self.cache_dir, f'{slot}.json')

    def read(self, slot: str) -> Optional[Any]:
        """读取槽位，不存在返回 None"""
        path = self._slot_path(slot)
        if not os.path.exists(path):
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            raise LocalCacheError(f'读取槽位 {slot} 失败: {e}') from e

    def write(self, slot: str, data: Any):
        """整体覆盖写入槽位"""
        path = self._slot_path(slot)
        tmp_file = path + '.tmp'

        with self._lock:
            try:
                os.makedirs(self.cache_dir, exist_ok=True)
                with open(tmp_file, 'w', encoding='utf-8') as f:
                    json.dump(data, f, ensure_ascii=False, default=str)
                # 原子替换
                os.replace(tmp_file, path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(tmp_file):
                    try:
                        os.remove(tmp_file)
                    except OSError:
                        pass
                raise LocalCacheError(f'写入槽位 {slot} 失败: {e}') from e

        logger.debug(f"[本地缓存] 槽位 {slot} 已写入 {len(data) if isinstance(data, list) else 1} 条")


class RedisSlotCache:
    """本机 Redis 槽位缓存"""

    backend = 'redis'

    def __init__(self, redis_url: str, timeout: int = 5, key_prefix: str = 'stockdesk:', client=None):
        self.redis_url = redis_url
        self.timeout = timeout
        self.key_prefix = key_prefix
        self._client = client
        self._lock = threading.Lock()

    def _get_client(self):
        """获取 Redis 客户端（延迟初始化）"""
        if self._client is not None:
            return self._client

        with self._lock:
            if self._client is None:
                self._client = redis.from_url(
                    self.redis_url,
                    socket_timeout=self.timeout,
                    socket_connect_timeout=self.timeout,
                    decode_responses=True
                )
                logger.info("[本地缓存] Redis 客户端已创建")
        return self._client

    def _make_key(self, slot: str) -> str:
        return f"{self.key_prefix}slot:{slot}"

    def read(self, slot: str) -> Optional[Any]:
        key = self._make_key(slot)
        try:
            data = self._get_client().get(key)
        except redis.RedisError as e:
            raise LocalCacheError(f'读取 {key} 失败: {e}') from e

        if data is None:
            return None
        try:
            return json.loads(data)
        except ValueError as e:
            raise LocalCacheError(f'解析 {key} 失败: {e}') from e

    def write(self, slot: str, data: Any):
        key = self._make_key(slot)
        try:
            self._get_client().set(key, json.dumps(data, ensure_ascii=False, default=str))
        except redis.RedisError as e:
            raise LocalCacheError(f'写入 {key} 失败: {e}') from e


def create_local_cache(config):
    """根据配置创建本地缓存后端"""
    backend = config.get('LOCAL_CACHE_BACKEND', 'file')
    if backend == 'redis':
        redis_url = config.get('REDIS_URL')
        if redis_url:
            return RedisSlotCache(
                redis_url,
                timeout=config.get('REDIS_TIMEOUT', 5),
                key_prefix=config.get('REDIS_KEY_PREFIX', 'stockdesk:'),
            )
        logger.warning("[本地缓存] LOCAL_CACHE_BACKEND=redis 但未配置 REDIS_URL，改用文件缓存")
    return FileSlotCache(config['LOCAL_CACHE_DIR'])
