"""错误类型定义

- 传输层错误（远程存储/本地缓存不可用）：以异常形式由适配器抛出，在服务层捕获
- 业务错误（校验、重复、被引用、写入丢失）：以 (result, error) 元组返回，不抛出
"""
from dataclasses import dataclass, asdict


class RemoteStoreError(Exception):
    """远程权威存储不可达或执行出错"""


class LocalCacheError(Exception):
    """本地回退缓存读写失败"""


# 业务错误类型
VALIDATION = 'validation'
DUPLICATE = 'duplicate'
NOT_FOUND = 'not_found'
IN_USE = 'in_use'
UNVERIFIABLE = 'unverifiable'
WRITE_LOST = 'write_lost'
UNAVAILABLE = 'unavailable'

HTTP_STATUS = {
    VALIDATION: 400,
    NOT_FOUND: 404,
    DUPLICATE: 409,
    IN_USE: 409,
    UNVERIFIABLE: 409,
    WRITE_LOST: 503,
    UNAVAILABLE: 503,
}


@dataclass
class OperationError:
    """面向用户的业务错误"""
    kind: str
    message: str
    usage_count: int = 0

    @property
    def status(self) -> int:
        return HTTP_STATUS.get(self.kind, 400)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['error'] = data.pop('message')
        return data
