import time
import logging
from contextlib import contextmanager


@contextmanager
def log_operation(logger, tag, level=logging.INFO, slow_seconds=None):
    """记录操作耗时的上下文管理器

    远程调用没有超时，slow_seconds 用于把慢操作提升为 WARNING。

    用法:
        with log_operation(logger, "分类仓库.加载") as op:
            categories = load()
            op.set_message(f"{len(categories)}条, 来源=remote")
        # 输出: [分类仓库.加载] 完成: 3条, 来源=remote, 耗时 0.02s
    """
    class _Op:
        def __init__(self):
            self.message = None

        def set_message(self, msg):
            self.message = msg

    op = _Op()
    start = time.perf_counter()
    try:
        yield op
    except Exception:
        elapsed = time.perf_counter() - start
        logger.error(f"[{tag}] 失败, 耗时 {elapsed:.2f}s", exc_info=True)
        raise

    elapsed = time.perf_counter() - start
    if slow_seconds is not None and elapsed >= slow_seconds:
        level = logging.WARNING
    detail = f": {op.message}" if op.message else ""
    logger.log(level, f"[{tag}] 完成{detail}, 耗时 {elapsed:.2f}s")
