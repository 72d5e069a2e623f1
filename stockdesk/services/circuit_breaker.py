"""远程存储熔断器

远程存储连续失败时自动熔断，冷却期内直接判定不可用（立即切换到本地缓存），
冷却后放行一次试探请求。熔断只跳过调用，不做重试。
"""
import logging
import threading
from datetime import datetime, timedelta
from enum import Enum

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"      # 正常状态
    OPEN = "open"          # 熔断状态
    HALF_OPEN = "half_open"  # 试探状态


class CircuitBreaker:
    """单个远程目标的熔断器"""

    def __init__(self, name: str, failure_threshold: int = 3, cooldown_seconds: int = 60):
        self.name = name
        self.failure_threshold = failure_threshold
        self.cooldown_seconds = cooldown_seconds
        self._lock = threading.Lock()
        self._reset_state()

    def _reset_state(self):
        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.last_failure_time = None
        self.open_time = None

    def is_available(self) -> bool:
        """检查远程目标是否可用"""
        with self._lock:
            if self.state == CircuitState.OPEN:
                # 检查是否冷却结束
                if self.open_time and datetime.now() - self.open_time >= timedelta(seconds=self.cooldown_seconds):
                    self.state = CircuitState.HALF_OPEN
                    logger.info(f"[熔断] {self.name} 冷却结束，进入试探状态")
                    return True
                return False
            return True

    def record_success(self):
        """记录成功，重置状态"""
        with self._lock:
            was_half_open = self.state == CircuitState.HALF_OPEN
            self._reset_state()
            if was_half_open:
                logger.info(f"[熔断] {self.name} 恢复正常")

    def record_failure(self) -> bool:
        """记录失败，返回是否触发熔断"""
        with self._lock:
            self.failure_count += 1
            self.last_failure_time = datetime.now()

            # HALF_OPEN 状态下失败，直接熔断
            if self.state == CircuitState.HALF_OPEN:
                self.state = CircuitState.OPEN
                self.open_time = datetime.now()
                logger.warning(f"[熔断] {self.name} 试探失败，重新熔断，冷却{self.cooldown_seconds}秒")
                return True

            if self.state == CircuitState.CLOSED and self.failure_count >= self.failure_threshold:
                self.state = CircuitState.OPEN
                self.open_time = datetime.now()
                logger.warning(f"[熔断] {self.name} 连续失败{self.failure_count}次，熔断，冷却{self.cooldown_seconds}秒")
                return True

            return False

    def get_status(self) -> dict:
        with self._lock:
            return {
                'name': self.name,
                'state': self.state.value,
                'failure_count': self.failure_count,
                'open_time': self.open_time.isoformat() if self.open_time else None,
            }

    def reset(self):
        """重置状态（用于测试或手动恢复）"""
        with self._lock:
            self._reset_state()
        logger.info(f"[熔断] {self.name} 状态已重置")
