from stockdesk.services.circuit_breaker import CircuitBreaker
from stockdesk.services.remote_store import RemoteStore
from stockdesk.services.local_cache import create_local_cache
from stockdesk.services.usage_guard import UsageGuard
from stockdesk.services.category import CategoryRepository
from stockdesk.services.category_view import CategoryView
from stockdesk.services.stock_card import StockCardService


def build_services(config, cache=None) -> dict:
    """按配置装配服务实例（注入到 app.extensions，而非全局单例）"""
    breaker = CircuitBreaker(
        'remote',
        failure_threshold=config.get('REMOTE_FAILURE_THRESHOLD', 3),
        cooldown_seconds=config.get('REMOTE_COOLDOWN_SECONDS', 60),
    )
    remote = RemoteStore(breaker)
    cache = cache or create_local_cache(config)
    guard = UsageGuard(remote, cache)
    return {
        'remote': remote,
        'cache': cache,
        'guard': guard,
        'categories': CategoryRepository(
            remote, cache, guard=guard, slow_seconds=config.get('REMOTE_SLOW_SECONDS')
        ),
        'stock_cards': StockCardService(remote, cache),
    }


__all__ = ['CircuitBreaker', 'RemoteStore', 'UsageGuard', 'CategoryRepository', 'CategoryView', 'StockCardService', 'build_services']
