from flask import jsonify
from stockdesk.routes import main_bp, get_service


@main_bp.route('/health')
def health():
    """远程存储熔断状态与本地缓存后端"""
    return jsonify({
        'remote': get_service('remote').breaker.get_status(),
        'cache_backend': get_service('cache').backend,
        'category_source': get_service('categories').source,
    })
