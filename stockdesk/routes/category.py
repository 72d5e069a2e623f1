from flask import request, jsonify
from stockdesk.routes import category_bp, get_service


def _categories_response(categories, error=None):
    repository = get_service('categories')
    if error:
        body = error.to_dict()
        body['categories'] = categories
        return jsonify(body), error.status
    return jsonify({'categories': categories, 'source': repository.source})


@category_bp.route('', methods=['GET'])
def get_all():
    """同步隐式分类后获取所有分类（扁平列表）"""
    repository = get_service('categories')
    repository.sync()
    return _categories_response(repository.load())


@category_bp.route('/tree', methods=['GET'])
def get_tree():
    """获取分类树形结构"""
    repository = get_service('categories')
    repository.sync()
    repository.load()
    return jsonify({'categories': repository.get_tree(), 'source': repository.source})


@category_bp.route('', methods=['POST'])
def create():
    """创建分类"""
    data = request.get_json(silent=True) or {}
    categories, error = get_service('categories').create(data.get('name', ''), data.get('parent_id'))
    return _categories_response(categories, error)


@category_bp.route('/<category_id>', methods=['DELETE'])
def delete(category_id):
    """删除分类（被库存卡引用时拒绝）"""
    categories, error = get_service('categories').delete(category_id)
    return _categories_response(categories, error)


@category_bp.route('/<category_id>/usage', methods=['GET'])
def usage(category_id):
    """分类引用数，null 表示无法核实"""
    count = get_service('guard').check_usage(category_id)
    return jsonify({'category_id': category_id, 'usage_count': count})


@category_bp.route('/sync', methods=['POST'])
def sync():
    """物化旧库存记录中的隐式分类"""
    created = get_service('categories').sync()
    return jsonify({'created': created})
