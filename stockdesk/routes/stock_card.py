from flask import request, jsonify
from stockdesk.routes import stock_card_bp, get_service


@stock_card_bp.route('', methods=['GET'])
def get_all():
    return jsonify({'stock_cards': get_service('stock_cards').list_cards()})


@stock_card_bp.route('', methods=['POST'])
def create():
    """创建库存卡（条码唯一）"""
    card, error = get_service('stock_cards').create_card(request.get_json(silent=True))
    if error:
        return jsonify(error.to_dict()), error.status
    return jsonify(card), 201


@stock_card_bp.route('/<card_id>', methods=['PUT'])
def update(card_id):
    """修改库存卡"""
    card, error = get_service('stock_cards').update_card(card_id, request.get_json(silent=True))
    if error:
        return jsonify(error.to_dict()), error.status
    return jsonify(card)
