from flask import Blueprint, current_app

main_bp = Blueprint('main', __name__)
category_bp = Blueprint('category', __name__, url_prefix='/categories')
stock_card_bp = Blueprint('stock_card', __name__, url_prefix='/stock-cards')


def get_service(name):
    """获取 create_app 注入的服务实例"""
    return current_app.extensions['stockdesk'][name]


from stockdesk.routes import main, category, stock_card
