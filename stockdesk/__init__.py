import os
import logging
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

db = SQLAlchemy()


def setup_logging(app):
    """配置应用日志系统"""
    log_dir = app.config.get('LOG_DIR', 'logs')
    os.makedirs(log_dir, exist_ok=True)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # app.log - 所有日志
    file_handler = logging.FileHandler(
        os.path.join(log_dir, 'app.log'),
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    # error.log - 仅错误
    error_handler = logging.FileHandler(
        os.path.join(log_dir, 'error.log'),
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)

    # 控制台输出
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    # 配置根日志器
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(error_handler)
    root_logger.addHandler(console_handler)

    # SQLAlchemy 引擎日志过于冗长
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)


def create_app(config_class=None, local_cache=None):
    app = Flask(__name__)

    if config_class is None:
        from config import Config
        config_class = Config

    app.config.from_object(config_class)

    # 只有在使用 SQLite 文件时才创建数据目录
    db_uri = app.config['SQLALCHEMY_DATABASE_URI']
    if db_uri.startswith('sqlite:///'):
        db_dir = os.path.dirname(db_uri.replace('sqlite:///', ''))
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    if app.config.get('LOGGING_ENABLED', True):
        setup_logging(app)

    db.init_app(app)

    from stockdesk.services import build_services
    app.extensions['stockdesk'] = build_services(app.config, cache=local_cache)

    from stockdesk.routes import main_bp, category_bp, stock_card_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(category_bp)
    app.register_blueprint(stock_card_bp)

    with app.app_context():
        from stockdesk.models import Category, StockCard, InventoryItem
        try:
            db.create_all()
        except SQLAlchemyError as e:
            # 远程存储启动时不可达不影响运行，分类读写会回退到本地缓存
            logging.warning(f"[启动] 权威存储建表失败，将以本地缓存运行: {e}")

    logging.info(f"[启动] 本地缓存后端: {app.extensions['stockdesk']['cache'].backend}")
    return app
