import os
import secrets
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))

# 加载 .env 文件
load_dotenv(os.path.join(basedir, '.env'))


def get_database_uri():
    """获取权威存储（远程数据库）连接URI

    优先级：
    1. DATABASE_URL 环境变量
    2. 如果配置了 COCKROACH_URL，使用 CockroachDB 云数据库
    3. 否则使用本地 SQLite 数据库
    """
    database_url = os.environ.get('DATABASE_URL')
    if database_url:
        return database_url
    cockroach_url = os.environ.get('COCKROACH_URL')
    if cockroach_url:
        return cockroach_url
    return 'sqlite:///' + os.path.join(basedir, 'data', 'stockdesk.db')


def get_redis_url():
    """获取 Redis 连接 URL

    优先级：
    1. REDIS_URL 环境变量
    2. 通过 REDIS_HOST/PORT/PASSWORD/DB 组装
    3. 返回 None 表示不使用 Redis
    """
    redis_url = os.environ.get('REDIS_URL')
    if redis_url:
        return redis_url

    redis_host = os.environ.get('REDIS_HOST')
    if redis_host:
        redis_port = os.environ.get('REDIS_PORT', '6379')
        redis_password = os.environ.get('REDIS_PASSWORD', '')
        redis_db = os.environ.get('REDIS_DB', '0')
        if redis_password:
            return f'redis://:{redis_password}@{redis_host}:{redis_port}/{redis_db}'
        return f'redis://{redis_host}:{redis_port}/{redis_db}'

    return None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_hex(32)
    SQLALCHEMY_DATABASE_URI = get_database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_DIR = os.path.join(basedir, 'logs')

    # 本地回退缓存：'file'（JSON 文件槽位）或 'redis'
    LOCAL_CACHE_BACKEND = os.environ.get('LOCAL_CACHE_BACKEND', 'file').lower()
    LOCAL_CACHE_DIR = os.environ.get('LOCAL_CACHE_DIR') or os.path.join(basedir, 'data', 'cache')

    # Redis 配置（仅 LOCAL_CACHE_BACKEND=redis 时使用）
    REDIS_URL = get_redis_url()
    REDIS_TIMEOUT = int(os.environ.get('REDIS_TIMEOUT', '5'))
    REDIS_KEY_PREFIX = os.environ.get('REDIS_KEY_PREFIX', 'stockdesk:')

    # 远程存储熔断配置
    REMOTE_FAILURE_THRESHOLD = int(os.environ.get('REMOTE_FAILURE_THRESHOLD', '3'))
    REMOTE_COOLDOWN_SECONDS = int(os.environ.get('REMOTE_COOLDOWN_SECONDS', '60'))
    # 远程读取没有超时，超过该耗时的加载记为 WARNING
    REMOTE_SLOW_SECONDS = float(os.environ.get('REMOTE_SLOW_SECONDS', '2'))
