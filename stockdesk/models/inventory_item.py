from datetime import datetime
from stockdesk import db


class InventoryItem(db.Model):
    """旧版库存记录，category 为自由文本分类名"""
    __tablename__ = 'inventory_items'

    id = db.Column(db.String(64), primary_key=True)
    sku = db.Column(db.String(64), nullable=False, unique=True)
    name = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=True)
    quantity = db.Column(db.Integer, default=0)
    location = db.Column(db.String(100), nullable=True)
    price = db.Column(db.Float, default=0)
    last_updated = db.Column(db.DateTime, default=datetime.utcnow)
