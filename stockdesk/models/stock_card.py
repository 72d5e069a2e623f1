from datetime import datetime
from stockdesk import db


class StockCard(db.Model):
    __tablename__ = 'stock_cards'
    __table_args__ = (
        db.UniqueConstraint('barcode', name='uq_stock_card_barcode'),
        db.Index('idx_stock_card_category', 'category_id'),
    )

    id = db.Column(db.String(64), primary_key=True)
    barcode = db.Column(db.String(64), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    brand = db.Column(db.String(100), nullable=True)
    unit = db.Column(db.String(20), nullable=False, default='ADET')
    # 不加外键：引用可指向一级或二级分类，删除前由 UsageGuard 把关
    category_id = db.Column(db.String(64), nullable=True)
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.Text, nullable=True)
    supplier_id = db.Column(db.String(64), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'barcode': self.barcode,
            'name': self.name,
            'brand': self.brand,
            'unit': self.unit,
            'category_id': self.category_id,
            'description': self.description,
            'image': self.image,
            'supplier_id': self.supplier_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
