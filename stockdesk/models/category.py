from datetime import datetime
from stockdesk import db


class Category(db.Model):
    __tablename__ = 'categories'

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(50), nullable=False)
    parent_id = db.Column(db.String(64), db.ForeignKey('categories.id', ondelete='CASCADE'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    parent = db.relationship('Category', remote_side=[id], backref='children')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'parent_id': self.parent_id,
        }
