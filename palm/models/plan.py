from palm.extensions import db
from palm.utils import utcnow, isoformat

MACROS = ('proteins', 'carbs', 'fats', 'veggies', 'junk')


class Plan(db.Model):
    """Daily macro budget expressed in slots per category"""
    __tablename__ = 'plans'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    protein_slots = db.Column(db.Integer, nullable=False, default=0)
    carb_slots = db.Column(db.Integer, nullable=False, default=0)
    fat_slots = db.Column(db.Integer, nullable=False, default=0)
    veggie_slots = db.Column(db.Integer, nullable=False, default=0)
    junk_slots = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = db.relationship('User', foreign_keys=[user_id],
                           backref=db.backref('plans', lazy=True, cascade='all, delete-orphan'))

    def slots(self):
        return {
            'proteins': self.protein_slots,
            'carbs': self.carb_slots,
            'fats': self.fat_slots,
            'veggies': self.veggie_slots,
            'junk': self.junk_slots,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'protein_slots': self.protein_slots,
            'carb_slots': self.carb_slots,
            'fat_slots': self.fat_slots,
            'veggie_slots': self.veggie_slots,
            'junk_slots': self.junk_slots,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
