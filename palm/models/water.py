from palm.extensions import db
from palm.utils import utcnow, isoformat


class WaterEntry(db.Model):
    __tablename__ = 'water_entries'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    amount = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(20), nullable=False, default='FLUID_OUNCES')
    date_time = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    user = db.relationship('User', backref=db.backref('water_entries', lazy=True, cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'amount': self.amount,
            'unit': self.unit,
            'date_time': isoformat(self.date_time),
            'notes': self.notes,
            'created_at': isoformat(self.created_at)
        }


class WaterPlan(db.Model):
    __tablename__ = 'water_plans'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    daily_target = db.Column(db.Float, nullable=False, default=64)
    unit = db.Column(db.String(20), nullable=False, default='FLUID_OUNCES')
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    user = db.relationship('User', foreign_keys=[user_id],
                           backref=db.backref('water_plans', lazy=True, cascade='all, delete-orphan'))

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'daily_target': self.daily_target,
            'unit': self.unit,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
