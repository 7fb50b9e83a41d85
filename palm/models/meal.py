from palm.extensions import db
from palm.utils import utcnow, isoformat
from palm.storage import image_proxy_url

MEAL_CATEGORIES = ('BREAKFAST', 'LUNCH', 'DINNER', 'SNACK')


class Meal(db.Model):
    __tablename__ = 'meals'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    date_time = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    proteins_used = db.Column(db.Integer, nullable=False, default=0)
    carbs_used = db.Column(db.Integer, nullable=False, default=0)
    fats_used = db.Column(db.Integer, nullable=False, default=0)
    veggies_used = db.Column(db.Integer, nullable=False, default=0)
    junk_used = db.Column(db.Integer, nullable=False, default=0)
    image = db.Column(db.String(512))
    meal_category = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    user = db.relationship('User', backref=db.backref('meals', lazy=True, cascade='all, delete-orphan'))
    notes = db.relationship('MealNote', backref='meal', lazy=True, cascade='all, delete-orphan',
                            order_by='MealNote.id')

    def used(self):
        return {
            'proteins': self.proteins_used,
            'carbs': self.carbs_used,
            'fats': self.fats_used,
            'veggies': self.veggies_used,
            'junk': self.junk_used,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'date_time': isoformat(self.date_time),
            'proteins_used': self.proteins_used,
            'carbs_used': self.carbs_used,
            'fats_used': self.fats_used,
            'veggies_used': self.veggies_used,
            'junk_used': self.junk_used,
            'image': self.image,
            'image_url': image_proxy_url(self.image),
            'meal_category': self.meal_category,
            'notes': [note.to_dict() for note in self.notes],
            'created_at': isoformat(self.created_at)
        }


class MealNote(db.Model):
    __tablename__ = 'meal_notes'

    id = db.Column(db.Integer, primary_key=True)
    meal_id = db.Column(db.Integer, db.ForeignKey('meals.id'), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {'id': self.id, 'text': self.text, 'created_at': isoformat(self.created_at)}
