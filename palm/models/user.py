from palm.extensions import db
from palm.utils import utcnow, isoformat
import bcrypt

class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(128), nullable=False)
    first_name = db.Column(db.String(255))
    last_name = db.Column(db.String(255))
    sharing_enabled = db.Column(db.Boolean, nullable=False, default=False)

    # Weak pointers to the plans currently governing targets. Nothing cascades
    # these; deleting a plan must clear the pointer explicitly.
    active_plan_id = db.Column(db.Integer, db.ForeignKey('plans.id', use_alter=True, name='fk_users_active_plan_id'))
    active_workout_plan_id = db.Column(db.Integer, db.ForeignKey('workout_plans.id', use_alter=True, name='fk_users_active_workout_plan_id'))
    active_water_plan_id = db.Column(db.Integer, db.ForeignKey('water_plans.id', use_alter=True, name='fk_users_active_water_plan_id'))

    # Usage metering
    total_api_requests = db.Column(db.Integer, nullable=False, default=0)
    last_month_api_requests = db.Column(db.Integer, nullable=False, default=0)
    last_month_reset_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    stored_image_bytes = db.Column(db.BigInteger, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    active_plan = db.relationship('Plan', foreign_keys=[active_plan_id], post_update=True)
    active_workout_plan = db.relationship('WorkoutPlan', foreign_keys=[active_workout_plan_id], post_update=True)
    active_water_plan = db.relationship('WaterPlan', foreign_keys=[active_water_plan_id], post_update=True)

    def __init__(self, email, password, **kwargs):
        self.email = email.strip().lower()
        self.set_password(password)
        for key, value in kwargs.items():
            setattr(self, key, value)

    def set_password(self, password):
        salt = bcrypt.gensalt()
        self.password_hash = bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')

    def check_password(self, password):
        return bcrypt.checkpw(password.encode('utf-8'), self.password_hash.encode('utf-8'))

    @property
    def display_name(self):
        return ' '.join(part for part in (self.first_name, self.last_name) if part) or self.email

    def to_public_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
        }

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'sharing_enabled': self.sharing_enabled,
            'active_plan_id': self.active_plan_id,
            'active_workout_plan_id': self.active_workout_plan_id,
            'active_water_plan_id': self.active_water_plan_id,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }
