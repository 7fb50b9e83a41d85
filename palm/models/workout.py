from palm.extensions import db
from palm.utils import utcnow, isoformat


class Exercise(db.Model):
    """Predefined exercises have no owner; custom ones belong to a user"""
    __tablename__ = 'exercises'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(32), nullable=False)
    unit = db.Column(db.String(50), nullable=False, default='reps')
    is_custom = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'unit': self.unit,
            'is_custom': self.is_custom,
            'user_id': self.user_id
        }


class WorkoutPlan(db.Model):
    __tablename__ = 'workout_plans'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = db.relationship('User', foreign_keys=[user_id],
                           backref=db.backref('workout_plans', lazy=True, cascade='all, delete-orphan'))
    exercises = db.relationship('WorkoutPlanExercise', backref='workout_plan', lazy=True,
                                cascade='all, delete-orphan', order_by='WorkoutPlanExercise.id')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': self.name,
            'exercises': [target.to_dict() for target in self.exercises],
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }


class WorkoutPlanExercise(db.Model):
    __tablename__ = 'workout_plan_exercises'

    id = db.Column(db.Integer, primary_key=True)
    workout_plan_id = db.Column(db.Integer, db.ForeignKey('workout_plans.id'), nullable=False, index=True)
    exercise_id = db.Column(db.Integer, db.ForeignKey('exercises.id'), nullable=False)
    daily_target = db.Column(db.Integer, nullable=False, default=0)

    exercise = db.relationship('Exercise')

    def to_dict(self):
        return {
            'exercise_id': self.exercise_id,
            'daily_target': self.daily_target,
            'exercise': self.exercise.to_dict() if self.exercise else None
        }


class Workout(db.Model):
    __tablename__ = 'workouts'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    date_time = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)

    # Relationships
    user = db.relationship('User', backref=db.backref('workouts', lazy=True, cascade='all, delete-orphan'))
    exercises = db.relationship('WorkoutExercise', backref='workout', lazy=True,
                                cascade='all, delete-orphan', order_by='WorkoutExercise.id')

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'date_time': isoformat(self.date_time),
            'notes': self.notes,
            'exercises': [done.to_dict() for done in self.exercises],
            'created_at': isoformat(self.created_at)
        }


class WorkoutExercise(db.Model):
    __tablename__ = 'workout_exercises'

    id = db.Column(db.Integer, primary_key=True)
    workout_id = db.Column(db.Integer, db.ForeignKey('workouts.id'), nullable=False, index=True)
    exercise_id = db.Column(db.Integer, db.ForeignKey('exercises.id'), nullable=False)
    completed = db.Column(db.Integer, nullable=False, default=0)

    exercise = db.relationship('Exercise')

    def to_dict(self):
        return {
            'exercise_id': self.exercise_id,
            'completed': self.completed,
            'exercise': self.exercise.to_dict() if self.exercise else None
        }
