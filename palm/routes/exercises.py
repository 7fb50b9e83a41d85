import logging

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user
from sqlalchemy import or_

from palm.errors import Conflict, ValidationFailed
from palm.exercises import PREDEFINED_EXERCISES
from palm.extensions import db
from palm.models.workout import Exercise, WorkoutExercise, WorkoutPlanExercise
from palm.schemas.workout import CreateExerciseRequest, UpdateExerciseRequest
from palm.utils import load_json

logger = logging.getLogger(__name__)

exercises_bp = Blueprint('exercises', __name__)


def visible_exercises(user_id):
    """Predefined exercises plus the user's own custom ones"""
    return Exercise.query.filter(or_(Exercise.user_id.is_(None), Exercise.user_id == user_id))


def get_custom_exercise(exercise_id):
    return Exercise.query.filter_by(id=exercise_id, user_id=current_user.id, is_custom=True).first_or_404(
        description='Exercise not found')


def seed_predefined_exercises():
    existing = {name for (name,) in db.session.query(Exercise.name).filter(Exercise.user_id.is_(None))}
    missing = [exercise for exercise in PREDEFINED_EXERCISES if exercise['name'] not in existing]
    if not missing:
        return

    for exercise in missing:
        db.session.add(Exercise(is_custom=False, user_id=None, **exercise))
    db.session.commit()
    logger.info('Seeded %d predefined exercises', len(missing))


def check_exercise_ids(user_id, exercise_ids):
    """Reject references to exercises the user cannot see"""
    wanted = set(exercise_ids)
    if not wanted:
        return
    found = {exercise_id for (exercise_id,) in visible_exercises(user_id).filter(
        Exercise.id.in_(wanted)).with_entities(Exercise.id)}
    unknown = sorted(wanted - found)
    if unknown:
        raise ValidationFailed(details=[
            {'field': 'exercises', 'message': f'Unknown exercise id {exercise_id}'} for exercise_id in unknown
        ])


def ensure_unique_name(name, exclude_id=None):
    query = visible_exercises(current_user.id).filter(Exercise.name == name)
    if exclude_id is not None:
        query = query.filter(Exercise.id != exclude_id)
    if query.first():
        raise Conflict('Exercise with this name already exists')


@exercises_bp.route('', methods=['GET'])
@jwt_required()
def list_exercises():
    seed_predefined_exercises()
    exercises = visible_exercises(current_user.id).order_by(
        Exercise.is_custom.asc(), Exercise.category.asc(), Exercise.name.asc()).all()
    return jsonify({'data': [exercise.to_dict() for exercise in exercises]})


@exercises_bp.route('', methods=['POST'])
@jwt_required()
def create_exercise():
    data = load_json(CreateExerciseRequest)
    ensure_unique_name(data.name)

    exercise = Exercise(user_id=current_user.id, is_custom=True, **data.model_dump())
    db.session.add(exercise)
    db.session.commit()

    return jsonify({'data': exercise.to_dict()}), 201


@exercises_bp.route('/<int:exercise_id>', methods=['GET'])
@jwt_required()
def get_exercise(exercise_id):
    exercise = visible_exercises(current_user.id).filter(Exercise.id == exercise_id).first_or_404(
        description='Exercise not found')
    return jsonify({'data': exercise.to_dict()})


@exercises_bp.route('/<int:exercise_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_exercise(exercise_id):
    exercise = get_custom_exercise(exercise_id)
    changes = load_json(UpdateExerciseRequest).changes()
    if 'name' in changes:
        ensure_unique_name(changes['name'], exclude_id=exercise.id)

    for key, value in changes.items():
        setattr(exercise, key, value)
    db.session.commit()

    return jsonify({'data': exercise.to_dict()})


@exercises_bp.route('/<int:exercise_id>', methods=['DELETE'])
@jwt_required()
def delete_exercise(exercise_id):
    exercise = get_custom_exercise(exercise_id)

    # Targets and logged sets referencing the exercise go with it
    WorkoutPlanExercise.query.filter_by(exercise_id=exercise.id).delete(synchronize_session=False)
    WorkoutExercise.query.filter_by(exercise_id=exercise.id).delete(synchronize_session=False)
    db.session.delete(exercise)
    db.session.commit()

    return jsonify({'message': 'Exercise deleted successfully'})
