from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from palm.errors import ValidationFailed
from palm.extensions import db
from palm.models.workout import Workout, WorkoutExercise
from palm.routes.exercises import check_exercise_ids
from palm.schemas.workout import CreateWorkoutRequest, UpdateWorkoutRequest
from palm.usage import track_api_request
from palm.utils import load_json, paginate, date_range_filter, utcnow

workouts_bp = Blueprint('workouts', __name__)


def get_user_workout(workout_id):
    return Workout.query.filter_by(id=workout_id, user_id=current_user.id).first_or_404(
        description='Workout not found')


def build_completed(exercises):
    return [WorkoutExercise(exercise_id=done.exercise_id, completed=done.completed) for done in exercises]


@workouts_bp.route('', methods=['GET'])
@jwt_required()
def list_workouts():
    user_id = current_user.id
    query = date_range_filter(Workout.query.filter_by(user_id=user_id), Workout.date_time)
    workouts, meta = paginate(query.order_by(Workout.date_time.desc(), Workout.id.desc()))

    payload = {'data': [workout.to_dict() for workout in workouts], 'meta': meta}
    track_api_request(user_id)
    return jsonify(payload)


@workouts_bp.route('', methods=['POST'])
@jwt_required()
def create_workout():
    data = load_json(CreateWorkoutRequest)
    user_id = current_user.id
    check_exercise_ids(user_id, [done.exercise_id for done in data.exercises])

    workout = Workout(
        user_id=user_id,
        date_time=data.date_time or utcnow(),
        notes=data.notes,
        exercises=build_completed(data.exercises)
    )
    db.session.add(workout)
    db.session.commit()

    payload = workout.to_dict()
    track_api_request(user_id)
    return jsonify({'data': payload}), 201


@workouts_bp.route('/<int:workout_id>', methods=['GET'])
@jwt_required()
def get_workout(workout_id):
    return jsonify({'data': get_user_workout(workout_id).to_dict()})


@workouts_bp.route('/<int:workout_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_workout(workout_id):
    workout = get_user_workout(workout_id)
    data = load_json(UpdateWorkoutRequest)
    changes = data.changes()

    if 'date_time' in changes:
        workout.date_time = data.date_time
    if 'notes' in changes:
        workout.notes = data.notes
    if data.exercises is not None:
        if not data.exercises:
            raise ValidationFailed(details=[{'field': 'exercises', 'message': 'At least one exercise is required'}])
        check_exercise_ids(current_user.id, [done.exercise_id for done in data.exercises])
        workout.exercises = build_completed(data.exercises)
    db.session.commit()

    return jsonify({'data': workout.to_dict()})


@workouts_bp.route('/<int:workout_id>', methods=['DELETE'])
@jwt_required()
def delete_workout(workout_id):
    workout = get_user_workout(workout_id)
    db.session.delete(workout)
    db.session.commit()

    return jsonify({'message': 'Workout deleted successfully'})
