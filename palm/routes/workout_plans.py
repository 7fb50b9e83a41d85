from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from palm.extensions import db
from palm.models.user import User
from palm.models.workout import WorkoutPlan, WorkoutPlanExercise
from palm.routes.exercises import check_exercise_ids
from palm.schemas.workout import CreateWorkoutPlanRequest, UpdateWorkoutPlanRequest
from palm.utils import load_json

workout_plans_bp = Blueprint('workout_plans', __name__)


def get_user_workout_plan(plan_id):
    return WorkoutPlan.query.filter_by(id=plan_id, user_id=current_user.id).first_or_404(
        description='Workout plan not found')


def build_targets(targets):
    return [WorkoutPlanExercise(exercise_id=target.exercise_id, daily_target=target.daily_target)
            for target in targets]


@workout_plans_bp.route('', methods=['GET'])
@jwt_required()
def list_workout_plans():
    plans = WorkoutPlan.query.filter_by(user_id=current_user.id).order_by(
        WorkoutPlan.created_at.desc(), WorkoutPlan.id.desc()).all()
    return jsonify({
        'data': [plan.to_dict() for plan in plans],
        'active_workout_plan_id': current_user.active_workout_plan_id
    })


@workout_plans_bp.route('', methods=['POST'])
@jwt_required()
def create_workout_plan():
    data = load_json(CreateWorkoutPlanRequest)
    check_exercise_ids(current_user.id, [target.exercise_id for target in data.exercises])

    plan = WorkoutPlan(user_id=current_user.id, name=data.name, exercises=build_targets(data.exercises))
    db.session.add(plan)
    db.session.commit()

    return jsonify({'data': plan.to_dict()}), 201


@workout_plans_bp.route('/<int:plan_id>', methods=['GET'])
@jwt_required()
def get_workout_plan(plan_id):
    return jsonify({'data': get_user_workout_plan(plan_id).to_dict()})


@workout_plans_bp.route('/<int:plan_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_workout_plan(plan_id):
    plan = get_user_workout_plan(plan_id)
    data = load_json(UpdateWorkoutPlanRequest)
    changes = data.changes()

    if 'name' in changes:
        plan.name = data.name
    if data.exercises is not None:
        check_exercise_ids(current_user.id, [target.exercise_id for target in data.exercises])
        # Old targets are orphaned and deleted in the same commit
        plan.exercises = build_targets(data.exercises)
    db.session.commit()

    return jsonify({'data': plan.to_dict()})


@workout_plans_bp.route('/<int:plan_id>', methods=['DELETE'])
@jwt_required()
def delete_workout_plan(plan_id):
    plan = get_user_workout_plan(plan_id)

    User.query.filter_by(id=current_user.id, active_workout_plan_id=plan.id).update(
        {'active_workout_plan_id': None}, synchronize_session='fetch')
    db.session.delete(plan)
    db.session.commit()

    return jsonify({'message': 'Workout plan deleted successfully'})


@workout_plans_bp.route('/<int:plan_id>/activate', methods=['POST'])
@jwt_required()
def activate_workout_plan(plan_id):
    plan = get_user_workout_plan(plan_id)

    current_user.active_workout_plan_id = plan.id
    db.session.commit()

    return jsonify({'data': {'active_workout_plan_id': plan.id}})
