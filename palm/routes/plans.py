from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from palm.extensions import db
from palm.models.plan import Plan
from palm.models.user import User
from palm.schemas.plan import CreatePlanRequest, UpdatePlanRequest
from palm.utils import load_json

plans_bp = Blueprint('plans', __name__)


def get_user_plan(plan_id):
    return Plan.query.filter_by(id=plan_id, user_id=current_user.id).first_or_404(description='Plan not found')


@plans_bp.route('', methods=['GET'])
@jwt_required()
def list_plans():
    plans = Plan.query.filter_by(user_id=current_user.id).order_by(Plan.created_at.desc(), Plan.id.desc()).all()
    return jsonify({
        'data': [plan.to_dict() for plan in plans],
        'active_plan_id': current_user.active_plan_id
    })


@plans_bp.route('', methods=['POST'])
@jwt_required()
def create_plan():
    data = load_json(CreatePlanRequest)

    plan = Plan(user_id=current_user.id, **data.model_dump())
    db.session.add(plan)
    db.session.commit()

    return jsonify({'data': plan.to_dict()}), 201


@plans_bp.route('/<int:plan_id>', methods=['GET'])
@jwt_required()
def get_plan(plan_id):
    return jsonify({'data': get_user_plan(plan_id).to_dict()})


@plans_bp.route('/<int:plan_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_plan(plan_id):
    plan = get_user_plan(plan_id)
    changes = load_json(UpdatePlanRequest).changes()

    for key, value in changes.items():
        setattr(plan, key, value)
    db.session.commit()

    return jsonify({'data': plan.to_dict()})


@plans_bp.route('/<int:plan_id>', methods=['DELETE'])
@jwt_required()
def delete_plan(plan_id):
    plan = get_user_plan(plan_id)

    # The active pointer has no cascade, clear it in the same transaction
    User.query.filter_by(id=current_user.id, active_plan_id=plan.id).update(
        {'active_plan_id': None}, synchronize_session='fetch')
    db.session.delete(plan)
    db.session.commit()

    return jsonify({'message': 'Plan deleted successfully'})


@plans_bp.route('/<int:plan_id>/activate', methods=['POST'])
@jwt_required()
def activate_plan(plan_id):
    plan = get_user_plan(plan_id)

    current_user.active_plan_id = plan.id
    db.session.commit()

    return jsonify({'data': {'active_plan_id': plan.id}})
