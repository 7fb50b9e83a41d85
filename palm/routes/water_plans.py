from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from palm.extensions import db
from palm.models.user import User
from palm.models.water import WaterPlan
from palm.schemas.water import CreateWaterPlanRequest, UpdateWaterPlanRequest
from palm.utils import load_json

water_plans_bp = Blueprint('water_plans', __name__)


def get_user_water_plan(plan_id):
    return WaterPlan.query.filter_by(id=plan_id, user_id=current_user.id).first_or_404(
        description='Water plan not found')


@water_plans_bp.route('', methods=['GET'])
@jwt_required()
def list_water_plans():
    plans = WaterPlan.query.filter_by(user_id=current_user.id).order_by(
        WaterPlan.created_at.desc(), WaterPlan.id.desc()).all()
    return jsonify({
        'data': [plan.to_dict() for plan in plans],
        'active_water_plan_id': current_user.active_water_plan_id
    })


@water_plans_bp.route('', methods=['POST'])
@jwt_required()
def create_water_plan():
    data = load_json(CreateWaterPlanRequest)

    plan = WaterPlan(user_id=current_user.id, **data.model_dump())
    db.session.add(plan)
    db.session.commit()

    return jsonify({'data': plan.to_dict()}), 201


@water_plans_bp.route('/<int:plan_id>', methods=['GET'])
@jwt_required()
def get_water_plan(plan_id):
    return jsonify({'data': get_user_water_plan(plan_id).to_dict()})


@water_plans_bp.route('/<int:plan_id>', methods=['PATCH'])
@jwt_required()
def update_water_plan(plan_id):
    plan = get_user_water_plan(plan_id)
    changes = load_json(UpdateWaterPlanRequest).changes()

    for key, value in changes.items():
        setattr(plan, key, value)
    db.session.commit()

    return jsonify({'data': plan.to_dict()})


@water_plans_bp.route('/<int:plan_id>', methods=['DELETE'])
@jwt_required()
def delete_water_plan(plan_id):
    plan = get_user_water_plan(plan_id)

    User.query.filter_by(id=current_user.id, active_water_plan_id=plan.id).update(
        {'active_water_plan_id': None}, synchronize_session='fetch')
    db.session.delete(plan)
    db.session.commit()

    return jsonify({'message': 'Water plan deleted successfully'})


@water_plans_bp.route('/<int:plan_id>/activate', methods=['POST'])
@jwt_required()
def activate_water_plan(plan_id):
    plan = get_user_water_plan(plan_id)

    current_user.active_water_plan_id = plan.id
    db.session.commit()

    return jsonify({'data': {'active_water_plan_id': plan.id}})
