from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from palm.extensions import db
from palm.schemas.user import UpdateUserRequest, UpdateSharingRequest
from palm.usage import calculate_user_cost
from palm.utils import load_json

user_bp = Blueprint('user', __name__)


@user_bp.route('/me', methods=['GET'])
@jwt_required()
def get_me():
    return jsonify({'data': current_user.to_dict()})


@user_bp.route('/me', methods=['PUT'])
@jwt_required()
def update_me():
    changes = load_json(UpdateUserRequest).changes()

    for key, value in changes.items():
        setattr(current_user, key, value)

    db.session.commit()
    return jsonify({'data': current_user.to_dict()})


@user_bp.route('/me/sharing', methods=['GET'])
@jwt_required()
def get_sharing():
    return jsonify({'data': {
        'sharing_enabled': current_user.sharing_enabled,
        'share_url': f"/share/{current_user.id}"
    }})


@user_bp.route('/me/sharing', methods=['PUT'])
@jwt_required()
def update_sharing():
    data = load_json(UpdateSharingRequest)
    current_user.sharing_enabled = data.sharing_enabled
    db.session.commit()
    return jsonify({'data': {
        'sharing_enabled': current_user.sharing_enabled,
        'share_url': f"/share/{current_user.id}"
    }})


@user_bp.route('/me/usage', methods=['GET'])
@jwt_required()
def get_usage():
    return jsonify({'data': calculate_user_cost(current_user)})
