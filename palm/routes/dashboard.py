from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from palm.dashboard import build_dashboard_data
from palm.usage import track_api_request

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('', methods=['GET'])
@jwt_required()
def get_dashboard():
    user_id = current_user.id
    data = build_dashboard_data(current_user)

    track_api_request(user_id)
    return jsonify({'data': data})
