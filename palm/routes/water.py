from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, current_user

from palm.dashboard import build_water_summary, resolve_timezone
from palm.extensions import db
from palm.models.water import WaterEntry
from palm.schemas.water import CreateWaterRequest, UpdateWaterRequest
from palm.usage import track_api_request
from palm.utils import load_json, paginate, date_range_filter, utcnow

water_bp = Blueprint('water', __name__)


def get_user_entry(entry_id):
    return WaterEntry.query.filter_by(id=entry_id, user_id=current_user.id).first_or_404(
        description='Water entry not found')


@water_bp.route('', methods=['GET'])
@jwt_required()
def list_water():
    user_id = current_user.id
    query = date_range_filter(WaterEntry.query.filter_by(user_id=user_id), WaterEntry.date_time)
    entries, meta = paginate(query.order_by(WaterEntry.date_time.desc(), WaterEntry.id.desc()))

    payload = {'data': [entry.to_dict() for entry in entries], 'meta': meta}
    track_api_request(user_id)
    return jsonify(payload)


@water_bp.route('', methods=['POST'])
@jwt_required()
def create_water():
    data = load_json(CreateWaterRequest)
    user_id = current_user.id

    entry = WaterEntry(
        user_id=user_id,
        amount=data.amount,
        unit=data.unit,
        date_time=data.date_time or utcnow(),
        notes=data.notes
    )
    db.session.add(entry)
    db.session.commit()

    payload = entry.to_dict()
    track_api_request(user_id)
    return jsonify({'data': payload}), 201


@water_bp.route('/summary', methods=['GET'])
@jwt_required()
def water_summary():
    tz = resolve_timezone(request.cookies.get('timezone'))
    summary = build_water_summary(current_user, tz)
    return jsonify({'data': summary})


@water_bp.route('/<int:entry_id>', methods=['GET'])
@jwt_required()
def get_water(entry_id):
    return jsonify({'data': get_user_entry(entry_id).to_dict()})


@water_bp.route('/<int:entry_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_water(entry_id):
    entry = get_user_entry(entry_id)
    changes = load_json(UpdateWaterRequest).changes()

    for key, value in changes.items():
        setattr(entry, key, value)
    db.session.commit()

    return jsonify({'data': entry.to_dict()})


@water_bp.route('/<int:entry_id>', methods=['DELETE'])
@jwt_required()
def delete_water(entry_id):
    entry = get_user_entry(entry_id)
    db.session.delete(entry)
    db.session.commit()

    return jsonify({'message': 'Water entry deleted successfully'})
