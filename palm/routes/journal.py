from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, current_user

from palm.errors import ValidationFailed
from palm.extensions import db
from palm.models.journal import JournalEntry, Tag
from palm.schemas.journal import CreateJournalEntryRequest, UpdateJournalEntryRequest
from palm.usage import track_api_request
from palm.utils import load_json, paginate, date_range_filter, utcnow

journal_bp = Blueprint('journal', __name__)


def get_user_entry(entry_id):
    return JournalEntry.query.filter_by(id=entry_id, user_id=current_user.id).first_or_404(
        description='Journal entry not found')


def load_user_tags(user_id, tag_ids):
    """Resolve tag ids, all of which must belong to the user"""
    wanted = set(tag_ids)
    if not wanted:
        return []
    tags = Tag.query.filter(Tag.user_id == user_id, Tag.id.in_(wanted)).all()
    if len(tags) != len(wanted):
        raise ValidationFailed('One or more tags not found')
    return tags


@journal_bp.route('', methods=['GET'])
@jwt_required()
def list_entries():
    user_id = current_user.id
    query = date_range_filter(JournalEntry.query.filter_by(user_id=user_id), JournalEntry.date_time)

    tag_id = request.args.get('tag_id', type=int)
    if tag_id is not None:
        query = query.filter(JournalEntry.tags.any(Tag.id == tag_id))
    search = request.args.get('search', '').strip()
    if search:
        query = query.filter(JournalEntry.text.ilike(f'%{search}%'))

    entries, meta = paginate(query.order_by(JournalEntry.date_time.desc(), JournalEntry.id.desc()))

    payload = {'data': [entry.to_dict() for entry in entries], 'meta': meta}
    track_api_request(user_id)
    return jsonify(payload)


@journal_bp.route('', methods=['POST'])
@jwt_required()
def create_entry():
    data = load_json(CreateJournalEntryRequest)
    user_id = current_user.id

    entry = JournalEntry(
        user_id=user_id,
        text=data.text,
        date_time=data.date_time or utcnow(),
        tags=load_user_tags(user_id, data.tag_ids)
    )
    db.session.add(entry)
    db.session.commit()

    payload = entry.to_dict()
    track_api_request(user_id)
    return jsonify({'data': payload}), 201


@journal_bp.route('/<int:entry_id>', methods=['GET'])
@jwt_required()
def get_entry(entry_id):
    return jsonify({'data': get_user_entry(entry_id).to_dict()})


@journal_bp.route('/<int:entry_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_entry(entry_id):
    entry = get_user_entry(entry_id)
    data = load_json(UpdateJournalEntryRequest)
    changes = data.changes()

    if 'text' in changes:
        entry.text = data.text
    if 'date_time' in changes:
        entry.date_time = data.date_time
    if data.tag_ids is not None:
        entry.tags = load_user_tags(current_user.id, data.tag_ids)
    db.session.commit()

    return jsonify({'data': entry.to_dict()})


@journal_bp.route('/<int:entry_id>', methods=['DELETE'])
@jwt_required()
def delete_entry(entry_id):
    entry = get_user_entry(entry_id)
    db.session.delete(entry)
    db.session.commit()

    return jsonify({'message': 'Journal entry deleted successfully'})
