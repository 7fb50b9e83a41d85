from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user
from sqlalchemy import func

from palm.errors import Conflict
from palm.extensions import db
from palm.models.journal import Tag, journal_entry_tags
from palm.schemas.journal import CreateTagRequest, UpdateTagRequest
from palm.utils import load_json

tags_bp = Blueprint('tags', __name__)


def get_user_tag(tag_id):
    return Tag.query.filter_by(id=tag_id, user_id=current_user.id).first_or_404(description='Tag not found')


def usage_count(tag_id):
    return db.session.query(func.count(journal_entry_tags.c.journal_entry_id)).filter(
        journal_entry_tags.c.tag_id == tag_id).scalar()


def ensure_unique_name(name, exclude_id=None):
    query = Tag.query.filter_by(user_id=current_user.id, name=name)
    if exclude_id is not None:
        query = query.filter(Tag.id != exclude_id)
    if query.first():
        raise Conflict('Tag with this name already exists')


@tags_bp.route('', methods=['GET'])
@jwt_required()
def list_tags():
    rows = db.session.query(Tag, func.count(journal_entry_tags.c.journal_entry_id)).outerjoin(
        journal_entry_tags, journal_entry_tags.c.tag_id == Tag.id
    ).filter(Tag.user_id == current_user.id).group_by(Tag.id).order_by(Tag.name.asc()).all()
    return jsonify({'data': [tag.to_dict(usage_count=count) for tag, count in rows]})


@tags_bp.route('', methods=['POST'])
@jwt_required()
def create_tag():
    data = load_json(CreateTagRequest)
    ensure_unique_name(data.name)

    tag = Tag(user_id=current_user.id, name=data.name, color=data.color)
    db.session.add(tag)
    db.session.commit()

    return jsonify({'data': tag.to_dict(usage_count=0)}), 201


@tags_bp.route('/<int:tag_id>', methods=['GET'])
@jwt_required()
def get_tag(tag_id):
    tag = get_user_tag(tag_id)
    return jsonify({'data': tag.to_dict(usage_count=usage_count(tag.id))})


@tags_bp.route('/<int:tag_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_tag(tag_id):
    tag = get_user_tag(tag_id)
    changes = load_json(UpdateTagRequest).changes()
    if 'name' in changes:
        ensure_unique_name(changes['name'], exclude_id=tag.id)

    for key, value in changes.items():
        setattr(tag, key, value)
    db.session.commit()

    return jsonify({'data': tag.to_dict(usage_count=usage_count(tag.id))})


@tags_bp.route('/<int:tag_id>', methods=['DELETE'])
@jwt_required()
def delete_tag(tag_id):
    tag = get_user_tag(tag_id)
    db.session.delete(tag)
    db.session.commit()

    return jsonify({'message': 'Tag deleted successfully'})
