import logging

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, current_user

from palm.extensions import db
from palm.models.meal import Meal, MealNote
from palm.schemas.meal import CreateMealRequest, UpdateMealRequest
from palm.storage import InvalidImagePath, get_image_store, is_image_owned_by
from palm.usage import track_api_request, untrack_image_storage
from palm.utils import load_json, paginate, date_range_filter, utcnow

logger = logging.getLogger(__name__)

meals_bp = Blueprint('meals', __name__)


def get_user_meal(meal_id):
    return Meal.query.filter_by(id=meal_id, user_id=current_user.id).first_or_404(description='Meal not found')


def remove_stored_image(user_id, image):
    """Delete an uploaded image this user owns; other references are left alone"""
    if not is_image_owned_by(image, user_id):
        return
    try:
        freed = get_image_store().delete(image)
    except (InvalidImagePath, OSError) as e:
        logger.error('Failed to delete image %s: %s', image, e)
        return
    if freed:
        untrack_image_storage(user_id, freed)


@meals_bp.route('', methods=['GET'])
@jwt_required()
def list_meals():
    user_id = current_user.id
    query = date_range_filter(Meal.query.filter_by(user_id=user_id), Meal.date_time)
    meals, meta = paginate(query.order_by(Meal.date_time.desc(), Meal.id.desc()))

    payload = {'data': [meal.to_dict() for meal in meals], 'meta': meta}
    track_api_request(user_id)
    return jsonify(payload)


@meals_bp.route('', methods=['POST'])
@jwt_required()
def create_meal():
    data = load_json(CreateMealRequest)
    user_id = current_user.id

    meal = Meal(
        user_id=user_id,
        proteins_used=data.proteins_used,
        fats_used=data.fats_used,
        carbs_used=data.carbs_used,
        veggies_used=data.veggies_used,
        junk_used=data.junk_used,
        image=data.image,
        meal_category=data.meal_category,
        date_time=data.date_time or utcnow(),
        notes=[MealNote(text=text) for text in data.notes if text]
    )
    db.session.add(meal)
    db.session.commit()

    payload = meal.to_dict()
    track_api_request(user_id)
    return jsonify({'data': payload}), 201


@meals_bp.route('/<int:meal_id>', methods=['GET'])
@jwt_required()
def get_meal(meal_id):
    return jsonify({'data': get_user_meal(meal_id).to_dict()})


@meals_bp.route('/<int:meal_id>', methods=['PUT', 'PATCH'])
@jwt_required()
def update_meal(meal_id):
    meal = get_user_meal(meal_id)
    changes = load_json(UpdateMealRequest).changes()
    user_id = current_user.id
    old_image = meal.image

    notes = changes.pop('notes', None)
    for key, value in changes.items():
        setattr(meal, key, value)
    if notes is not None:
        meal.notes = [MealNote(text=text) for text in notes if text]
    db.session.commit()

    payload = meal.to_dict()
    if old_image and old_image != meal.image:
        remove_stored_image(user_id, old_image)
    return jsonify({'data': payload})


@meals_bp.route('/<int:meal_id>', methods=['DELETE'])
@jwt_required()
def delete_meal(meal_id):
    meal = get_user_meal(meal_id)
    user_id = current_user.id
    image = meal.image

    db.session.delete(meal)
    db.session.commit()

    if image:
        remove_stored_image(user_id, image)
    return jsonify({'message': 'Meal deleted successfully'})
