from datetime import timedelta

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, current_user
from sqlalchemy import and_, or_

from palm.dashboard import start_of_day
from palm.errors import NotFound
from palm.extensions import db
from palm.models.follow import Follow
from palm.models.meal import Meal
from palm.models.user import User
from palm.utils import utcnow

feed_bp = Blueprint('feed', __name__)

FEED_PAGE_SIZE = 20
GALLERY_PAGE_SIZE = 12
MAX_FEED_LIMIT = 50


def limit_arg(default):
    limit = request.args.get('limit', default, type=int)
    return min(max(limit, 1), MAX_FEED_LIMIT)


def time_range_start(time_range, now):
    today = start_of_day(now)
    if time_range == 'today':
        return today
    if time_range == 'week':
        # Weeks start on Sunday
        return today - timedelta(days=(today.weekday() + 1) % 7)
    if time_range == 'month':
        return today.replace(day=1)
    return None


def after_cursor(query, anchor, oldest_first=False):
    """Keep meals strictly past the anchor in (date_time, id) order"""
    if anchor is None:
        return query
    if oldest_first:
        return query.filter(or_(Meal.date_time > anchor.date_time,
                                and_(Meal.date_time == anchor.date_time, Meal.id > anchor.id)))
    return query.filter(or_(Meal.date_time < anchor.date_time,
                            and_(Meal.date_time == anchor.date_time, Meal.id < anchor.id)))


def gallery_meal_dict(meal):
    data = meal.to_dict()
    data['image'] = data['image_url']
    return data


@feed_bp.route('/feed', methods=['GET'])
@jwt_required()
def get_feed():
    limit = limit_arg(FEED_PAGE_SIZE)
    following = Follow.query.filter_by(follower_id=current_user.id).all()
    followed_users = [follow.following for follow in following]
    following_ids = [user.id for user in followed_users]

    meta = {
        'next_cursor': None,
        'has_more': False,
        'total_following': len(following_ids),
        'followed_users': [user.to_public_dict() for user in followed_users]
    }
    if not following_ids:
        return jsonify({'data': [], 'meta': meta})

    # Only users we actually follow may be filtered to
    target_ids = following_ids
    raw_ids = request.args.get('user_ids', '')
    if raw_ids:
        requested = {int(part) for part in raw_ids.split(',') if part.strip().isdigit()}
        target_ids = [user_id for user_id in following_ids if user_id in requested] or following_ids

    query = Meal.query.filter(Meal.user_id.in_(target_ids))
    since = time_range_start(request.args.get('time_range'), utcnow())
    if since is not None:
        query = query.filter(Meal.date_time >= since)
    cursor_id = request.args.get('cursor', type=int)
    if cursor_id is not None:
        anchor = Meal.query.filter(Meal.id == cursor_id, Meal.user_id.in_(target_ids)).first()
        query = after_cursor(query, anchor)

    meals = query.order_by(Meal.date_time.desc(), Meal.id.desc()).limit(limit + 1).all()
    has_more = len(meals) > limit
    meals = meals[:limit]

    data = []
    for meal in meals:
        item = gallery_meal_dict(meal)
        item['user'] = meal.user.to_public_dict()
        data.append(item)

    meta['has_more'] = has_more
    meta['next_cursor'] = meals[-1].id if has_more and meals else None
    return jsonify({'data': data, 'meta': meta})


@feed_bp.route('/share/<int:user_id>/meals', methods=['GET'])
def get_shared_meals(user_id):
    user = db.session.get(User, user_id)
    if user is None or not user.sharing_enabled:
        raise NotFound('User not found')

    limit = limit_arg(GALLERY_PAGE_SIZE)
    oldest_first = request.args.get('sort') == 'oldest'
    query = Meal.query.filter_by(user_id=user.id)

    cursor_id = request.args.get('cursor', type=int)
    if cursor_id is not None:
        anchor = Meal.query.filter_by(id=cursor_id, user_id=user.id).first()
        query = after_cursor(query, anchor, oldest_first)

    if oldest_first:
        query = query.order_by(Meal.date_time.asc(), Meal.id.asc())
    else:
        query = query.order_by(Meal.date_time.desc(), Meal.id.desc())

    meals = query.limit(limit + 1).all()
    has_more = len(meals) > limit
    meals = meals[:limit]

    return jsonify({
        'data': [gallery_meal_dict(meal) for meal in meals],
        'user': {'id': user.id, 'first_name': user.first_name, 'last_name': user.last_name},
        'meta': {'next_cursor': meals[-1].id if has_more and meals else None, 'has_more': has_more}
    })
