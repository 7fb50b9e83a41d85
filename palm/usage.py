"""Per-user usage metering and the cost estimate shown on the settings page.

Tracking calls are fire-and-forget: they commit their own small update and
never raise into the request that triggered them.
"""
import logging
import math

from sqlalchemy import case

from palm.extensions import db
from palm.models.meal import Meal
from palm.models.user import User
from palm.utils import utcnow

logger = logging.getLogger(__name__)

COST_PER_REQUEST = 0.0001
COST_PER_GB_PER_MONTH = 0.03
COST_PER_ACTIVE_DAY = 0.005
MONTHLY_DB_BASE_COST = 0.15

MONTH_DAYS = 30
BYTES_PER_GB = 1024 * 1024 * 1024

# Typical usage assumed for accounts younger than a month
ESTIMATED_DAILY_MEALS = 5
ESTIMATED_DAILY_WORKOUTS = 5
ESTIMATED_DAILY_VISITS = 20
ESTIMATED_IMAGE_MB = 1.5


def track_api_request(user_id):
    try:
        user = db.session.get(User, user_id)
        if user is None:
            return

        now = utcnow()
        query = User.query.filter_by(id=user_id)
        if (now - user.last_month_reset_at).days >= MONTH_DAYS:
            query.update({
                User.total_api_requests: User.total_api_requests + 1,
                User.last_month_api_requests: 1,
                User.last_month_reset_at: now
            }, synchronize_session=False)
        else:
            query.update({
                User.total_api_requests: User.total_api_requests + 1,
                User.last_month_api_requests: User.last_month_api_requests + 1
            }, synchronize_session=False)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error('Failed to track API request for user %s: %s', user_id, e)


def track_image_storage(user_id, nbytes):
    try:
        User.query.filter_by(id=user_id).update({
            User.stored_image_bytes: User.stored_image_bytes + nbytes
        }, synchronize_session=False)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error('Failed to track image storage for user %s: %s', user_id, e)


def untrack_image_storage(user_id, nbytes):
    try:
        User.query.filter_by(id=user_id).update({
            User.stored_image_bytes: case(
                (User.stored_image_bytes > nbytes, User.stored_image_bytes - nbytes),
                else_=0
            )
        }, synchronize_session=False)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        logger.error('Failed to untrack image storage for user %s: %s', user_id, e)


def usage_status(total_cost):
    if total_cost > 1.0:
        return 'heavy'
    if total_cost > 0.25:
        return 'moderate'
    return 'sustainable'


def calculate_user_cost(user, now=None):
    now = now or utcnow()
    elapsed = (now - user.created_at).total_seconds() if user.created_at else 0
    active_days = max(1, math.ceil(elapsed / 86400))
    months_active = max(1, math.ceil(active_days / MONTH_DAYS))
    stored_gb = (user.stored_image_bytes or 0) / BYTES_PER_GB

    compute_cost = user.total_api_requests * COST_PER_REQUEST
    storage_cost = stored_gb * COST_PER_GB_PER_MONTH * months_active
    database_cost = active_days * COST_PER_ACTIVE_DAY
    total_cost = compute_cost + storage_cost + database_cost

    is_estimated = active_days < MONTH_DAYS
    if is_estimated:
        monthly_requests = (ESTIMATED_DAILY_VISITS + ESTIMATED_DAILY_WORKOUTS) * MONTH_DAYS
        monthly_compute = monthly_requests * COST_PER_REQUEST
        monthly_storage_gb = ESTIMATED_DAILY_MEALS * ESTIMATED_IMAGE_MB * MONTH_DAYS / 1024
        monthly_storage = monthly_storage_gb * COST_PER_GB_PER_MONTH
    else:
        monthly_compute = user.last_month_api_requests * COST_PER_REQUEST
        monthly_storage = stored_gb * COST_PER_GB_PER_MONTH

    return {
        'compute_cost': compute_cost,
        'storage_cost': storage_cost,
        'database_cost': database_cost,
        'total_cost': total_cost,
        'monthly_forecast': {
            'compute': monthly_compute,
            'storage': monthly_storage,
            'database': MONTHLY_DB_BASE_COST,
            'total': monthly_compute + monthly_storage + MONTHLY_DB_BASE_COST
        },
        'is_estimated_forecast': is_estimated,
        'total_requests': user.total_api_requests,
        'last_month_requests': user.last_month_api_requests,
        'stored_gb': stored_gb,
        'total_meals': Meal.query.filter_by(user_id=user.id).count(),
        'active_days': active_days,
        'status': usage_status(total_cost)
    }
