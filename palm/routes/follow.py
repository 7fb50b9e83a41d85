import logging
import secrets
from datetime import timedelta

from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required, current_user
from sqlalchemy import or_

from palm.errors import AlreadyProcessed, Forbidden, NotFound, ValidationFailed
from palm.extensions import db
from palm.models.follow import Follow, FollowRequest, FollowRequestStatus, FollowRequestType
from palm.models.user import User
from palm.notifications import send_follow_request_email
from palm.schemas.follow import CreateFollowRequestRequest
from palm.utils import load_json, utcnow, isoformat

logger = logging.getLogger(__name__)

follow_bp = Blueprint('follow', __name__)


def get_request_by_token(token):
    follow_request = FollowRequest.query.filter_by(token=token).first()
    if follow_request is None:
        raise NotFound('Request not found')
    return follow_request


def ensure_actionable(follow_request, now):
    """Stored terminal states win over expiry; an expired request stays PENDING in storage"""
    if follow_request.status != FollowRequestStatus.PENDING:
        raise AlreadyProcessed(f'This request has already been {follow_request.status.lower()}',
                               status=follow_request.status)
    if follow_request.is_expired(now):
        raise AlreadyProcessed('This request has expired', status=FollowRequestStatus.EXPIRED)


def ensure_target(follow_request, user):
    if not follow_request.is_addressed_to(user):
        raise Forbidden('This request is not intended for you')


def edge_for(follow_request, target_id):
    # FOLLOW: requester follows the target. INVITE: the target follows the requester.
    if follow_request.type == FollowRequestType.FOLLOW:
        return follow_request.requester_id, target_id
    return target_id, follow_request.requester_id


def close_request(follow_request, status, user_id):
    """Move a PENDING request to a terminal state, losing any concurrent race"""
    updated = FollowRequest.query.filter_by(
        id=follow_request.id, status=FollowRequestStatus.PENDING
    ).update({'status': status, 'target_user_id': user_id, 'updated_at': utcnow()},
             synchronize_session='fetch')
    if updated == 0:
        db.session.rollback()
        raise AlreadyProcessed()


def follow_request_dict(follow_request, now=None):
    data = follow_request.to_dict()
    data['status'] = follow_request.effective_status(now)
    data['requester'] = follow_request.requester.to_public_dict()
    data['target_user'] = follow_request.target_user.to_public_dict() if follow_request.target_user else None
    return data


@follow_bp.route('/follow-requests', methods=['GET'])
@jwt_required()
def list_follow_requests():
    now = utcnow()
    pending = FollowRequest.query.filter(
        FollowRequest.status == FollowRequestStatus.PENDING,
        FollowRequest.expires_at > now
    )
    sent = pending.filter(FollowRequest.requester_id == current_user.id).order_by(
        FollowRequest.created_at.desc()).all()
    received = pending.filter(or_(
        FollowRequest.target_user_id == current_user.id,
        FollowRequest.target_email == current_user.email
    )).order_by(FollowRequest.created_at.desc()).all()

    return jsonify({'data': {
        'sent': [follow_request_dict(item, now) for item in sent],
        'received': [follow_request_dict(item, now) for item in received]
    }})


@follow_bp.route('/follow-requests', methods=['POST'])
@jwt_required()
def create_follow_request():
    data = load_json(CreateFollowRequestRequest)
    email = data.email.lower()
    now = utcnow()

    if email == current_user.email.lower():
        raise ValidationFailed('You cannot send a request to yourself')

    target = User.query.filter_by(email=email).first()
    if target is not None:
        follower_id, following_id = (current_user.id, target.id) if data.type == FollowRequestType.FOLLOW \
            else (target.id, current_user.id)
        if Follow.query.filter_by(follower_id=follower_id, following_id=following_id).first():
            raise ValidationFailed('You are already following this user' if data.type == FollowRequestType.FOLLOW
                                   else 'This user is already following you')

    duplicate = FollowRequest.query.filter(
        FollowRequest.requester_id == current_user.id,
        FollowRequest.target_email == email,
        FollowRequest.type == data.type,
        FollowRequest.status == FollowRequestStatus.PENDING,
        FollowRequest.expires_at > now
    ).first()
    if duplicate:
        raise ValidationFailed('A pending request already exists for this email')

    follow_request = FollowRequest(
        requester_id=current_user.id,
        target_email=email,
        target_user_id=target.id if target else None,
        token=secrets.token_hex(32),
        type=data.type,
        status=FollowRequestStatus.PENDING,
        expires_at=now + timedelta(days=current_app.config['FOLLOW_REQUEST_TTL_DAYS'])
    )
    db.session.add(follow_request)
    db.session.commit()

    try:
        send_follow_request_email(follow_request)
    except Exception as e:
        logger.error('Failed to send follow request email to %s: %s', email, e)

    label = 'Follow request' if data.type == FollowRequestType.FOLLOW else 'Invitation'
    return jsonify({'data': follow_request.to_dict(), 'message': f'{label} sent successfully'}), 201


@follow_bp.route('/follow-requests/<token>', methods=['GET'])
def get_follow_request(token):
    follow_request = get_request_by_token(token)
    now = utcnow()
    ensure_actionable(follow_request, now)
    return jsonify({'data': follow_request_dict(follow_request, now)})


@follow_bp.route('/follow-requests/<token>', methods=['DELETE'])
@jwt_required()
def cancel_follow_request(token):
    follow_request = get_request_by_token(token)
    if follow_request.requester_id != current_user.id:
        raise Forbidden('You can only cancel your own requests')

    db.session.delete(follow_request)
    db.session.commit()

    return jsonify({'message': 'Request cancelled'})


@follow_bp.route('/follow-requests/<token>/accept', methods=['POST'])
@jwt_required()
def accept_follow_request(token):
    follow_request = get_request_by_token(token)
    ensure_actionable(follow_request, utcnow())
    ensure_target(follow_request, current_user)

    user_id = current_user.id
    follower_id, following_id = edge_for(follow_request, user_id)

    close_request(follow_request, FollowRequestStatus.ACCEPTED, user_id)
    follow = Follow.query.filter_by(follower_id=follower_id, following_id=following_id).first()
    created = follow is None
    if created:
        follow = Follow(follower_id=follower_id, following_id=following_id)
        db.session.add(follow)
    db.session.commit()

    requester = follow_request.requester
    if not created:
        message = 'Follow relationship already exists'
    elif follow_request.type == FollowRequestType.FOLLOW:
        message = f'{requester.display_name} is now following you'
    else:
        message = f'You are now following {requester.display_name}'
    return jsonify({'message': message, 'data': follow.to_dict()})


@follow_bp.route('/follow-requests/<token>/reject', methods=['POST'])
@jwt_required()
def reject_follow_request(token):
    follow_request = get_request_by_token(token)
    ensure_actionable(follow_request, utcnow())
    ensure_target(follow_request, current_user)

    close_request(follow_request, FollowRequestStatus.REJECTED, current_user.id)
    db.session.commit()

    return jsonify({'message': 'Request rejected', 'data': follow_request.to_dict()})


@follow_bp.route('/followers', methods=['GET'])
@jwt_required()
def list_followers():
    follows = Follow.query.filter_by(following_id=current_user.id).order_by(Follow.created_at.desc()).all()
    return jsonify({'data': [
        {'id': follow.id, 'user': follow.follower.to_public_dict(), 'created_at': isoformat(follow.created_at)}
        for follow in follows
    ]})


@follow_bp.route('/followers/<int:user_id>', methods=['DELETE'])
@jwt_required()
def remove_follower(user_id):
    follow = Follow.query.filter_by(follower_id=user_id, following_id=current_user.id).first_or_404(
        description='Follower not found')
    db.session.delete(follow)
    db.session.commit()

    return jsonify({'message': 'Follower removed'})


@follow_bp.route('/following', methods=['GET'])
@jwt_required()
def list_following():
    follows = Follow.query.filter_by(follower_id=current_user.id).order_by(Follow.created_at.desc()).all()
    return jsonify({'data': [
        {'id': follow.id, 'user': follow.following.to_public_dict(), 'created_at': isoformat(follow.created_at)}
        for follow in follows
    ]})


@follow_bp.route('/following/<int:user_id>', methods=['DELETE'])
@jwt_required()
def unfollow(user_id):
    follow = Follow.query.filter_by(follower_id=current_user.id, following_id=user_id).first_or_404(
        description='Not following this user')
    db.session.delete(follow)
    db.session.commit()

    return jsonify({'message': 'Unfollowed'})
