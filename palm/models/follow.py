from palm.extensions import db
from palm.utils import utcnow, isoformat


class FollowRequestStatus:
    """Stored request states. Expiry is derived from expires_at, never stored."""
    PENDING = 'PENDING'
    ACCEPTED = 'ACCEPTED'
    REJECTED = 'REJECTED'
    EXPIRED = 'EXPIRED'


class FollowRequestType:
    FOLLOW = 'FOLLOW'   # requester wants to follow the target
    INVITE = 'INVITE'   # requester invites the target to follow them


class FollowRequest(db.Model):
    __tablename__ = 'follow_requests'

    id = db.Column(db.Integer, primary_key=True)
    requester_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    target_email = db.Column(db.String(255), nullable=False, index=True)
    target_user_id = db.Column(db.Integer, db.ForeignKey('users.id'), index=True)
    token = db.Column(db.String(64), unique=True, nullable=False)
    type = db.Column(db.String(10), nullable=False, default=FollowRequestType.FOLLOW)
    status = db.Column(db.String(10), nullable=False, default=FollowRequestStatus.PENDING)
    expires_at = db.Column(db.DateTime, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    requester = db.relationship('User', foreign_keys=[requester_id])
    target_user = db.relationship('User', foreign_keys=[target_user_id])

    def is_expired(self, now=None):
        return self.expires_at < (now or utcnow())

    def effective_status(self, now=None):
        if self.status == FollowRequestStatus.PENDING and self.is_expired(now):
            return FollowRequestStatus.EXPIRED
        return self.status

    def is_addressed_to(self, user):
        if self.target_user_id is not None and self.target_user_id == user.id:
            return True
        return self.target_email.lower() == (user.email or '').lower()

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'status': self.status,
            'target_email': self.target_email,
            'expires_at': isoformat(self.expires_at),
            'created_at': isoformat(self.created_at)
        }


class Follow(db.Model):
    """Directed edge: follower can see the following user's logged data"""
    __tablename__ = 'follows'
    __table_args__ = (db.UniqueConstraint('follower_id', 'following_id', name='uq_follows_pair'),)

    id = db.Column(db.Integer, primary_key=True)
    follower_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    following_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    follower = db.relationship('User', foreign_keys=[follower_id])
    following = db.relationship('User', foreign_keys=[following_id])

    def to_dict(self):
        return {
            'id': self.id,
            'follower_id': self.follower_id,
            'following_id': self.following_id,
            'created_at': isoformat(self.created_at)
        }
