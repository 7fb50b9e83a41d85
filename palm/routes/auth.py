from flask import Blueprint, jsonify
from flask_jwt_extended import create_access_token

from palm.errors import Unauthenticated, ValidationFailed
from palm.extensions import db
from palm.models.user import User
from palm.schemas.user import RegisterRequest, LoginRequest
from palm.utils import load_json

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/register', methods=['POST'])
def register():
    data = load_json(RegisterRequest)
    email = data.email.lower()

    # Check if user already exists
    if User.query.filter_by(email=email).first():
        raise ValidationFailed('Email already registered')

    user = User(
        email=email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name
    )

    db.session.add(user)
    db.session.commit()

    # Create access token with string identity
    access_token = create_access_token(identity=str(user.id))

    return jsonify({
        'message': 'User registered successfully',
        'data': {'access_token': access_token, 'user': user.to_dict()}
    }), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    data = load_json(LoginRequest)

    user = User.query.filter_by(email=data.email.lower()).first()

    if not user or not user.check_password(data.password):
        raise Unauthenticated('Invalid email or password')

    access_token = create_access_token(identity=str(user.id))

    return jsonify({
        'message': 'Login successful',
        'data': {'access_token': access_token, 'user': user.to_dict()}
    }), 200
