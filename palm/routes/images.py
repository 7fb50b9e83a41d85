import uuid

from flask import Blueprint, Response, current_app, jsonify, request
from flask_jwt_extended import jwt_required, current_user

from palm.errors import NotFound, ValidationFailed
from palm.storage import (ALLOWED_IMAGE_TYPES, InvalidImagePath, build_image_path, content_type_for,
                          get_image_store, image_proxy_url)
from palm.usage import track_api_request, track_image_storage

images_bp = Blueprint('images', __name__)


@images_bp.route('/upload', methods=['POST'])
@jwt_required()
def upload_image():
    file = request.files.get('file')
    if file is None:
        raise ValidationFailed('No file provided')

    extension = ALLOWED_IMAGE_TYPES.get(file.mimetype)
    if extension is None:
        raise ValidationFailed('Invalid file type. Allowed: JPEG, PNG, WebP, HEIC')

    max_bytes = current_app.config['MAX_IMAGE_BYTES']
    data = file.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationFailed('File too large. Maximum size: 10MB')

    meal_key = request.form.get('meal_id') or uuid.uuid4().hex
    if not meal_key.replace('-', '').isalnum():
        raise ValidationFailed('Invalid meal id')

    path = build_image_path(current_user.id, meal_key, extension)
    get_image_store().save(path, data)

    user_id = current_user.id
    track_image_storage(user_id, len(data))
    track_api_request(user_id)

    return jsonify({'data': {'path': path, 'url': image_proxy_url(path)}}), 201


@images_bp.route('/images/<path:image_path>', methods=['GET'])
def get_image(image_path):
    store = get_image_store()
    try:
        if not store.exists(image_path):
            raise NotFound('Image not found')
        data = store.open(image_path)
    except InvalidImagePath:
        raise NotFound('Image not found')

    return Response(data, mimetype=content_type_for(image_path), headers={
        'Cache-Control': 'public, max-age=31536000, immutable'
    })
