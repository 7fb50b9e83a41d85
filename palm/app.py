import logging

from flask import Flask, jsonify
from flask_cors import CORS

from palm.config import CONFIGS
from palm.errors import register_error_handlers
from palm.extensions import db, migrate, jwt


def create_app(config_name='development', overrides=None):
    # Initialize Flask app
    app = Flask(__name__)

    # Configure the app based on environment
    app.config.from_object(CONFIGS.get(config_name, CONFIGS['development']))
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config['LOG_LEVEL'],
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    CORS(app)
    jwt.init_app(app)

    register_jwt_callbacks()
    register_error_handlers(app)

    # Import routes after db initialization to avoid circular imports
    from palm.routes.auth import auth_bp
    from palm.routes.user import user_bp
    from palm.routes.plans import plans_bp
    from palm.routes.meals import meals_bp
    from palm.routes.water import water_bp
    from palm.routes.water_plans import water_plans_bp
    from palm.routes.exercises import exercises_bp
    from palm.routes.workout_plans import workout_plans_bp
    from palm.routes.workouts import workouts_bp
    from palm.routes.journal import journal_bp
    from palm.routes.tags import tags_bp
    from palm.routes.dashboard import dashboard_bp
    from palm.routes.images import images_bp
    from palm.routes.follow import follow_bp
    from palm.routes.feed import feed_bp

    # Register blueprints
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api/users')
    app.register_blueprint(plans_bp, url_prefix='/api/plans')
    app.register_blueprint(meals_bp, url_prefix='/api/meals')
    app.register_blueprint(water_bp, url_prefix='/api/water')
    app.register_blueprint(water_plans_bp, url_prefix='/api/water-plans')
    app.register_blueprint(exercises_bp, url_prefix='/api/exercises')
    app.register_blueprint(workout_plans_bp, url_prefix='/api/workout-plans')
    app.register_blueprint(workouts_bp, url_prefix='/api/workouts')
    app.register_blueprint(journal_bp, url_prefix='/api/journal')
    app.register_blueprint(tags_bp, url_prefix='/api/tags')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')
    app.register_blueprint(images_bp, url_prefix='/api')
    app.register_blueprint(follow_bp, url_prefix='/api')
    app.register_blueprint(feed_bp, url_prefix='/api')

    return app


def register_jwt_callbacks():
    from palm.models.user import User

    @jwt.user_lookup_loader
    def load_user(_jwt_header, jwt_data):
        return db.session.get(User, int(jwt_data['sub']))

    def unauthorized(*_args):
        return jsonify({'error': 'Unauthorized'}), 401

    jwt.unauthorized_loader(unauthorized)
    jwt.invalid_token_loader(unauthorized)
    jwt.expired_token_loader(unauthorized)
    jwt.user_lookup_error_loader(unauthorized)
    jwt.revoked_token_loader(unauthorized)
