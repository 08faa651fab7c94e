# snapshare/__init__.py

# =====================================================================================
# 1. Environment variables (loaded before anything reads os.environ)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. Module imports
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - configuration and errors
from snapshare.core.config import config_by_name
from snapshare.core.exceptions import SnapShareError

# - API blueprints
from snapshare.api.auth.routes import auth_bp
from snapshare.api.users.routes import users_bp
from snapshare.api.posts.routes import posts_bp
from snapshare.api.likes.routes import likes_bp
from snapshare.api.comments.routes import comments_bp
from snapshare.api.follows.routes import follows_bp

# - services
from snapshare.services.storage_service import StorageService
from snapshare.services.cascade_service import CascadeDeletionService
from snapshare.api.auth.services import AuthService
from snapshare.api.users.services import UserService
from snapshare.api.posts.services import PostService
from snapshare.api.likes.services import LikeService
from snapshare.api.comments.services import CommentService
from snapshare.api.follows.services import FollowService


def _init_firebase(app: Flask):
    if firebase_admin._apps:
        return
    cred_path = app.config['FIREBASE_CREDENTIALS_PATH']
    if not cred_path or not os.path.exists(cred_path):
        raise FileNotFoundError(f"Firebase credentials file not found: {cred_path}")
    cred = credentials.Certificate(cred_path)
    firebase_admin.initialize_app(cred, {
        'storageBucket': app.config['FIREBASE_STORAGE_BUCKET']
    })


def create_app(config_name=None, db=None, bucket=None):
    """
    Flask application factory.

    :param config_name: key of config_by_name; defaults to FLASK_ENV
    :param db: Firestore client to use instead of the Firebase default app's client
    :param bucket: Storage bucket to use instead of FIREBASE_STORAGE_BUCKET
    """
    # =====================================================================================
    # 3. Flask app and configuration
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY must be set in the environment or .env file.")

    # =====================================================================================
    # 4. Extensions and store connections (created once, shared by every request)
    # =====================================================================================
    jwt = JWTManager(app)

    if db is None or bucket is None:
        _init_firebase(app)
    if db is None:
        db = firestore.client()

    # =====================================================================================
    # 5. Services registered on 'app.services' (dependency injection)
    # =====================================================================================
    app.services = {}

    try:
        storage_instance = StorageService(bucket)
        storage_instance.init_app(app)
        app.services['storage'] = storage_instance
        logging.info("Storage service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    app.services['cascade'] = CascadeDeletionService(db, app.services['storage'])
    app.services['users'] = UserService(
        db,
        storage_service=app.services['storage'],
        cascade_service=app.services['cascade']
    )
    app.services['auth'] = AuthService(
        db,
        user_service=app.services['users'],
        storage_service=app.services['storage'],
        default_bio=app.config['DEFAULT_BIO']
    )
    app.services['posts'] = PostService(
        db,
        storage_service=app.services['storage'],
        cascade_service=app.services['cascade'],
        user_service=app.services['users']
    )
    app.services['likes'] = LikeService(db)
    app.services['comments'] = CommentService(db, user_service=app.services['users'])
    app.services['follows'] = FollowService(db, user_service=app.services['users'])

    # =====================================================================================
    # 6. Blueprints
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(posts_bp, url_prefix='/api/posts')
    app.register_blueprint(likes_bp, url_prefix='/api/likes')
    app.register_blueprint(comments_bp, url_prefix='/api/comments')
    app.register_blueprint(follows_bp, url_prefix='/api/follows')

    # =====================================================================================
    # 7. Authentication failures
    # =====================================================================================
    @jwt.unauthorized_loader
    def handle_missing_token(reason):
        return jsonify({"error_code": "UNAUTHORIZED", "message": "No access token provided"}), 401

    @jwt.invalid_token_loader
    def handle_invalid_token(reason):
        return jsonify({"error_code": "INVALID_TOKEN", "message": "Token is tampered with or invalid"}), 401

    @jwt.expired_token_loader
    def handle_expired_token(jwt_header, jwt_payload):
        return jsonify({"error_code": "TOKEN_EXPIRED", "message": "Token has expired"}), 401

    # =====================================================================================
    # 8. Global error handlers
    # =====================================================================================
    @app.errorhandler(SnapShareError)
    def handle_app_error(err):
        if err.status_code >= 500:
            logging.error(f"{err.error_code}: {err.message}", exc_info=err.__cause__ is not None)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "message": "Invalid request data", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        error_code = (err.name or "HTTP_ERROR").upper().replace(' ', '_')
        return jsonify({"error_code": error_code, "message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # Anything not handled above, Firestore failures included
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "An unexpected server error occurred."}
        return jsonify(response), 500

    # =====================================================================================
    # 9. Logging and return
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
