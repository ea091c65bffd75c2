# app.py - Main Flask Application
import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS

from api.calendars import calendars_bp
from api.groups import groups_bp
from api.interchange import interchange_bp
from api.items import items_bp
from utils.data_manager import StoreError, ensure_data_directory
from utils.models import ValidationError


def create_app(test_config=None):
    load_dotenv()
    logging.basicConfig(
        level=os.getenv('CALBOARD_LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    app = Flask(__name__)
    app.config['DATA_DIR'] = os.getenv('CALBOARD_DATA_DIR', 'data')
    if test_config:
        app.config.update(test_config)
    CORS(app)

    # Ensure data directory exists
    ensure_data_directory(app.config['DATA_DIR'])

    # Register blueprints
    app.register_blueprint(items_bp, url_prefix='/api')
    app.register_blueprint(groups_bp, url_prefix='/api')
    app.register_blueprint(calendars_bp, url_prefix='/api')
    app.register_blueprint(interchange_bp, url_prefix='/api')

    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({'error': str(error)}), 400

    @app.errorhandler(StoreError)
    def handle_store_error(error):
        app.logger.error(str(error))
        return jsonify({'error': 'Failed to save changes'}), 500

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    return app


if __name__ == '__main__':
    app = create_app()
    app.run(debug=True)
