"""Service status and database health check."""
import logging
from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.database import get_session

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    return jsonify({'service': 'grocery-store-backend', 'status': 'running'})


@main_bp.route('/health')
def health():
    """
    Liveness plus database reachability.

    Returns:
        200: {"status": "healthy", "database": "connected"}
        503: database unreachable
    """
    session = get_session()
    try:
        session.execute(text('SELECT 1')).scalar_one()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Health check failed: {e}")
        return jsonify({
            'status': 'unhealthy',
            'database': 'disconnected',
            'error': str(e)
        }), 503

    return jsonify({'status': 'healthy', 'database': 'connected'}), 200
