# cpq/health.py
"""Liveness endpoints for the service and its database."""

import logging
from flask import Blueprint, current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from cpq import db
from cpq.models import isoformat, utcnow

bp = Blueprint('health', __name__)
logger = logging.getLogger(__name__)


@bp.route('/health')
def health():
    return jsonify(
        status='ok',
        service=current_app.config['SERVICE_NAME'],
        timestamp=isoformat(utcnow()),
    )


@bp.route('/db-health')
def db_health():
    try:
        now = db.session.execute(text('SELECT CURRENT_TIMESTAMP')).scalar()
    except SQLAlchemyError as exc:
        logger.error('Database health check failed: %s', exc)
        db.session.rollback()
        return jsonify(ok=False, error=str(exc)), 500
    # SQLite returns a string, PostgreSQL a datetime
    if hasattr(now, 'isoformat'):
        now = now.isoformat()
    return jsonify(ok=True, now=now)
