from flask import jsonify
from sqlalchemy import text
from gremlinlink.extensions import db
from . import v1_bp


@v1_bp.route('/health', methods=['GET'])
def health_check():
    try:
        db.session.execute(text("SELECT 1"))
        database = "ok"
    except Exception:
        db.session.rollback()
        database = "unavailable"

    return jsonify({
        "status": "ok" if database == "ok" else "degraded",
        "service": "gremlinlink",
        "database": database,
    }), 200 if database == "ok" else 503
