import time

from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from stratguru.extensions import db

bp = Blueprint("health", __name__)


def _check_database():
    start = time.time()
    try:
        db.session.execute(text("SELECT 1"))
        latency = round((time.time() - start) * 1000, 2)
        return {"status": "ok", "latency_ms": latency}
    except SQLAlchemyError as e:
        db.session.rollback()
        return {"status": "error", "error": str(e)}


@bp.route("/health", methods=["GET"])
def health():
    database = _check_database()
    healthy = database["status"] == "ok"
    return jsonify({"status": "ok" if healthy else "degraded", "database": database}), 200 if healthy else 503
