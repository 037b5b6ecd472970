# index.py
from flask import Blueprint, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from configs import db

main_bp = Blueprint("main", __name__)


@main_bp.route("/")
def home():
    return jsonify({"service": "asset-actions", "status": "ok"})


@main_bp.route("/health")
def health():
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.session.rollback()
        return jsonify({"status": "error", "error": str(e.__class__.__name__)}), 503
    return jsonify({"status": "ok"})
