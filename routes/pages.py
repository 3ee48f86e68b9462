"""Page endpoints sitting behind the route guard.

Rendering is handled by the frontend; these endpoints only confirm which page
was reached once the guard has let the request through.
"""

from __future__ import annotations

from flask import Blueprint, jsonify

pages_bp = Blueprint("pages", __name__)


@pages_bp.route("/", methods=["GET"])
def home():
    return jsonify({"page": "home"})


@pages_bp.route("/login", methods=["GET"])
def login_page():
    return jsonify({"page": "login"})


@pages_bp.route("/register", methods=["GET"])
def register_page():
    return jsonify({"page": "register"})


@pages_bp.route("/admin/login", methods=["GET"])
def admin_login_page():
    return jsonify({"page": "admin-login"})


@pages_bp.route("/admin", methods=["GET"])
@pages_bp.route("/admin/<path:section>", methods=["GET"])
def admin_page(section: str = "dashboard"):
    return jsonify({"page": "admin", "section": section})


@pages_bp.route("/board", methods=["GET"])
def board_page():
    return jsonify({"page": "board"})
