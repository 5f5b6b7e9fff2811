import logging
import os
from flask import Flask, render_template
from werkzeug.exceptions import HTTPException

# --- Paths: make sure Flask knows where templates/static live ---
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")
STATIC_DIR = os.path.join(BASE_DIR, "static")

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Triangle area invariance demo (drag A/B/C, sliders, ghost overlay)
from area_invariance import area_bp
# AI image editing panel
from image_editor import image_editor_bp

logger = logging.getLogger(__name__)


def create_app():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # explicitly tell Flask the templates/static paths
    app = Flask(
        __name__,
        template_folder=TEMPLATES_DIR,
        static_folder=STATIC_DIR,
        static_url_path="/static",
    )

    # --- Landing page (root) ---
    @app.route("/")
    def home():
        return render_template("index.html")

    # --- Health probe ---
    @app.route("/healthz")
    def healthz():
        return "ok", 200

    # --- Mount pages ---
    # Area invariance at /area-invariance (page + /api/canvas/...)
    app.register_blueprint(area_bp)

    # Image editor at /image-editor (page + /api/edit)
    app.register_blueprint(image_editor_bp)

    # -------- Friendly error pages (so you see what's wrong locally) --------
    @app.errorhandler(Exception)
    def handle_exception(e):
        if isinstance(e, HTTPException):
            return e  # let Flask show default HTTP errors
        logger.exception("Unhandled error")
        return (
            "<h3>Internal Server Error</h3>"
            "<p>Check the server logs for a traceback. Common causes:</p>"
            "<ul>"
            "<li>Template not found (templates/index.html or templates/area_invariance.html)</li>"
            "<li>matplotlib missing or without a headless backend</li>"
            "<li>Wrong working directory when starting Flask</li>"
            "</ul>",
            500,
        )

    return app


app = create_app()

if __name__ == "__main__":
    # Visit http://localhost:5000/                  → landing screen
    # Area demo:   http://localhost:5000/area-invariance/
    # Image edit:  http://localhost:5000/image-editor/
    app.run(
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "5000")),
        debug=os.environ.get("FLASK_DEBUG", "1") == "1",
    )
