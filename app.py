import math

from flask import Blueprint, Flask, jsonify, request, redirect, current_app, url_for
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError

from config import load_settings
from database import make_engine, make_session_factory, init_db
from gate import RedirectTo, decide, admin_url
from models import Product

site = Blueprint("site", __name__)

# mounted under the gate prefix, so the routes always sit behind the gate
admin = Blueprint("admin", __name__)


def create_app(settings=None, engine=None):
    settings = settings or load_settings()

    app = Flask(__name__)
    app.config['SECRET_KEY'] = settings.secret_key
    app.config['SETTINGS'] = settings
    app.logger.setLevel(settings.log_level)

    # CORS - allow frontend origin(s)
    origins = settings.allowed_origins
    CORS(app, origins=origins if origins == "*" else list(origins))

    engine = engine or make_engine(settings.database_url)
    init_db(engine)
    app.config['SESSION_FACTORY'] = make_session_factory(engine)

    app.before_request(admin_gate)
    register_error_handlers(app)
    app.register_blueprint(site)
    app.register_blueprint(admin, url_prefix=settings.gate.prefix)
    return app


def admin_gate():
    """Bounce admin requests without the right key back to the site root."""
    gate = current_app.config['SETTINGS'].gate
    decision = decide(request.path, request.args, gate)
    if isinstance(decision, RedirectTo):
        current_app.logger.info("Unauthorized admin request to %s, redirecting", request.path)
        return redirect(decision.location)
    return None


def register_error_handlers(app):
    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        app.logger.error("Database error on %s: %s", request.path, e)
        return jsonify({"error": "Database error"}), 500

    @app.errorhandler(500)
    def internal_error(e):
        return jsonify({"error": "Internal server error"}), 500


def open_session():
    return current_app.config['SESSION_FACTORY']()


def current_key_link(endpoint):
    gate = current_app.config['SETTINGS'].gate
    return admin_url(url_for(endpoint), request.args.get(gate.param, ""), gate)


def read_payload():
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return data if isinstance(data, dict) else {}


def parse_price(raw):
    if raw is None or raw == "":
        return None, "Price is required"
    # bool is an int subclass; true must not become 1.0
    if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
        return None, "Invalid price"
    try:
        price = float(raw)
    except ValueError:
        return None, "Invalid price"
    if not math.isfinite(price):
        return None, "Invalid price"
    if price < 0:
        return None, "Price cannot be negative"
    return price, None


def parse_product(data, partial=False):
    """
    Validate product fields from a JSON/form payload.
    Returns (fields, error); error is None when the payload is usable.
    """
    fields = {}

    if "name" in data or not partial:
        name = data.get("name")
        if name is not None and not isinstance(name, str):
            return None, "name must be a string"
        name = (name or "").strip()
        if not name:
            return None, "Product name is required"
        fields["name"] = name

    if "price" in data or not partial:
        price, error = parse_price(data.get("price"))
        if error:
            return None, error
        fields["price"] = price

    for optional in ("description", "image"):
        if optional not in data:
            continue
        value = data.get(optional)
        if value is not None and not isinstance(value, str):
            return None, f"{optional} must be a string"
        fields[optional] = (value or "").strip() or None

    return fields, None


@site.route("/", methods=["GET"])
def home():
    return jsonify({"message": "Storefront API is running"}), 200


@admin.route("", methods=["GET"])
def admin_home():
    return jsonify({
        "message": "Storefront admin",
        "links": {
            "products": current_key_link("admin.list_products"),
            "add_product": current_key_link("admin.add_product"),
        }
    }), 200


@admin.route("/products", methods=["GET"])
def list_products():
    db = open_session()
    try:
        products = db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()
        out = [p.to_dict() for p in products]
    finally:
        db.close()

    return jsonify({"count": len(out), "products": out}), 200


@admin.route("/products", methods=["POST"])
@admin.route("/products/add", methods=["POST"], endpoint="add_product")
def create_product():
    fields, error = parse_product(read_payload())
    if error:
        return jsonify({"error": error}), 400

    db = open_session()
    try:
        product = Product(**fields)
        db.add(product)
        db.commit()
        db.refresh(product)
        out = product.to_dict()
    except SQLAlchemyError as e:
        db.rollback()
        current_app.logger.error("Failed to create product: %s", e)
        return jsonify({"error": "Failed to create product"}), 500
    finally:
        db.close()

    current_app.logger.info("Created product %s", out["id"])
    return jsonify({
        "success": True,
        "product": out,
        "redirect": current_key_link("admin.list_products"),
    }), 201


@admin.route("/products/<int:product_id>", methods=["GET"])
def get_product(product_id):
    db = open_session()
    try:
        product = db.get(Product, product_id)
        if product is None:
            return jsonify({"error": "Product not found"}), 404
        out = product.to_dict()
    finally:
        db.close()

    return jsonify({"product": out, "back": current_key_link("admin.list_products")}), 200


@admin.route("/products/<int:product_id>", methods=["PUT", "PATCH", "POST"])
def update_product(product_id):
    # PUT replaces the required fields, PATCH/POST may send any subset
    fields, error = parse_product(read_payload(), partial=request.method != "PUT")
    if error:
        return jsonify({"error": error}), 400

    db = open_session()
    try:
        product = db.get(Product, product_id)
        if product is None:
            return jsonify({"error": "Product not found"}), 404
        for name, value in fields.items():
            setattr(product, name, value)
        db.commit()
        db.refresh(product)
        out = product.to_dict()
    except SQLAlchemyError as e:
        db.rollback()
        current_app.logger.error("Failed to update product %s: %s", product_id, e)
        return jsonify({"error": "Failed to update product"}), 500
    finally:
        db.close()

    current_app.logger.info("Updated product %s", product_id)
    return jsonify({
        "success": True,
        "product": out,
        "redirect": current_key_link("admin.list_products"),
    }), 200


app = create_app()

# ------------------------------- Run ---------------------------------------
if __name__ == "__main__":
    app.run(debug=True, port=app.config['SETTINGS'].port)
