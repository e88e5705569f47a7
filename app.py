import logging
import os
from datetime import datetime
from functools import wraps

from dotenv import load_dotenv
from flask import Flask, request, jsonify, abort, send_from_directory
from flask_sqlalchemy import SQLAlchemy
from flask_login import (
    LoginManager, UserMixin, login_user, logout_user,
    login_required, current_user
)
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.security import generate_password_hash, check_password_hash

from catalog_filter import FilterState, filter_products, facet_values, search_admin_products
from image_pipeline import DEFAULT_MAX_IMAGES, ImageUploadError, accept_files, upload_for_submission
from object_storage import LocalObjectStorage, StorageError
from product_catalogs import (
    SECTIONS, COLOR_CATEGORIES, SPEC_UNITS, SUB_TYPES, categories_for
)
from product_forms import ProductValidationError, parse_product_form, unique_slug
from whatsapp_order import OrderForm, build_order_message, whatsapp_url

load_dotenv()

app = Flask(__name__)

# ----------------------------
# CONFIG
# ----------------------------
app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "change-this-secret-key")
app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv("DATABASE_URL", "sqlite:///aruvi_store.db")
app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
app.config["SESSION_COOKIE_HTTPONLY"] = True
app.config["SESSION_COOKIE_SAMESITE"] = "Lax"

# Admin account bootstrapped at startup (only when a password is configured)
app.config["ADMIN_EMAIL"] = os.getenv("ADMIN_EMAIL", "admin@sriaruvi.in")
app.config["ADMIN_PASSWORD"] = os.getenv("ADMIN_PASSWORD")

# Product image bucket
app.config["STORAGE_DIR"] = os.path.abspath(
    os.getenv("STORAGE_DIR", os.path.join(app.instance_path, "storage"))
)
app.config["STORAGE_BUCKET"] = os.getenv("STORAGE_BUCKET", "product-images")
app.config["PUBLIC_BASE_URL"] = os.getenv("PUBLIC_BASE_URL", "")
app.config["MAX_PREVIEW_IMAGES"] = int(os.getenv("MAX_PREVIEW_IMAGES", DEFAULT_MAX_IMAGES))

# Business number for "Buy Now" WhatsApp orders
app.config["WHATSAPP_NUMBER"] = os.getenv("WHATSAPP_NUMBER", "911234567890")

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

db = SQLAlchemy(app)

login_manager = LoginManager(app)

storage = LocalObjectStorage(
    app.config["STORAGE_DIR"],
    bucket=app.config["STORAGE_BUCKET"],
    base_url=app.config["PUBLIC_BASE_URL"],
)


# ----------------------------
# MODELS
# ----------------------------
class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(150), unique=True, nullable=False)
    name = db.Column(db.String(150))
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def get_id(self):
        return str(self.id)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "is_admin": bool(self.is_admin),
        }


class Product(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    section = db.Column(db.String(20), nullable=False, index=True)  # electronics / furniture
    slug = db.Column(db.String(255), unique=True, nullable=False)

    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    category = db.Column(db.String(100), nullable=False)
    sub_type = db.Column(db.String(100))
    brand = db.Column(db.String(150))
    price = db.Column(db.Float, nullable=False)

    # Ordered list of public URLs; first one is the thumbnail
    images = db.Column(db.JSON, nullable=False, default=list)

    # Electronics
    model_no = db.Column(db.String(100))
    spec_value = db.Column(db.Float)
    spec_unit = db.Column(db.String(30))

    # Furniture
    material = db.Column(db.String(100))
    dimensions = db.Column(db.String(100))

    color = db.Column(db.String(255))
    availability = db.Column(db.Boolean, default=True, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "section": self.section,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "sub_type": self.sub_type,
            "brand": self.brand,
            "model_no": self.model_no,
            "material": self.material,
            "dimensions": self.dimensions,
            "color": self.color,
            "price": self.price,
            "images": list(self.images or []),
            "spec_value": self.spec_value,
            "spec_unit": self.spec_unit,
            "availability": bool(self.availability),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


# ----------------------------
# LOGIN MANAGER
# ----------------------------
@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return json_error("Please log in to continue.", 401)


# ----------------------------
# HELPERS
# ----------------------------
def json_error(message, status=400, **extra):
    payload = {"ok": False, "error": message}
    payload.update(extra)
    return jsonify(payload), status


def request_data():
    """JSON body, or form fields (list fields read with getlist)."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}

    data = request.form.to_dict()
    for key in ("images", "colors"):
        if key in request.form:
            data[key] = request.form.getlist(key)
    return data


def require_section(section):
    if section not in SECTIONS:
        abort(404)


def load_section_products(section, available_only=True):
    """All products of a section, oldest first. Read failures give an empty list."""
    try:
        query = Product.query.filter_by(section=section)
        if available_only:
            query = query.filter_by(availability=True)
        return query.order_by(Product.id).all()
    except SQLAlchemyError as e:
        app.logger.error("Error fetching %s products: %s", section, e)
        db.session.rollback()
        return []


def slug_exists(slug):
    return Product.query.filter_by(slug=slug).first() is not None


def remove_stored_images(urls):
    for url in urls:
        name = storage.name_from_url(url)
        if not name:
            continue
        try:
            storage.delete(name)
        except StorageError as e:
            app.logger.warning("Error deleting image %s: %s", name, e)


@app.errorhandler(404)
def not_found(e):
    return json_error("Not found.", 404)


# ----------------------------
# ADMIN DECORATOR
# ----------------------------
def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not current_user.is_authenticated:
            return json_error("Please log in to continue.", 401)
        if not current_user.is_admin:
            return json_error("Admin access only.", 403)
        return fn(*args, **kwargs)
    return wrapper


# ----------------------------
# STOREFRONT
# ----------------------------
@app.route("/api/sections/<section>/products")
def shop(section):
    require_section(section)

    filters = FilterState.from_query(request.args)
    products = load_section_products(section)
    visible = filter_products(products, filters)

    return jsonify({
        "section": section,
        "products": [p.to_dict() for p in visible],
        "facets": facet_values(products),
        "filters": filters.to_dict(),
        "total": len(visible),
    })


@app.route("/api/sections/<section>/categories")
def section_categories(section):
    require_section(section)
    categories = categories_for(section)
    return jsonify({
        "section": section,
        "categories": categories,
        "sub_types": {c: SUB_TYPES.get(c, []) for c in categories},
        "spec_units": {c: SPEC_UNITS[c] for c in categories if c in SPEC_UNITS},
        "color_categories": [c for c in COLOR_CATEGORIES if c in categories],
    })


@app.route("/api/products/<int:product_id>")
def product_detail(product_id):
    product = db.session.get(Product, product_id)
    if not product or not product.availability:
        abort(404)
    return jsonify(product.to_dict())


@app.route("/api/products/<int:product_id>/order", methods=["POST"])
def buy_now(product_id):
    """
    Build the WhatsApp "Buy Now" link for a product.
    Nothing is stored: the order only exists as the pre-filled message.
    """
    product = db.session.get(Product, product_id)
    if not product or not product.availability:
        abort(404)

    form = OrderForm.from_dict(request_data())
    if not form.is_valid():
        missing = form.missing_fields()
        if missing:
            return json_error("Please fill in all required fields", 400, fields=missing)
        return json_error("Quantity must be at least 1", 400, fields=["quantity"])

    message = build_order_message(product, form)
    return jsonify({
        "ok": True,
        "message": message,
        "whatsapp_url": whatsapp_url(app.config["WHATSAPP_NUMBER"], message),
        "total": product.price * form.quantity,
    })


# ----------------------------
# AUTH
# ----------------------------
@app.route("/auth/signup", methods=["POST"])
def signup():
    data = request_data()
    name = str(data.get("name") or "").strip()
    email = str(data.get("email") or "").strip().lower()
    password = str(data.get("password") or "")

    if not email or not password:
        return json_error("Email and password are required.")

    if User.query.filter_by(email=email).first():
        return json_error("Email already registered. Please log in.", 409)

    user = User(
        name=name or None,
        email=email,
        password_hash=generate_password_hash(password),
        is_admin=False
    )
    db.session.add(user)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error("Error creating account for %s: %s", email, e)
        return json_error("Could not create account. Please try again.", 500)

    login_user(user)
    return jsonify({"ok": True, "user": user.to_dict()}), 201


@app.route("/auth/login", methods=["POST"])
def login():
    data = request_data()
    email = str(data.get("email") or "").strip().lower()
    password = str(data.get("password") or "")

    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, password):
        return json_error("Invalid email or password", 401)

    login_user(user)
    return jsonify({"ok": True, "user": user.to_dict()})


@app.route("/auth/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})


@app.route("/auth/me")
def me():
    if not current_user.is_authenticated:
        return jsonify({"authenticated": False})
    return jsonify({"authenticated": True, "user": current_user.to_dict()})


# ----------------------------
# ADMIN PANEL
# ----------------------------
@app.route("/admin/api/dashboard")
@admin_required
def admin_dashboard():
    counts = {s: Product.query.filter_by(section=s).count() for s in SECTIONS}
    return jsonify({
        "total_products": sum(counts.values()),
        **counts,
        "admin_user": current_user.to_dict(),
    })


@app.route("/admin/api/sections/<section>/products", methods=["GET"])
@admin_required
def admin_manage_products(section):
    require_section(section)

    products = load_section_products(section, available_only=False)
    search = request.args.get("search", "")
    category = request.args.get("category", "")
    listed = search_admin_products(products, search, category)

    return jsonify({
        "section": section,
        "products": [p.to_dict() for p in listed],
        "categories": facet_values(products)["category"],
        "total": len(listed),
    })


@app.route("/admin/api/sections/<section>/products", methods=["POST"])
@admin_required
def admin_add_product(section):
    require_section(section)

    try:
        values = parse_product_form(request_data(), section)
    except ProductValidationError as e:
        return json_error(e.message, 400, fields=e.fields)

    try:
        values["images"] = upload_for_submission(values["images"], storage)
    except ImageUploadError as e:
        app.logger.error("Add %s product aborted: %s", section, e)
        return json_error("Image upload failed. Please try again.", 500)

    product = Product(
        section=section,
        slug=unique_slug(values["title"], slug_exists),
        **values
    )
    db.session.add(product)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        # uploaded images stay in the bucket; the form can be resubmitted
        db.session.rollback()
        app.logger.error("Error adding product: %s", e)
        return json_error("Failed to add product", 500)

    app.logger.info("Product %s (%s) added to %s", product.id, product.slug, section)
    return jsonify({"ok": True, "product": product.to_dict()}), 201


@app.route("/admin/api/products/<int:product_id>", methods=["GET"])
@admin_required
def admin_get_product(product_id):
    product = db.get_or_404(Product, product_id)
    return jsonify(product.to_dict())


@app.route("/admin/api/products/<int:product_id>", methods=["PUT", "PATCH"])
@admin_required
def admin_edit_product(product_id):
    product = db.get_or_404(Product, product_id)

    try:
        values = parse_product_form(
            request_data(), product.section, partial=True,
            current_category=product.category, current_sub_type=product.sub_type,
        )
    except ProductValidationError as e:
        return json_error(e.message, 400, fields=e.fields)

    if "images" in values:
        try:
            values["images"] = upload_for_submission(values["images"], storage)
        except ImageUploadError as e:
            app.logger.error("Edit product %s aborted: %s", product_id, e)
            return json_error("Image upload failed. Please try again.", 500)

    for key, value in values.items():
        setattr(product, key, value)

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error("Error updating product %s: %s", product_id, e)
        return json_error("Update failed", 500)

    return jsonify({"ok": True, "product": product.to_dict()})


@app.route("/admin/api/products/<int:product_id>", methods=["DELETE"])
@admin_required
def admin_delete_product(product_id):
    product = db.get_or_404(Product, product_id)
    urls = list(product.images or [])

    db.session.delete(product)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        app.logger.error("Error deleting product %s: %s", product_id, e)
        return json_error("Failed to delete product", 500)

    remove_stored_images(urls)
    app.logger.info("Product %s deleted", product_id)
    return jsonify({"ok": True})


@app.route("/admin/api/previews", methods=["POST"])
@admin_required
def admin_image_previews():
    """
    Accept phase of the image uploader.

    Multipart fields: images (files), current_count (previews already in
    the form), max_images (optional per-form cap).
    """
    files = request.files.getlist("images")
    current_count = max(0, request.form.get("current_count", default=0, type=int) or 0)
    max_images = request.form.get("max_images", type=int) or app.config["MAX_PREVIEW_IMAGES"]

    previews = accept_files(files, current_count, max_images)

    return jsonify({
        "ok": True,
        "previews": previews,
        "accepted": len(previews),
        "count": current_count + len(previews),
        "max_images": max_images,
    })


# ----------------------------
# PUBLIC IMAGE URLS
# ----------------------------
@app.route("/storage/<bucket>/<name>")
def stored_image(bucket, name):
    if bucket != storage.bucket:
        abort(404)
    return send_from_directory(storage.bucket_dir, name)


# ----------------------------
# INIT
# ----------------------------
def create_tables_and_admin():
    with app.app_context():
        db.create_all()

        admin_email = app.config["ADMIN_EMAIL"].lower()
        admin_password = app.config["ADMIN_PASSWORD"]
        if not admin_password:
            return

        admin = User.query.filter_by(email=admin_email).first()
        if not admin:
            admin = User(
                email=admin_email,
                name="Store Admin",
                password_hash=generate_password_hash(admin_password),
                is_admin=True
            )
            db.session.add(admin)
            db.session.commit()
            app.logger.info("Admin user created with email %s", admin_email)
        elif not admin.is_admin:
            # an account registered through signup is never promoted here
            app.logger.warning("Account %s exists but is not an admin; not promoting", admin_email)


create_tables_and_admin()


if __name__ == "__main__":
    app.run(debug=True)
