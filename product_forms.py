"""
Admin add/edit product form handling.

parse_product_form() turns a submitted form (JSON body or form fields) into
Product column values. Nothing here touches storage or the database, so a
rejected form never causes an upload or a write.
"""

import re
from typing import Any, Callable, Dict, List, Optional

from product_catalogs import COLOR_CATEGORIES, SECTIONS, categories_for, sub_types_for

TEXT_FIELDS = ("description", "sub_type", "brand", "model_no", "material", "dimensions")
ELECTRONICS_ONLY = ("model_no", "spec_value", "spec_unit")
FURNITURE_ONLY = ("material", "dimensions")


class ProductValidationError(Exception):
    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.fields = fields or {}


def slugify(text: str) -> str:
    text = (text or "").strip().lower()
    text = re.sub(r"[^a-z0-9]+", "-", text).strip("-")
    return text


def unique_slug(base: str, exists: Callable[[str], bool]) -> str:
    """
    Slug for a new product. If taken, append -2, -3, ...
    """
    base = slugify(base) or "product"
    candidate = base
    i = 2
    while exists(candidate):
        candidate = f"{base}-{i}"
        i += 1
    return candidate


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _number(value: Any, field: str, errors: Dict[str, str]) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, bool):
        errors[field] = "Must be a number"
        return None
    try:
        return float(str(value).replace(",", "").strip())
    except ValueError:
        errors[field] = "Must be a number"
        return None


def _bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _colors(value: Any) -> List[str]:
    if isinstance(value, (list, tuple)):
        parts = value
    else:
        parts = str(value or "").split(",")
    return [c.strip() for c in parts if c and str(c).strip()]


def _images(value: Any, errors: Dict[str, str]) -> List[str]:
    if not isinstance(value, (list, tuple)):
        errors["images"] = "Images must be a list"
        return []
    if not all(isinstance(v, str) and v.strip() for v in value):
        errors["images"] = "Images must be non-empty strings"
        return []
    if len(value) < 1:
        errors["images"] = "Please upload at least 1 product image"
    return [v.strip() for v in value]


def parse_product_form(data: Dict[str, Any], section: str, partial: bool = False,
                       current_category: Optional[str] = None,
                       current_sub_type: Optional[str] = None) -> Dict[str, Any]:
    """
    Validate a product form for a section.

    partial=True is the edit form: only fields present in data are
    returned (and validated); current_category is the stored category used
    for sub_type / colour checks when the edit leaves category out.
    When an edit changes category, a stored current_sub_type or colour the
    new category does not allow is cleared.
    Raises ProductValidationError listing every bad field at once.
    """
    if section not in SECTIONS:
        raise ProductValidationError(f"Unknown section: {section}")

    errors: Dict[str, str] = {}
    values: Dict[str, Any] = {}

    def provided(key):
        return not partial or key in data

    if provided("title"):
        title = _clean(data.get("title"))
        if not title:
            errors["title"] = "Product name is required"
        values["title"] = title

    if provided("category"):
        category = _clean(data.get("category"))
        if not category:
            errors["category"] = "Category is required"
        elif category not in categories_for(section):
            errors["category"] = f"Unknown {section} category: {category}"
        values["category"] = category

    if provided("price"):
        price = _number(data.get("price"), "price", errors)
        if price is None and "price" not in errors:
            errors["price"] = "Price is required"
        elif price is not None and price < 0:
            errors["price"] = "Price cannot be negative"
        values["price"] = price

    for key in TEXT_FIELDS:
        if key in data:
            values[key] = _clean(data.get(key))

    if "sub_type" in values and values["sub_type"]:
        category = values.get("category") or current_category
        allowed = sub_types_for(category) if category else []
        if allowed and values["sub_type"] not in allowed:
            errors["sub_type"] = f"Unknown sub type for {category}: {values['sub_type']}"
    elif "category" in values and "sub_type" not in data and current_sub_type:
        if current_sub_type not in sub_types_for(values["category"]):
            values["sub_type"] = None

    if section == "electronics":
        if "spec_value" in data:
            values["spec_value"] = _number(data.get("spec_value"), "spec_value", errors)
        if "spec_unit" in data:
            values["spec_unit"] = _clean(data.get("spec_unit"))

        if "colors" in data or "color" in data:
            colors = _colors(data.get("colors", data.get("color")))
            category = values.get("category") or current_category
            values["color"] = ", ".join(colors) if colors and category in COLOR_CATEGORIES else None
        elif "category" in values and values["category"] not in COLOR_CATEGORIES:
            values["color"] = None

        for key in FURNITURE_ONLY:
            if key in values:
                values[key] = None
    else:
        if "color" in data:
            values["color"] = _clean(data.get("color"))
        for key in ELECTRONICS_ONLY:
            if key in data or not partial:
                values[key] = None

    if "availability" in data:
        values["availability"] = _bool(data.get("availability"))
    elif not partial:
        values["availability"] = True

    if provided("images"):
        values["images"] = _images(data.get("images", []), errors)

    if errors:
        raise ProductValidationError("Please fix the highlighted fields", errors)

    return values
