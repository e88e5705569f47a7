"""
Shop filtering for a single section.

The storefront loads every available product of a section and narrows it
in memory: OR within a facet, AND across facets, inclusive price bounds.
Facet checkbox values always come from the unfiltered list.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

DEFAULT_PRICE_RANGE = (0.0, 200000.0)

FACETS = ("category", "brand", "material", "color")


def _get(product: Any, key: str) -> Any:
    if isinstance(product, dict):
        return product.get(key)
    return getattr(product, key, None)


def _parse_price(raw: Optional[str], default: float) -> float:
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return float(str(raw).replace(",", "").strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class FilterState:
    category: FrozenSet[str] = field(default_factory=frozenset)
    brand: FrozenSet[str] = field(default_factory=frozenset)
    material: FrozenSet[str] = field(default_factory=frozenset)
    # Carried for the UI but not applied by filter_products.
    color: FrozenSet[str] = field(default_factory=frozenset)
    price_range: Tuple[float, float] = DEFAULT_PRICE_RANGE
    search: str = ""

    @classmethod
    def cleared(cls) -> "FilterState":
        """The "Clear All Filters" state."""
        return cls()

    @classmethod
    def from_query(cls, args) -> "FilterState":
        """
        Build a state from request query args.

        Facets are repeatable (?brand=LG&brand=Sony). min_price / max_price
        fall back to the default bounds when missing or unparsable.
        """
        def values(name):
            raw = args.getlist(name) if hasattr(args, "getlist") else args.get(name) or []
            if isinstance(raw, str):
                raw = [raw]
            return frozenset(v.strip() for v in raw if v and v.strip())

        low = _parse_price(args.get("min_price"), DEFAULT_PRICE_RANGE[0])
        high = _parse_price(args.get("max_price"), DEFAULT_PRICE_RANGE[1])

        return cls(
            category=values("category"),
            brand=values("brand"),
            material=values("material"),
            color=values("color"),
            price_range=(low, high),
            search=(args.get("search") or "").strip(),
        )

    def toggle(self, facet: str, value: str) -> "FilterState":
        """Checkbox behaviour: add the value if absent, remove it if present."""
        if facet not in FACETS:
            raise ValueError(f"Unknown facet: {facet}")
        current = getattr(self, facet)
        updated = current - {value} if value in current else current | {value}
        return replace(self, **{facet: frozenset(updated)})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": sorted(self.category),
            "brand": sorted(self.brand),
            "material": sorted(self.material),
            "color": sorted(self.color),
            "price_range": [self.price_range[0], self.price_range[1]],
            "search": self.search,
        }


def matches(product: Any, filters: FilterState) -> bool:
    if filters.search:
        title = _get(product, "title") or ""
        if filters.search.lower() not in title.lower():
            return False

    if filters.category and _get(product, "category") not in filters.category:
        return False

    # Products without a brand / material only pass when the facet is empty
    brand = _get(product, "brand")
    if filters.brand and (not brand or brand not in filters.brand):
        return False

    material = _get(product, "material")
    if filters.material and (not material or material not in filters.material):
        return False

    low, high = filters.price_range
    price = _get(product, "price")
    if price is None or price < low or price > high:
        return False

    return True


def filter_products(products: Iterable[Any], filters: FilterState) -> List[Any]:
    """Visible subset of products, original order kept."""
    return [p for p in products if matches(p, filters)]


def _distinct(products: Iterable[Any], key: str) -> List[str]:
    seen = []
    for p in products:
        value = _get(p, key)
        if value and value not in seen:
            seen.append(value)
    return seen


def facet_values(products: Iterable[Any]) -> Dict[str, List[str]]:
    """First-seen distinct category / brand / material values."""
    products = list(products)
    return {
        "category": _distinct(products, "category"),
        "brand": _distinct(products, "brand"),
        "material": _distinct(products, "material"),
    }


def search_admin_products(products: Iterable[Any], search: str = "", category: str = "") -> List[Any]:
    """Manage-products list: search on title or brand, single category select."""
    needle = (search or "").strip().lower()
    result = []
    for p in products:
        title = (_get(p, "title") or "").lower()
        brand = (_get(p, "brand") or "").lower()
        if needle and needle not in title and needle not in brand:
            continue
        if category and _get(p, "category") != category:
            continue
        result.append(p)
    return result
