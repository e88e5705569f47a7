# seed_products_from_product_catalogs.py
# Run: python3 seed_products_from_product_catalogs.py
#
# Reads product_catalogs.py sample lists and inserts them into the Product table
# - validates every item with the same form rules the admin panel uses
# - slug generated from the title (unique, -2/-3 suffix on clashes)
# - safe to re-run: skips items whose base slug already exists

from typing import Any, Dict, List, Tuple

from app import app, db, Product, slug_exists
from product_catalogs import SEED_CATALOGS
from product_forms import ProductValidationError, parse_product_form, unique_slug, slugify

DRY_RUN = False          # True = just print what would be inserted
SKIP_IF_EXISTS = True    # True = do not insert a second copy of an item


def _all_items() -> List[Tuple[str, Dict[str, Any]]]:
    return [
        (catalog["section"], item)
        for catalog in SEED_CATALOGS
        for item in catalog["products"]
    ]


def main():
    with app.app_context():
        created = 0
        skipped = 0
        invalid = 0

        for section, item in _all_items():
            try:
                values = parse_product_form(item, section)
            except ProductValidationError as e:
                invalid += 1
                print(f"⚠️ Invalid {section} item {item.get('title')!r}: {e.fields}")
                continue

            if SKIP_IF_EXISTS and slug_exists(slugify(values["title"])):
                skipped += 1
                continue

            p = Product(
                section=section,
                slug=unique_slug(values["title"], slug_exists),
                **values
            )

            if DRY_RUN:
                print(
                    f"[DRY] {p.slug} | {p.title} | {section}/{p.category} | Rs {p.price} | "
                    f"images={len(p.images)}"
                )
            else:
                db.session.add(p)
                db.session.flush()
                created += 1

        if not DRY_RUN:
            db.session.commit()

        print("✅ Seeding finished")
        print(f"Inserted: {created}")
        print(f"Skipped: {skipped}")
        print(f"Invalid: {invalid}")


if __name__ == "__main__":
    main()
