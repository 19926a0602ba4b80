#!/usr/bin/env python3
"""
seed_data.py

Generates fake inventory data to CSVs under a local folder (default: sample_data)
for the CSV backend.

Entities:
- products, customers, staff, company_access, and empty orders / order_items

Run:
  python -m stockroom.seed_data --products 40 --customers 25
"""

from __future__ import annotations
import argparse
import csv
import os
import random
import string
import sys
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from stockroom.config import get_config
from stockroom.data.backends.csv_backend import TABLE_COLUMNS

# -----------------------------
# Config & helper structures
# -----------------------------

CATEGORY_TYPES = {
    "Supplements": ["Whey", "Creatine", "BCAA", "Pre-Workout"],
    "Apparel": ["Shorts", "Tank", "Hoodie", "Leggings"],
    "Equipment": ["Kettlebell", "Resistance Band", "Jump Rope", "Yoga Mat"],
    "Accessories": ["Shaker", "Gym Bag", "Lifting Straps", "Towel"],
}

FIRST_NAMES = ["Alex", "Sam", "Jordan", "Taylor", "Morgan", "Casey", "Riley", "Jamie", "Avery", "Quinn"]
LAST_NAMES = ["Lee", "Patel", "Garcia", "Nguyen", "Smith", "Kowalski", "Okafor", "Rossi", "Berg", "Silva"]


# -----------------------------
# Utility functions
# -----------------------------

def ensure_dir(path: str) -> None:
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)

def rand_sku() -> str:
    return "".join(random.choices(string.ascii_uppercase + string.digits, k=8))

def price_round(p: float) -> float:
    return round(max(p, 0.01), 2)

def seeded_uuid() -> str:
    return str(uuid.UUID(int=random.getrandbits(128), version=4))


# -----------------------------
# Core generators
# -----------------------------

def gen_products(n: int) -> List[Dict]:
    products = []
    now = datetime.now(timezone.utc)
    for _ in range(n):
        category_type = random.choice(list(CATEGORY_TYPES.keys()))
        kind = random.choice(CATEGORY_TYPES[category_type])
        purchased = price_round(random.uniform(3.0, 40.0))
        retail = price_round(purchased * random.uniform(1.4, 2.2))
        threshold = random.choice([3, 5, 5, 10])
        # Skew toward healthy stock with a tail of low / empty shelves
        stock = random.choices(
            [0, random.randint(1, threshold), random.randint(threshold + 1, 200)],
            weights=[0.1, 0.2, 0.7],
        )[0]
        created = now - timedelta(days=random.randint(1, 365))
        products.append({
            "id": seeded_uuid(),
            "name": f"{kind} {random.randint(10, 999)}",
            "sku": rand_sku(),
            "category": "Default",
            "category_type": category_type,
            "description": f"{category_type} - {kind}",
            "price": retail,
            "wholesale_price": price_round(purchased * 1.2),
            "retail_price": retail,
            "trainer_price": price_round(retail * 0.85),
            "purchased_price": purchased,
            "stock": stock,
            "threshold": threshold,
            "image_url": "",
            "created_at": created.isoformat(timespec="seconds"),
            "last_updated": created.isoformat(timespec="seconds"),
        })
    return products

def gen_customers(n: int) -> List[Dict]:
    customers = []
    for _ in range(n):
        first, last = random.choice(FIRST_NAMES), random.choice(LAST_NAMES)
        customers.append({
            "id": seeded_uuid(),
            "name": f"{first} {last}",
            "email": f"{first}.{last}{random.randint(1, 99)}@example.com".lower(),
            "total_orders": 0,
            "total_spent": 0,
        })
    return customers

def gen_staff_access(owner_id: str) -> tuple[List[Dict], List[Dict]]:
    staff = [{"id": seeded_uuid(), "staff_email": "staff@example.com"}]
    access = [{
        "id": seeded_uuid(),
        "business_name": "Demo Fitness Supply",
        "owner_id": owner_id,
        "staff_id": staff[0]["id"],
        "created_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
    }]
    return staff, access


# -----------------------------
# CSV writer
# -----------------------------

def write_csv(path: str, rows: List[Dict], headers: List[str]) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=headers)
        w.writeheader()
        for r in rows:
            w.writerow(r)


# -----------------------------
# Main
# -----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    config = get_config()

    parser = argparse.ArgumentParser(description="Generate fake inventory data to CSVs.")
    parser.add_argument("--products", type=int, default=config.default_seed_products)
    parser.add_argument("--customers", type=int, default=config.default_seed_customers)
    parser.add_argument("--output-dir", type=str, default=config.data_dir)
    parser.add_argument("--seed", type=int, default=config.default_seed_value)
    parser.add_argument("--no-overwrite", action="store_true", help="Fail if CSVs already exist.")
    args = parser.parse_args(argv)

    random.seed(args.seed)

    outdir = args.output_dir
    ensure_dir(outdir)

    files = {name: os.path.join(outdir, f"{name}.csv") for name in TABLE_COLUMNS}
    if args.no_overwrite:
        for p in files.values():
            if os.path.exists(p):
                print(f"Refusing to overwrite existing file: {p}", file=sys.stderr)
                return 2

    products = gen_products(args.products)
    customers = gen_customers(args.customers)
    staff, access = gen_staff_access(owner_id=seeded_uuid())

    rows = {
        "products": products,
        "customers": customers,
        "staff": staff,
        "company_access": access,
        "orders": [],
        "order_items": [],
    }
    for name, path in files.items():
        write_csv(path, rows[name], TABLE_COLUMNS[name])

    # simple summary
    print(f"Generated data in {outdir}")
    print(f" products: {len(products)} | customers: {len(customers)} | staff: {len(staff)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
