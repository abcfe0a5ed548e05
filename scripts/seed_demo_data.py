"""Seed demo products, parties and balance summaries in Firestore."""

import argparse
import asyncio
import logging
import os
import sys

# Add the project root to the path so we can import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from veg_ledger.config import (
    CUSTOMERS_COLLECTION,
    PRODUCTS_COLLECTION,
    SUPPLIERS_COLLECTION,
    TEST_COLLECTION_PREFIX,
    WALK_IN_CODE,
    WALK_IN_NAME,
)
from veg_ledger.models.schemas import Customer, PartyType, PaymentDetail, Product, Supplier
from veg_ledger.repositories import FirestoreDAO, PartyRepository, WriteOp

logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

logger = logging.getLogger(__name__)

PRODUCT_DATA = [
    ("VEG001", "Tomato", 30, 28, 25),
    ("VEG002", "Onion", 40, 38, 35),
    ("VEG003", "Potato", 25, 23, 20),
    ("VEG004", "Carrot", 50, 48, 45),
    ("VEG005", "Cabbage", 20, 18, 15),
]

# (id, name, contact, address, total, paid)
SUPPLIER_DATA = [
    ("SUP001", "Hari", "9876543210", "Koyambedu, Chennai", 1000, 50330),
    ("SUP002", "Asif", "9876543211", "Ooty, Tamil Nadu", 30000, 10386),
    ("SUP003", "Ram", "9876543212", "Tiruvallur, Tamil Nadu", 10000, 4559),
    ("SUP004", "Vijay", "9876543213", "Madurai, Tamil Nadu", 5000, 3365),
    ("SUP005", "Ajith", "9876543214", "Coimbatore, Tamil Nadu", 1000, 922),
    ("SUP006", "Surya", "9876543215", "Salem, Tamil Nadu", 500, 408),
    ("SUP007", "Ajith kumar", "9876543216", "Erode, Tamil Nadu", 2000, 685),
    ("SUP008", "Vishnu", "9876543217", "Tiruppur, Tamil Nadu", 40000, 5570),
    ("SUP009", "Rajini", "9876543218", "Vellore, Tamil Nadu", 5000, 1905),
    ("SUP010", "Ktms", "9876543219", "Thanjavur, Tamil Nadu", 1000, 335),
    ("SUP011", "Reddy", "9876543220", "Dindigul, Tamil Nadu", 1000, 460),
    ("SUP012", "Kv", "9876543221", "Cuddalore, Tamil Nadu", 500, 280),
    ("SUP013", "Sst", "9876543222", "Kanchipuram, Tamil Nadu", 1000, 164),
    ("SUP014", "Ss", "9876543223", "Tirunelveli, Tamil Nadu", 5000, 1650),
]

CUSTOMER_DATA = [
    ("CUS001", "Venkatesh", "9123456780", "T. Nagar, Chennai", 1250, 1250),
    ("CUS002", "Suresh Kumar", "9123456781", "Anna Nagar, Chennai", 0, 0),
    ("CUS003", "Anbu Retail", "9123456782", "Velachery, Chennai", 8400, 5000),
    ("CUS004", "Kannan Stores", "9123456783", "Adyar, Chennai", 550, 550),
    ("CUS000", WALK_IN_NAME, "", "", 0, 0),
]


def party_ops(repo: PartyRepository, party_type: PartyType, cls, rows):
    """Party record plus a balance summary that already satisfies due = total - paid."""
    ops = []
    for party_id, name, contact, address, total, paid in rows:
        code = WALK_IN_CODE if name == WALK_IN_NAME else ""
        party = cls(id=party_id, name=name, contact=contact, address=address, code=code)
        ops.append(repo.build_set_party_op(party_type, party))
        ops.append(repo.build_set_payment_op(party_type, PaymentDetail(
            id=party_id,
            party_id=party_id,
            party_name=name,
            total_amount=float(total),
            paid_amount=float(paid),
            due_amount=0.0 if code == WALK_IN_CODE else float(total - paid),
        )))
    return ops


async def seed_demo_data(is_test: bool = True):
    """
    Seed demo data in Firestore.

    Collections that already hold documents are left alone.
    """
    dao = FirestoreDAO(collection_prefix=TEST_COLLECTION_PREFIX if is_test else None)
    repo = PartyRepository(dao)

    ops = []
    if await dao.query_documents(PRODUCTS_COLLECTION, limit=1):
        logger.info("Products already exist in the database. Skipping products.")
    else:
        ops.extend(
            WriteOp.set(PRODUCTS_COLLECTION, f"P{index + 1:03d}", Product(
                id=f"P{index + 1:03d}", item_code=code, name=name, rate1=rate1, rate2=rate2, rate3=rate3,
            ))
            for index, (code, name, rate1, rate2, rate3) in enumerate(PRODUCT_DATA)
        )

    if await dao.query_documents(SUPPLIERS_COLLECTION, limit=1):
        logger.info("Suppliers already exist in the database. Skipping suppliers.")
    else:
        ops.extend(party_ops(repo, PartyType.SUPPLIER, Supplier, SUPPLIER_DATA))

    if await dao.query_documents(CUSTOMERS_COLLECTION, limit=1):
        logger.info("Customers already exist in the database. Skipping customers.")
    else:
        ops.extend(party_ops(repo, PartyType.CUSTOMER, Customer, CUSTOMER_DATA))

    if not ops:
        logger.info("Nothing to seed")
        return

    await dao.commit_batch(ops)
    logger.info(f"Demo data seeding complete: {len(ops)} documents written")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo ledger data")
    parser.add_argument("--prod", action="store_true", help="Write to production collections")
    args = parser.parse_args()
    asyncio.run(seed_demo_data(is_test=not args.prod))
