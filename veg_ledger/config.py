"""
Configuration constants for the vegetable wholesale ledger.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Collection prefixes
TEST_COLLECTION_PREFIX = "dev_"
PROD_COLLECTION_PREFIX = ""
COLLECTION_PREFIX = os.environ.get("COLLECTION_PREFIX", PROD_COLLECTION_PREFIX)

# Collection names
SUPPLIERS_COLLECTION = "suppliers"
CUSTOMERS_COLLECTION = "customers"
SUPPLIER_PAYMENTS_COLLECTION = "supplier_payments"
CUSTOMER_PAYMENTS_COLLECTION = "customer_payments"
TRANSACTIONS_COLLECTION = "transactions"
PRODUCTS_COLLECTION = "products"
DAILY_SUMMARIES_COLLECTION = "daily_summaries"
BILL_COUNTERS_COLLECTION = "bill_counters"  # One counter document per calendar day

# Walk-in customer: anonymous cash sales, balance always zero
WALK_IN_CODE = "000"
WALK_IN_NAME = "Walk-in Customer"

# Payment methods
CREDIT_PAYMENT_METHOD = "Credit"
DEFAULT_PAYMENT_METHOD = "Cash"
PAYMENT_METHODS = ["Cash", "GPay", "NEFT", "UPI", "UPI/Digital", "Credit"]

# Item labels for synthetic payment entries
SALE_PAYMENT_ITEM = "Partial/Full Payment during Sale"
PURCHASE_PAYMENT_ITEM = "Partial/Full Payment during Purchase"
STANDALONE_PAYMENT_ITEM = "Payment Received/Given"

# Date formats
STORE_DATE_FORMAT = "%Y-%m-%d"  # Calendar days as stored in Firestore
EXPORT_DATE_FORMAT = "%d/%m/%Y"  # Calendar days in CSV exports
