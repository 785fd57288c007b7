from prometheus_client import Counter

RENT_BILLS_CREATED = Counter(
    "dormhive_rent_bills_created_total",
    "Rent ledger rows inserted by the bill generator",
)
RENT_BILL_DUPLICATES = Counter(
    "dormhive_rent_bill_duplicates_total",
    "Rent ledger inserts absorbed by the uniqueness constraint",
)
TENANCIES_SKIPPED = Counter(
    "dormhive_tenancies_skipped_total",
    "Tenancies skipped during bill generation",
    ["reason"],
)
