"""Post sample UPI payment notifications to a running API for UI testing."""
import random
import uuid
from datetime import datetime, timedelta

import requests

BASE_URL = "http://127.0.0.1:8000"

# (merchant, upi id, category, typical amount)
SAMPLE_MERCHANTS = [
    ("SWIGGY", "swiggy@icici", "Food", 450.00),
    ("ZOMATO", "zomato@hdfcbank", "Food", 320.50),
    ("STARBUCKS COFFEE", "starbucks@ybl", "Food", 180.00),
    ("AMAZON", "amazon@apl", "Shopping", 2499.00),
    ("FLIPKART", "flipkart@axisbank", "Shopping", 1850.00),
    ("UBER", "uber@paytm", "Transport", 85.00),
    ("OLA", "olacabs@okaxis", "Transport", 120.00),
    ("ELECTRICITY BOARD", "bescom@sbi", "Bills", 1250.00),
    ("AIRTEL", "airtel@airtel", "Bills", 850.00),
    ("DMART", "dmart@hdfcbank", "Groceries", 1580.00),
    ("PVR CINEMAS", "pvr@icici", "Entertainment", 450.00),
    ("APOLLO PHARMACY", "apollo@okicici", "Health", 650.00),
]


def build_notification(merchant, upi_id, category, amount, when):
    return {
        "transactionId": f"UPI{when:%Y%m%d}{uuid.uuid4().hex[:10].upper()}",
        "upiId": upi_id,
        "merchantName": merchant,
        "amount": round(amount * random.uniform(0.8, 1.2), 2),
        "category": category,
        "description": f"Payment to {merchant}",
        "transactionDate": when.isoformat(timespec="seconds"),
    }


def main():
    print("=" * 70)
    print("POSTING SAMPLE UPI PAYMENTS")
    print("=" * 70)

    now = datetime.now()
    success_count = 0
    error_count = 0

    for i, (merchant, upi_id, category, amount) in enumerate(SAMPLE_MERCHANTS, 1):
        when = now - timedelta(days=random.randint(0, 30), hours=random.randint(0, 23))
        payload = build_notification(merchant, upi_id, category, amount, when)
        try:
            response = requests.post(f"{BASE_URL}/upi/payment", json=payload, timeout=5)
        except requests.RequestException as e:
            error_count += 1
            print(f"\n{i}. [ERROR] {str(e)[:50]}")
            continue

        if response.status_code == 201:
            data = response.json()
            success_count += 1
            print(f"\n{i}. [OK] {data['category']:15s} | Rs {data['amount']:8.2f} | {data['merchantName']}")
        else:
            error_count += 1
            print(f"\n{i}. [FAIL] {response.status_code} {merchant}: {response.text[:60]}")

    print("\n" + "=" * 70)
    print(f"SUMMARY: {success_count} added, {error_count} failed")
    print("=" * 70)


if __name__ == "__main__":
    main()
