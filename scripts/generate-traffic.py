#!/usr/bin/env python3
"""
Traffic generator for the storefront service.
Simulates shoppers browsing the catalog and checking out, plus a share of
carts that the checkout is expected to reject.
"""

import requests
import random
import time
import threading
from datetime import datetime

API_URL = "http://localhost:8000"

# Share of sessions per shopper type
SHOPPER_WEIGHTS = {
    "browser": 0.5,
    "buyer": 0.35,
    "sloppy_buyer": 0.15,
}

NAMES = ["Nguyen Van A", "Tran Thi B", "Le Van C", "Pham Thi D"]
ADDRESSES = ["12 Ly Thuong Kiet, Ha Noi", "45 Nguyen Hue, Ho Chi Minh City", "8 Bach Dang, Da Nang"]


def log(message):
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[{timestamp}] {message}")


class Shopper:
    def __init__(self, shopper_id):
        self.shopper_id = shopper_id
        self.products = []
        self.payment_methods = ["cod"]

    def fetch_products(self):
        try:
            response = requests.get(f"{API_URL}/api/products", timeout=5)
            if response.status_code == 200:
                self.products = response.json()
                log(f"Shopper {self.shopper_id}: Fetched {len(self.products)} products")
                return True
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Failed to fetch products - {e}")
        return False

    def fetch_payment_methods(self):
        try:
            response = requests.get(f"{API_URL}/api/public-settings", timeout=5)
            if response.status_code == 200:
                methods = response.json()["settings"]["paymentMethods"]
                enabled = []
                if methods["cod"]["enabled"]:
                    enabled.append("cod")
                if methods["bankTransfer"]["enabled"]:
                    enabled.append("bank_transfer")
                if methods["momo"]["enabled"]:
                    enabled.append("momo")
                enabled.extend(m["id"] for m in methods["custom"])
                self.payment_methods = enabled or ["cod"]
                return True
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Failed to fetch payment methods - {e}")
        return False

    def browse_product(self):
        if not self.products:
            self.fetch_products()

        if self.products:
            product = random.choice(self.products)
            try:
                response = requests.get(f"{API_URL}/api/products/{product['id']}", timeout=5)
                if response.status_code == 200:
                    log(f"Shopper {self.shopper_id}: Browsing {product['name']['en']}")
                    return True
            except requests.RequestException as e:
                log(f"Shopper {self.shopper_id}: Failed to browse product - {e}")
        return False

    def build_cart(self, sloppy=False):
        cart = [
            {"id": product["id"], "quantity": random.randint(1, 3)}
            for product in random.sample(self.products, k=min(len(self.products), random.randint(1, 3)))
        ]
        if sloppy:
            mistake = random.choice(["unknown_product", "bad_quantity", "empty"])
            if mistake == "unknown_product":
                cart.append({"id": f"missing-{random.randint(1, 999)}", "quantity": 1})
            elif mistake == "bad_quantity":
                cart[0]["quantity"] = random.choice([0, -5, 150, "abc"])
            else:
                cart = []
        return cart

    def checkout(self, sloppy=False):
        if not self.products:
            self.fetch_products()
        if not self.products:
            return False

        payment_method = random.choice(self.payment_methods)
        if sloppy and random.random() < 0.3:
            payment_method = "momo"

        try:
            response = requests.post(
                f"{API_URL}/api/checkout",
                json={
                    "items": self.build_cart(sloppy),
                    "paymentMethod": payment_method,
                    "customer": {
                        "name": random.choice(NAMES),
                        "address": random.choice(ADDRESSES),
                        "phone": f"090{random.randint(1000000, 9999999)}",
                    },
                },
                timeout=10
            )
            if response.status_code == 200:
                order = response.json()
                log(f"Shopper {self.shopper_id}: Checkout successful - Order {order.get('orderId')}")
                return True
            log(f"Shopper {self.shopper_id}: Checkout rejected - {response.status_code} {response.json().get('error')}")
        except requests.RequestException as e:
            log(f"Shopper {self.shopper_id}: Checkout failed - {e}")
        return False


def shopper_session(shopper_id, duration_seconds, shopper_type):
    """
    Simulate one shopper session.

    shopper_type:
    - "browser": only looks at products
    - "buyer": browses, then places well-formed orders
    - "sloppy_buyer": browses, then submits carts that may be rejected
    """
    shopper = Shopper(shopper_id)
    end_time = time.time() + duration_seconds

    shopper.fetch_products()
    shopper.fetch_payment_methods()
    for _ in range(random.randint(2, 5)):
        shopper.browse_product()
        time.sleep(random.uniform(0.3, 1.0))

    while time.time() < end_time:
        if shopper_type == "browser":
            shopper.browse_product()
        else:
            shopper.checkout(sloppy=(shopper_type == "sloppy_buyer"))
        time.sleep(random.uniform(0.5, 1.5))


def generate_traffic(num_concurrent_shoppers=5, session_duration=60):
    """Generate traffic with multiple concurrent shoppers"""
    log(f"Starting traffic generation with {num_concurrent_shoppers} concurrent shoppers")
    log(f"Session duration: {session_duration} seconds")

    threads = []

    try:
        while True:
            while len([t for t in threads if t.is_alive()]) < num_concurrent_shoppers:
                shopper_id = f"shopper_{random.randint(1000, 9999)}"
                shopper_type = random.choices(
                    list(SHOPPER_WEIGHTS.keys()),
                    weights=list(SHOPPER_WEIGHTS.values())
                )[0]

                thread = threading.Thread(
                    target=shopper_session,
                    args=(shopper_id, session_duration, shopper_type),
                    daemon=True
                )
                thread.start()
                threads.append(thread)

                time.sleep(random.uniform(1, 3))

            threads = [t for t in threads if t.is_alive()]
            time.sleep(5)

    except KeyboardInterrupt:
        log("\nStopping traffic generation...")
        log("Waiting for active sessions to complete...")
        for thread in threads:
            thread.join(timeout=10)
        log("Traffic generation stopped")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate traffic for the storefront service")
    parser.add_argument(
        "--users",
        type=int,
        default=5,
        help="Number of concurrent shoppers (default: 5)"
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=60,
        help="Session duration in seconds (default: 60)"
    )
    parser.add_argument(
        "--url",
        type=str,
        default="http://localhost:8000",
        help="API URL (default: http://localhost:8000)"
    )

    args = parser.parse_args()
    API_URL = args.url

    log("=" * 60)
    log("Storefront Traffic Generator")
    log("=" * 60)
    log(f"API URL: {API_URL}")
    log(f"Concurrent Shoppers: {args.users}")
    log(f"Session Duration: {args.duration}s")
    log("=" * 60)

    generate_traffic(args.users, args.duration)
