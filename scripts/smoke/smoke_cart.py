"""Manual cart smoke run: log in, add the first product, read and clear the cart.

Usage:
    BASE_URL=... SMOKE_EMAIL=... SMOKE_PASSWORD=... python scripts/smoke/smoke_cart.py
"""

import asyncio
import os
import sys

import httpx

BASE_URL = os.environ.get("BASE_URL", "http://localhost:8000")


async def main() -> int:
    email = os.environ.get("SMOKE_EMAIL")
    password = os.environ.get("SMOKE_PASSWORD")
    if not email or not password:
        print("❌ Set SMOKE_EMAIL and SMOKE_PASSWORD")
        return 1

    async with httpx.AsyncClient(base_url=BASE_URL, timeout=30.0) as client:
        login = await client.post("/api/auth/login", json={"email": email, "password": password})
        print(f"login: {login.status_code}")
        if login.status_code != 200:
            print(login.text)
            return 1

        user = login.json()["data"]
        headers = {"Authorization": f"Bearer {user['accessToken']}"}

        products = (await client.get("/api/products", params={"limit": 1})).json()["data"]
        if not products:
            print("❌ No products to add; run scripts/seed/products.py first")
            return 1

        added = await client.post(
            "/api/cart",
            json={"userId": user["id"], "productId": products[0]["id"], "quantity": 2},
            headers=headers,
        )
        print(f"add: {added.status_code} {added.text[:300]}")

        cart = await client.get("/api/cart", params={"userId": user["id"]}, headers=headers)
        print(f"cart: {cart.status_code} totals={cart.json().get('data', {}).get('totals')}")

        cleared = await client.post("/api/cart/clear", json={"userId": user["id"]}, headers=headers)
        print(f"clear: {cleared.status_code} {cleared.json()}")

        again = await client.post("/api/cart/clear", json={"userId": user["id"]}, headers=headers)
        print(f"clear again: {again.status_code} clearedItems={again.json().get('clearedItems')}")

    print("✅ Cart smoke run finished")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
