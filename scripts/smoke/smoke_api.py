"""Manual smoke run against a deployed API.

Usage:
    BASE_URL=https://shop.example.com SMOKE_EMAIL=... SMOKE_PASSWORD=... \
        python scripts/smoke/smoke_api.py
"""

import asyncio
import json
import os

import httpx

BASE_URL = os.environ.get("BASE_URL", "http://localhost:8000")


def show(label: str, response: httpx.Response) -> None:
    print(f"\n{label}: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2, ensure_ascii=False)[:1500])
    except ValueError:
        print(response.text[:500])


async def main():
    async with httpx.AsyncClient(base_url=BASE_URL, timeout=30.0) as client:
        show("GET /health", await client.get("/health"))
        show("GET /api/categories", await client.get("/api/categories"))
        show("GET /api/products?limit=3", await client.get("/api/products", params={"limit": 3}))
        show(
            "GET /api/products/search?q=filter",
            await client.get("/api/products/search", params={"q": "filter"}),
        )

        # Wrong password must be a 401, never a 500
        show(
            "POST /api/auth/login (wrong password)",
            await client.post(
                "/api/auth/login",
                json={"email": "nobody@example.com", "password": "wrong-password"},
            ),
        )

        email = os.environ.get("SMOKE_EMAIL")
        password = os.environ.get("SMOKE_PASSWORD")
        if email and password:
            login = await client.post(
                "/api/auth/login", json={"email": email, "password": password}
            )
            show("POST /api/auth/login", login)
            if login.status_code == 200:
                token = login.json()["data"]["accessToken"]
                headers = {"Authorization": f"Bearer {token}"}
                show("GET /api/admin/orders", await client.get("/api/admin/orders", headers=headers))
                show("GET /api/import-export", await client.get("/api/import-export", headers=headers))


if __name__ == "__main__":
    asyncio.run(main())
