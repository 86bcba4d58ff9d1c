"""
Manual CORS/smoke check against a running backend.

    BACKEND_URL=https://your-backend.example.com FRONTEND_ORIGIN=https://your-map.example.com \
        python check_cors.py
"""

import os
import httpx
import asyncio

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")
FRONTEND_ORIGIN = os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")


async def check_cors():
    async with httpx.AsyncClient() as client:
        # Preflight for the map's data fetch
        print("Testing CORS preflight...")
        try:
            response = await client.options(
                f"{BACKEND_URL}/api/data",
                headers={
                    "Origin": FRONTEND_ORIGIN,
                    "Access-Control-Request-Method": "GET",
                    "Access-Control-Request-Headers": "content-type"
                }
            )
            print(f"OPTIONS Status: {response.status_code}")
            print(f"Headers: {dict(response.headers)}")
        except httpx.HTTPError as e:
            print(f"OPTIONS Error: {e}")

        print("\nTesting health...")
        try:
            response = await client.get(f"{BACKEND_URL}/health", headers={"Origin": FRONTEND_ORIGIN})
            print(f"GET /health Status: {response.status_code}")
            print(f"Body: {response.text}")
        except httpx.HTTPError as e:
            print(f"GET /health Error: {e}")

        print("\nTesting combined read...")
        try:
            response = await client.get(f"{BACKEND_URL}/api/data", headers={"Origin": FRONTEND_ORIGIN})
            print(f"GET /api/data Status: {response.status_code}")
            print("CORS Headers:")
            for k, v in response.headers.items():
                if "access-control" in k.lower():
                    print(f"  {k}: {v}")
            if response.status_code == 200:
                body = response.json()
                for name in ("sensorData", "citizenReports", "preReports"):
                    print(f"  {name}: {len(body.get(name, []))} records")
            else:
                print(f"Body: {response.text}")
        except httpx.HTTPError as e:
            print(f"GET /api/data Error: {e}")


if __name__ == "__main__":
    asyncio.run(check_cors())
