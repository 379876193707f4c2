#!/usr/bin/env python3
"""
Smoke test for a running Task Manager API.
Run `python seed.py` and start the server first.
"""

import os
import sys
from datetime import datetime, timedelta

import requests

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000/api")

def check(response, expected_status, label):
    """Print the outcome of one request and return its JSON body"""
    if response.status_code == expected_status:
        print(f"✅ {label} - Status: {response.status_code}")
    else:
        print(f"❌ {label} - Expected: {expected_status}, Got: {response.status_code}")
        print(f"   Response: {response.text}")
        sys.exit(1)
    return response.json() if response.content else None

def login(email, password):
    body = check(
        requests.post(f"{API_BASE_URL}/auth/login", json={"email": email, "password": password}),
        200,
        f"Login {email}",
    )
    return {"Authorization": f"Bearer {body['token']}"}, body["user"]

def run():
    print("🧪 Testing Task Manager API")
    print("=" * 50)

    check(requests.get(f"{API_BASE_URL}/health"), 200, "GET /health")

    admin_headers, _ = login("admin@taskmanager.com", "admin123")
    user_headers, user = login("john@example.com", "user123")

    task = check(
        requests.post(
            f"{API_BASE_URL}/tasks",
            json={
                "title": "Smoke test task",
                "description": "Created by smoke_api.py",
                "dueDate": (datetime.utcnow() + timedelta(days=1)).isoformat(),
                "priority": "Medium",
                "assignedUser": user["id"],
            },
            headers=admin_headers,
        ),
        201,
        "POST /tasks (admin assigns to John)",
    )

    listing = check(requests.get(f"{API_BASE_URL}/tasks", headers=user_headers), 200, "GET /tasks (John)")
    print(f"   John sees {listing['pagination']['totalTasks']} task(s)")

    check(
        requests.patch(
            f"{API_BASE_URL}/tasks/{task['id']}/status",
            json={"status": "Completed"},
            headers=user_headers,
        ),
        200,
        "PATCH /tasks/:id/status (John completes)",
    )
    check(requests.delete(f"{API_BASE_URL}/tasks/{task['id']}", headers=user_headers), 403, "DELETE /tasks/:id (John)")
    check(requests.delete(f"{API_BASE_URL}/tasks/{task['id']}", headers=admin_headers), 200, "DELETE /tasks/:id (admin)")

    print("\n" + "=" * 50)
    print("API smoke test completed!")

if __name__ == "__main__":
    run()
