"""
Persistence and smoke check against a real server.

Starts uvicorn, provisions the demo accounts, restarts the server and
verifies the accounts survived: login, role selector, fleet summary,
check-user and the assignment reset.
"""

import os
import signal
import subprocess
import sys
import time

import httpx

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
FUNCTIONS_PREFIX = "/functions/v1"

SERVER_CMD = [sys.executable, "-m", "uvicorn", "coop_backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"]


def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for _ in range(retries):
        try:
            resp = httpx.get(url)
            if resp.status_code == 200:
                print("✅ Server is up!")
                return True
        except httpx.ConnectError:
            pass
        time.sleep(delay)
    print("❌ Server failed to start.")
    return False


def start_server():
    return subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "False"}
    )


def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def expect(resp, status, label):
    if resp.status_code != status:
        print(f"❌ {label}: {resp.status_code} {resp.text}")
        raise Exception(f"{label} failed")
    print(f"✅ {label}")
    return resp.json()


def run_verification():
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server()
    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")
        
        print("\n--- [Step 2] Provisioning Demo Accounts ---")
        data = expect(httpx.post(f"{BASE_URL}{FUNCTIONS_PREFIX}/create-test-users"), 200, "Provisioning")
        print(data["summary"])
    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)
    
    time.sleep(2)  # port release
    
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc = start_server()
    try:
        if not wait_for_server():
            raise Exception("Server restart failed")
        
        print("\n--- [Step 5] Logging In (Post-Restart) ---")
        token_data = expect(
            httpx.post(
                f"{BASE_URL}{API_PREFIX}/auth/login",
                json={"email": "admin@cooperativa.com", "password": "admin123"}
            ),
            200,
            "Login (accounts persisted)"
        )
        headers = {"Authorization": f"Bearer {token_data['access_token']}"}
        
        print("\n--- [Step 6] Dashboard Reads ---")
        selector = expect(httpx.get(f"{BASE_URL}{API_PREFIX}/session/role-selector", headers=headers), 200, "Role selector")
        print(f"Active role: {selector['active']['label']} ({selector['mode']})")
        fleet = expect(httpx.get(f"{BASE_URL}{API_PREFIX}/fleet/summary", headers=headers), 200, "Fleet summary")
        print(f"Fleet state: {fleet['state']}, cards: {len(fleet['buses'])}")
        
        print("\n--- [Step 7] Functions ---")
        lookup = expect(
            httpx.post(f"{BASE_URL}{FUNCTIONS_PREFIX}/check-user", json={"email": "ADMIN@cooperativa.com"}),
            200,
            "check-user"
        )
        if not lookup["exists"]:
            raise Exception("check-user did not find the admin account")
        reset = expect(httpx.post(f"{BASE_URL}{FUNCTIONS_PREFIX}/reset-bus-assignments"), 200, "reset-bus-assignments")
        print(f"Buses reset: {reset['buses_reset']}")
    finally:
        print("\n--- [Step 8] Stopping Server ---")
        stop_server(proc)


if __name__ == "__main__":
    run_verification()
