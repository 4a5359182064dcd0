import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
VEHICLE_ID = "1"

def wait_for_server(retries=10, delay=2):
    url = f"{BASE_URL}/health"
    print(f"Waiting for server at {url}...")
    for i in range(retries):
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

def start_server(extra_env=None):
    return subprocess.Popen(
        [sys.executable, "-m", "uvicorn", "fleetinspect.app.main:app", "--host", "127.0.0.1", "--port", "8000"],
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, **(extra_env or {})}
    )

def stop_server(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()

def login(username, password):
    resp = httpx.post(f"{BASE_URL}{API_PREFIX}/auth/login", json={"username": username, "password": password})
    if resp.status_code != 200:
        raise Exception(f"Login failed for {username}: {resp.status_code} {resp.text}")
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}

def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = start_server({"DB_ECHO": "True"})  # Enable echo to see SQL

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        # 2. Submit a failing inspection
        print("\n--- [Step 2] Submitting Failed Inspection (Persistence Test) ---")
        headers = login("driver1", "driver123")
        report_payload = {
            "vehicle_id": VEHICLE_ID,
            "inspector_name": "John Driver",
            "date": time.strftime("%Y-%m-%d"),
            "odometer_reading": 45300,
            "checks": {"tires": True, "brakes": False, "lights": True, "fluids": True},
            "defect_description": "Persistence check: brake pad worn",
            "photos": [],
            "videos": [],
            "status": "fail"
        }
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/reports", json=report_payload, headers=headers)

        if resp.status_code == 201:
            report_id = resp.json()["id"]
            print(f"✅ Report Created: {report_id}")
        else:
            print(f"❌ Submission Failed: {resp.status_code} {resp.text}")
            raise Exception("Submission failed")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop_server(proc)

    time.sleep(2) # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = start_server()

    try:
        if not wait_for_server():
            raise Exception("Server restart failed")

        headers = login("admin", "admin123")

        # 4. Report survived
        print("\n--- [Step 5] Fetching Report (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/reports/{report_id}", headers=headers)
        if resp.status_code == 200 and resp.json()["status"] == "fail":
            print("✅ Report Persisted")
        else:
            print(f"❌ Report Missing (Persistence Issue?): {resp.status_code} {resp.text}")
            raise Exception("Report lost after restart")

        # 5. Derived state survived
        print("\n--- [Step 6] Verifying Vehicle Status and Alert ---")
        vehicle = httpx.get(f"{BASE_URL}{API_PREFIX}/vehicles/{VEHICLE_ID}", headers=headers).json()
        alerts = httpx.get(f"{BASE_URL}{API_PREFIX}/alerts", headers=headers).json()["alerts"]
        matching = [a for a in alerts if "Persistence check" in a["message"]]
        if vehicle["status"] == "fail" and vehicle["has_defects"] and matching:
            print("✅ Vehicle status and alert consistent after restart")
        else:
            print(f"❌ Derived state lost: vehicle={vehicle}, alerts={len(matching)}")
            raise Exception("Derived state lost after restart")

        # 6. Clean up: flip the report to pass, which resolves the alert
        resp = httpx.put(
            f"{BASE_URL}{API_PREFIX}/reports/{report_id}/status",
            json={"status": "pass"},
            headers=headers
        )
        print(f"Cleanup status change: {resp.status_code}")

    finally:
        print("\n--- [Step 7] Stopping Server ---")
        stop_server(proc2)

if __name__ == "__main__":
    run_verification()
