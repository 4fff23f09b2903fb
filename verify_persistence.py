import time
import subprocess
import httpx
import sys
import os
import signal

BASE_URL = "http://127.0.0.1:8000"
API_PREFIX = "/v1"
SERVER_CMD = [sys.executable, "-m", "uvicorn", "shuttle_backend.app.main:app", "--host", "127.0.0.1", "--port", "8000"]

SERVICE_DATE = "2030-01-15"
BOOKING = {
    "guestName": "Persistence Check",
    "guestPhone": "0900.000.001",
    "routeId": "TB-BP",
    "specificLocation": "Cổng chào",
    "date": SERVICE_DATE,
    "timeSlot": "06:30",
    "paxCount": 2,
}


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


def stop(proc):
    proc.send_signal(signal.SIGTERM)
    proc.wait()


def run_verification():
    # 1. Start Server (First Run)
    print("\n--- [Step 1] Starting Server (Initial) ---")
    proc = subprocess.Popen(
        SERVER_CMD,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        env={**os.environ, "DB_ECHO": "True"}  # Enable echo to see SQL
    )

    try:
        if not wait_for_server():
            server_logs = proc.communicate(timeout=2)
            print("Server Stdout:", server_logs[0].decode())
            print("Server Stderr:", server_logs[1].decode())
            raise Exception("Server start failed")

        # 2. Book a seat
        print("\n--- [Step 2] Creating Booking (Persistence Test) ---")
        resp = httpx.post(f"{BASE_URL}{API_PREFIX}/bookings", json=BOOKING)
        if resp.status_code != 201:
            print(f"❌ Booking Failed: {resp.status_code} {resp.text}")
            raise Exception("Booking failed")
        booking_id = resp.json()["id"]
        print(f"✅ Booking {booking_id} created")

    finally:
        print("\n--- [Step 3] Stopping Server ---")
        stop(proc)

    time.sleep(2)  # Wait for port release

    # 3. Restart Server
    print("\n--- [Step 4] Restarting Server (Verification) ---")
    proc2 = subprocess.Popen(SERVER_CMD, stdout=subprocess.PIPE, stderr=subprocess.PIPE)

    try:
        if not wait_for_server():
            raise Exception("Server restart failed")

        print("\n--- [Step 5] Reading Booking (Post-Restart) ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/bookings/{booking_id}")
        if resp.status_code != 200:
            print(f"❌ Booking Lost (Persistence Issue?): {resp.status_code} {resp.text}")
            raise Exception("Booking missing after restart")
        print("✅ Booking Persisted")

        print("\n--- [Step 6] Checking Trip Board ---")
        resp = httpx.get(f"{BASE_URL}{API_PREFIX}/trips", params={"date": SERVICE_DATE})
        trips = resp.json()["trips"]
        manifest = [p["id"] for t in trips if t["time"] == "06:30" for p in t["passengers"]]
        if booking_id in manifest:
            print(f"✅ Booking is on the 06:30 departure ({len(manifest)} bookings)")
        else:
            print(f"❌ Booking missing from trip board: {trips}")

    finally:
        print("\n--- [Step 7] Stopping Server ---")
        stop(proc2)


if __name__ == "__main__":
    run_verification()
