"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags overlap      # Test double booking of one room
  locust -f locustfile.py --tags throughput   # Test room bookings cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
from datetime import date, timedelta
from locust import HttpUser, task, between, tag, events

ROOM_IDS = [1, 2, 3, 4, 5]

# Every OverlapUser asks for the same nights in the same room
CONTESTED_ROOM_ID = 5
CONTESTED_CHECK_IN = date.today() + timedelta(days=200)
CONTESTED_CHECK_OUT = CONTESTED_CHECK_IN + timedelta(days=3)


def random_guest():
    n = random.randint(10000, 99999)
    return f"Load Guest {n}", f"load_{n}@test.com"


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Contested stay: room {CONTESTED_ROOM_ID}, {CONTESTED_CHECK_IN}..{CONTESTED_CHECK_OUT}")
    print("=" * 60)


class OverlapUser(HttpUser):
    """
    TEST 1: Overlap - 100 users -> 1 room, same nights

    Run: locust -f locustfile.py --tags overlap -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM bookings WHERE room_id = 5 AND check_in < '<out>' AND check_out > '<in>';
    Should be exactly 1
    """
    wait_time = between(0, 0.1)

    @tag("overlap")
    @task
    def book_contested_room(self):
        name, email = random_guest()
        with self.client.post("/api/v1/bookings/",
            json={
                "room_id": CONTESTED_ROOM_ID,
                "guest_name": name,
                "guest_email": email,
                "check_in": CONTESTED_CHECK_IN.isoformat(),
                "check_out": CONTESTED_CHECK_OUT.isoformat(),
            },
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: already taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def room_bookings_cached(self):
        room_id = random.choice(ROOM_IDS)
        self.client.get(f"/api/v1/rooms/{room_id}/bookings",
            name="/api/v1/rooms/{id}/bookings [cached]")

    @tag("throughput", "read")
    @task(3)
    def availability(self):
        check_in = date.today() + timedelta(days=random.randint(1, 365))
        self.client.get(f"/api/v1/rooms/{random.choice(ROOM_IDS)}/availability",
            params={"check_in": check_in.isoformat(),
                    "check_out": (check_in + timedelta(days=2)).isoformat()},
            name="/api/v1/rooms/{id}/availability")

    @tag("throughput", "write")
    @task(1)
    def book_random_stay(self):
        """Spread writes so that cache invalidation happens under load."""
        name, email = random_guest()
        check_in = date.today() + timedelta(days=random.randint(1, 3650))
        with self.client.post("/api/v1/bookings/",
            json={
                "room_id": random.choice(ROOM_IDS),
                "guest_name": name,
                "guest_email": email,
                "check_in": check_in.isoformat(),
                "check_out": (check_in + timedelta(days=1)).isoformat(),
            },
            catch_response=True
        ) as resp:
            if resp.status_code in [201, 409]:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash; every request gets a 4xx with a message.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, payload, codes):
        with self.client.post("/api/v1/bookings/", json=payload, catch_response=True) as resp:
            if resp.status_code in codes and resp.json().get("detail"):
                resp.success()
            else:
                resp.failure(f"Expected {codes}, got {resp.status_code}")

    def _valid(self, **overrides):
        name, email = random_guest()
        check_in = date.today() + timedelta(days=30)
        payload = {
            "room_id": 1,
            "guest_name": name,
            "guest_email": email,
            "check_in": check_in.isoformat(),
            "check_out": (check_in + timedelta(days=2)).isoformat(),
        }
        payload.update(overrides)
        return payload

    @tag("edge")
    @task
    def invalid_room_id(self):
        self._expect(self._valid(room_id=999999), [404])

    @tag("edge")
    @task
    def malformed_date(self):
        self._expect(self._valid(check_in="31/12/2030"), [400])

    @tag("edge")
    @task
    def past_check_in(self):
        self._expect(self._valid(check_in="2000-01-01", check_out="2000-01-05"), [400])

    @tag("edge")
    @task
    def reversed_dates(self):
        today = date.today()
        self._expect(self._valid(
            check_in=(today + timedelta(days=10)).isoformat(),
            check_out=(today + timedelta(days=5)).isoformat(),
        ), [400])

    @tag("edge")
    @task
    def blank_guest(self):
        self._expect(self._valid(guest_name="   "), [400])
