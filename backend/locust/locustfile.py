"""
Locust load scenarios for the talent marketplace.

Run scenarios:
  locust -f locustfile.py --tags contention  # Many users, one small slot
  locust -f locustfile.py --tags throughput  # Cached talent listing
  locust -f locustfile.py --tags edge        # Bad input
  locust -f locustfile.py                    # Everything
"""

import random
import string
from datetime import date, timedelta

from locust import HttpUser, task, between, tag, events

PASSWORD = "loadtest123"
CONTENTION_SEATS = 10

# Shared state
TALENT_IDS = []
CONTENTION = {"talent_id": None, "slot_id": None}


def random_email():
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=10))
    return f"load_{suffix}@test.com"


def slot_payload(days_ahead=7, start="10:00", end="12:00"):
    return {
        "date": (date.today() + timedelta(days=days_ahead)).isoformat(),
        "start_time": start,
        "end_time": end,
    }


def talent_payload(title, max_participants, slots=None):
    return {
        "title": title,
        "description": "Load test class",
        "category": random.choice(["music", "cooking", "programming", "language"]),
        "location": "Seoul",
        "is_online": False,
        "max_participants": max_participants,
        "slots": slots or [slot_payload()],
    }


class AuthenticatedUser(HttpUser):
    """Signs up a fresh account on start; subclasses read self.headers."""

    abstract = True

    def on_start(self):
        email = random_email()
        resp = self.client.post(
            "/api/v1/auth/signup",
            json={"name": "Load Tester", "email": email, "password": PASSWORD},
        )
        if resp.status_code == 201:
            token = resp.json()["access_token"]
            self.headers = {"Authorization": f"Bearer {token}"}
        else:
            self.headers = {}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"CONTENTION: first user creates one slot with {CONTENTION_SEATS} seats")
    print("=" * 60)


class ContentionUser(AuthenticatedUser):
    """
    Every user tries to book the same slot.

    Run: locust -f locustfile.py --tags contention -u 100 -r 50 --run-time 30s

    Afterwards both numbers must equal min(users, seats):
      SELECT current_participants FROM slots WHERE id = X;
      SELECT COUNT(*) FROM bookings WHERE slot_id = X AND status <> 'cancelled';
    """

    wait_time = between(0, 0.1)

    def on_start(self):
        super().on_start()
        if CONTENTION["slot_id"] or not self.headers:
            return

        resp = self.client.post(
            "/api/v1/talents/",
            json=talent_payload("Contention Class", CONTENTION_SEATS),
            headers=self.headers,
        )
        if resp.status_code == 201:
            data = resp.json()["data"]
            CONTENTION["talent_id"] = data["id"]
            CONTENTION["slot_id"] = data["slots"][0]["id"]
            print(f"\nCreated talent {data['id']} slot {CONTENTION['slot_id']}\n")

    @tag("contention")
    @task
    def book_contended_slot(self):
        if not CONTENTION["slot_id"] or not self.headers:
            return

        with self.client.post(
            "/api/v1/bookings/",
            json={"talent_id": CONTENTION["talent_id"], "slot_id": CONTENTION["slot_id"]},
            headers=self.headers,
            catch_response=True,
            name="/api/v1/bookings/ [contended]",
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 400 and resp.json().get("code") in (
                "CAPACITY_EXCEEDED",
                "DUPLICATE_BOOKING",
                "SELF_BOOKING_FORBIDDEN",
            ):
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code} {resp.text[:120]}")


class ThroughputUser(HttpUser):
    """
    Cache effectiveness of the talent listing.

    Run once with Redis and once with REDIS_ENABLED=false, then compare
    requests/sec and P95 latency.
    """

    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_talents_cached(self):
        category = random.choice(["", "music", "cooking", "programming"])
        url = f"/api/v1/talents/?category={category}" if category else "/api/v1/talents/"
        self.client.get(url, name="/api/v1/talents/ [cached]")

    @tag("throughput", "read")
    @task(3)
    def get_talent_detail(self):
        if TALENT_IDS:
            self.client.get(f"/api/v1/talents/{random.choice(TALENT_IDS)}", name="/api/v1/talents/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(AuthenticatedUser):
    """
    Bad input must produce error envelopes, never a 5xx.

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    """

    wait_time = between(0.5, 1.5)

    def _expect(self, resp, allowed):
        if resp.status_code in allowed:
            resp.success()
        else:
            resp.failure(f"Expected {allowed}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_talent(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"talent_id": 999999, "slot_id": 999999},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def past_slot(self):
        with self.client.post(
            "/api/v1/talents/",
            json=talent_payload("Past", 3, slots=[slot_payload(days_ahead=-3)]),
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def bad_rating(self):
        with self.client.post(
            "/api/v1/reviews/",
            json={"booking_id": 1, "rating": 11, "comment": "?"},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400, 403, 404])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.get("/api/v1/notifications/", catch_response=True) as resp:
            self._expect(resp, [401])


class RealisticUser(AuthenticatedUser):
    """
    Mixed workload: mostly browsing, some bookings, notification polling,
    rare talent creation.

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s
    """

    wait_time = between(1, 3)

    @task(50)
    def browse_talents(self):
        resp = self.client.get("/api/v1/talents/")
        if resp.status_code == 200:
            for talent in resp.json().get("data", []):
                if talent["id"] not in TALENT_IDS:
                    TALENT_IDS.append(talent["id"])

    @task(20)
    def view_talent(self):
        if TALENT_IDS:
            self.client.get(f"/api/v1/talents/{random.choice(TALENT_IDS)}", name="/api/v1/talents/{id}")

    @task(15)
    def poll_notifications(self):
        if self.headers:
            self.client.get("/api/v1/notifications/unread-count", headers=self.headers)

    @task(10)
    def book_random_slot(self):
        if not (TALENT_IDS and self.headers):
            return
        talent_id = random.choice(TALENT_IDS)
        resp = self.client.get(f"/api/v1/talents/{talent_id}/slots", name="/api/v1/talents/{id}/slots")
        if resp.status_code != 200 or not resp.json()["data"]:
            return
        slot = random.choice(resp.json()["data"])
        self.client.post(
            "/api/v1/bookings/",
            json={"talent_id": talent_id, "slot_id": slot["id"]},
            headers=self.headers,
        )

    @task(3)
    def create_talent(self):
        if self.headers:
            resp = self.client.post(
                "/api/v1/talents/",
                json=talent_payload(
                    f"Class {random.randint(1, 10000)}",
                    random.randint(2, 20),
                    slots=[slot_payload(days_ahead=random.randint(1, 60))],
                ),
                headers=self.headers,
            )
            if resp.status_code == 201:
                TALENT_IDS.append(resp.json()["data"]["id"])
