"""
HTTP contract tests; each test gets a fresh in-memory ledger.
"""


def _submit(client, **overrides):
    body = {"mode": "walking", "distance": 2, "startLocation": "Main Gate", "endLocation": "Library"}
    body.update(overrides)
    return client.post("/v1/trips", json=body)


class TestHealth:
    def test_healthz(self, client):
        resp = client.get("/healthz")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_readyz(self, client):
        assert client.get("/readyz").json() == {"status": "ok"}

    def test_request_id_echoed(self, client):
        resp = client.get("/healthz", headers={"x-request-id": "req-123"})
        assert resp.headers["x-request-id"] == "req-123"

    def test_lifespan_records_startup_time(self, client):
        with client:
            assert isinstance(client.app.state.startup_time, float)


class TestTrips:
    def test_record_trip(self, client):
        resp = _submit(client)
        assert resp.status_code == 200
        data = resp.json()
        assert data["pointsEarned"] == 20
        assert abs(data["carbonSaved"] - 0.384) < 1e-9
        assert data["streakDays"] == 1
        assert data["record"]["startLocation"] == "Main Gate"
        assert data["rewards"]["points"] == 65

        profile = client.get("/v1/profile").json()
        assert profile["totalPoints"] == 20
        assert profile["travelCount"] == 1
        assert profile["rewardPoints"] == 65

    def test_blank_location_is_400(self, client):
        resp = _submit(client, startLocation="  ")
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "validation_error"
        assert client.get("/v1/profile").json()["travelCount"] == 0

    def test_unknown_mode_is_400(self, client):
        assert _submit(client, mode="rocket").status_code == 400

    def test_missing_distance_is_422(self, client):
        resp = client.post("/v1/trips", json={"mode": "bus", "startLocation": "a", "endLocation": "b"})
        assert resp.status_code == 422
        assert resp.json()["error"]["code"] == "validation_error"

    def test_history_newest_first(self, client):
        _submit(client, endLocation="Library")
        _submit(client, endLocation="Engineering College")
        records = client.get("/v1/trips").json()["records"]
        assert [r["endLocation"] for r in records] == ["Engineering College", "Library"]
        assert len(client.get("/v1/trips", params={"limit": 1}).json()["records"]) == 1

    def test_history_date_filter(self, client):
        _submit(client, occurredAt="2025-01-10T09:00:00Z")
        _submit(client, occurredAt="2025-02-10T09:00:00Z")
        resp = client.get("/v1/trips", params={"start": "2025-02-01T00:00:00Z"})
        assert resp.json()["count"] == 1

    def test_inverted_date_range_is_400(self, client):
        resp = client.get(
            "/v1/trips",
            params={"start": "2025-02-01T00:00:00Z", "end": "2025-01-01T00:00:00Z"},
        )
        assert resp.status_code == 400


class TestGamification:
    def test_achievements(self, client):
        _submit(client)
        achievements = client.get("/v1/achievements").json()["achievements"]
        assert len(achievements) == 6
        assert achievements[0]["title"] == "Eco Beginner"
        assert abs(achievements[0]["progress"] - 38.4) < 1e-9
        assert "description" in achievements[0]

    def test_preview(self, client):
        data = client.get("/v1/achievements/preview").json()
        assert len(data["achievements"]) == 6
        assert data["newlyUnlocked"] == []

    def test_tasks_and_reset(self, client):
        _submit(client)
        tasks = client.get("/v1/tasks").json()["tasks"]
        assert len(tasks) == 12
        assert any(t["completed"] for t in tasks)

        reset = client.post("/v1/tasks/reset").json()["tasks"]
        assert not any(t["completed"] for t in reset)

    def test_streak_verify(self, client):
        _submit(client)
        data = client.get("/v1/streaks/verify").json()
        assert data["storedStreak"] == 1
        assert data["consistent"] is True

    def test_stats(self, client):
        for _ in range(5):
            _submit(client, mode="bus", distance=10)
        data = client.get("/v1/stats").json()
        assert data["transportBreakdown"]["bus"] == 100
        assert data["travelCount"] == 5


class TestRoutes:
    def test_catalog(self, client):
        assert len(client.get("/v1/routes/locations").json()["locations"]) == 8
        assert client.get("/v1/routes/danger-zones").json()["dangerZones"][0]["riskLevel"] == 8
        assert len(client.get("/v1/routes").json()["routes"]) == 5

    def test_recommend(self, client):
        resp = client.post(
            "/v1/routes/recommend",
            json={"start": "library", "end": "main_gate", "preferences": {"weather": "rainy"}},
        )
        data = resp.json()
        assert data["found"] is True
        assert data["route"]["id"] == "main_to_library_walk_reverse"
        assert data["reversed"] is True
        assert data["candidatesConsidered"] == 1

    def test_recommend_prefers_direct_route(self, client):
        resp = client.post(
            "/v1/routes/recommend",
            json={"start": "main_gate", "end": "station", "preferences": {"weather": "rainy"}},
        )
        assert resp.json()["route"]["id"] == "main_to_station_safe"

    def test_recommend_not_found(self, client):
        resp = client.post("/v1/routes/recommend", json={"start": "main_gate", "end": "design"})
        assert resp.status_code == 200
        assert resp.json() == {"found": False, "route": None}

    def test_preference_out_of_range(self, client):
        resp = client.post(
            "/v1/routes/recommend",
            json={"start": "main_gate", "end": "library", "preferences": {"safety": 11}},
        )
        assert resp.status_code == 422

    def test_route_by_id(self, client):
        resp = client.get("/v1/routes/dorm_to_engineering_cycle")
        assert resp.status_code == 200
        assert resp.json()["type"] == "cycling"

    def test_unknown_route_is_404(self, client):
        resp = client.get("/v1/routes/moon_shuttle")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "not_found"
