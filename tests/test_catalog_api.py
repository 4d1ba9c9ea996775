from backend.fastapi.models import Washer

WASHERS = "/api/v1/washers/"
ITEMS = "/api/v1/service-items/"
BRANCHES = "/api/v1/branches/"


class TestWashers:

    def test_create_and_list(self, client, headers):
        created = client.post(WASHERS, json={"name": "  Sam ", "phone": "+234 801 234 5678"}, headers=headers)
        client.post(WASHERS, json={"name": "Idowu"}, headers=headers)

        assert created.status_code == 201
        assert created.json()["name"] == "Sam"

        listed = client.get(WASHERS, headers=headers).json()
        assert [w["name"] for w in listed["washers"]] == ["Idowu", "Sam"]
        assert listed["total"] == 2

    def test_duplicate_name_in_branch_conflicts(self, client, headers, washers):
        response = client.post(WASHERS, json={"name": "Sam"}, headers=headers)

        assert response.status_code == 409

    def test_same_name_in_another_branch_is_allowed(self, client, branch_b, washers, login_as):
        other = login_as(branch_b, "b-manager@example.com")

        assert client.post(WASHERS, json={"name": "Sam"}, headers=other).status_code == 201

    def test_washers_of_other_branches_are_invisible(self, client, branch_b, washers, washers_b, headers):
        foreign = washers_b["Sam"].id

        assert client.get(f"{WASHERS}{foreign}", headers=headers).status_code == 404
        assert client.put(f"{WASHERS}{foreign}", json={"name": "Samuel"}, headers=headers).status_code == 404
        assert client.delete(f"{WASHERS}{foreign}", headers=headers).status_code == 404
        assert [w["name"] for w in client.get(WASHERS, headers=headers).json()["washers"]] == [
            "Idowu", "Sam", "Tunde"
        ]

    def test_get_with_stats(self, client, headers, washers, service_items):
        client.post("/api/v1/records/car-wash", headers=headers, json={"items": [
            {"washer_name": "Sam", "service_item_name": "Full Wash"},
            {"washer_name": "Sam", "service_item_name": "Interior Vacuum"},
        ]})

        body = client.get(f"{WASHERS}{washers['Sam'].id}", headers=headers).json()

        assert body["line_items_count"] == 2
        assert body["wash_jobs_count"] == 1

    def test_rename_conflict(self, client, headers, washers):
        response = client.put(f"{WASHERS}{washers['Sam'].id}", json={"name": "Tunde"}, headers=headers)

        assert response.status_code == 409

    def test_deactivate_is_soft(self, client, db, headers, washers):
        response = client.delete(f"{WASHERS}{washers['Tunde'].id}", headers=headers)

        assert response.status_code == 200
        tunde = db.query(Washer).populate_existing().filter(Washer.id == washers["Tunde"].id).one()
        assert tunde.is_active is False

        active = client.get(WASHERS, params={"is_active": True}, headers=headers).json()
        assert [w["name"] for w in active["washers"]] == ["Idowu", "Sam"]


class TestServiceItems:

    def test_create_and_get(self, client, headers):
        created = client.post(ITEMS, json={"name": "Engine Wash", "price": "300.00"}, headers=headers)

        assert created.status_code == 201
        item = client.get(f"{ITEMS}{created.json()['id']}", headers=headers).json()
        assert item["price"] == "300.00"
        assert item["line_items_count"] == 0

    def test_variable_price_item_defaults_to_zero(self, client, headers):
        created = client.post(ITEMS, json={"name": "Car Rug"}, headers=headers)

        assert created.json()["price"] == "0.00"

    def test_duplicate_name_conflicts(self, client, headers, service_items):
        assert client.post(ITEMS, json={"name": "Full Wash", "price": "60.00"}, headers=headers).status_code == 409

    def test_negative_price_is_rejected(self, client, headers):
        assert client.post(ITEMS, json={"name": "Wax", "price": "-1.00"}, headers=headers).status_code == 422

    def test_price_change_keeps_recorded_prices(self, client, headers, washers, service_items):
        job = client.post("/api/v1/records/car-wash", headers=headers, json={"items": [
            {"washer_name": "Sam", "service_item_name": "Full Wash"},
        ]}).json()

        client.put(f"{ITEMS}{service_items['Full Wash'].id}", json={"price": "80.00"}, headers=headers)

        again = client.get(f"/api/v1/records/car-wash/{job['id']}", headers=headers).json()
        assert again["total_amount"] == "50.00"
        assert again["line_items"][0]["price"] == "50.00"

    def test_deactivated_item_cannot_be_recorded(self, client, headers, washers, service_items):
        client.delete(f"{ITEMS}{service_items['Interior Vacuum'].id}", headers=headers)

        response = client.post("/api/v1/records/car-wash", headers=headers, json={"items": [
            {"washer_name": "Sam", "service_item_name": "Interior Vacuum"},
        ]})

        assert response.status_code == 400
        assert response.json()["detail"]["names"] == ["Interior Vacuum"]


class TestBranches:

    def test_requires_super_admin(self, client, headers):
        assert client.get(BRANCHES, headers=headers).status_code == 403

    def test_create_and_list(self, client, super_headers):
        created = client.post(BRANCHES, json={"name": "Branch C", "code": "c"}, headers=super_headers)

        assert created.status_code == 201
        assert created.json()["code"] == "C"
        assert [b["name"] for b in client.get(BRANCHES, headers=super_headers).json()["branches"]] == [
            "Branch A", "Branch C"
        ]

    def test_duplicate_code_conflicts(self, client, super_headers, branch_b):
        response = client.post(BRANCHES, json={"name": "Branch Bee", "code": "B"}, headers=super_headers)

        assert response.status_code == 409

    def test_get_with_stats(self, client, super_admin, super_headers, branch_a, washers):
        body = client.get(f"{BRANCHES}{branch_a.id}", headers=super_headers).json()

        assert body["user_count"] == 1
        assert body["active_washer_count"] == 3

    def test_cannot_deactivate_own_branch(self, client, super_headers, branch_a):
        assert client.delete(f"{BRANCHES}{branch_a.id}", headers=super_headers).status_code == 400

    def test_deactivate_other_branch(self, client, super_headers, branch_b):
        assert client.delete(f"{BRANCHES}{branch_b.id}", headers=super_headers).status_code == 200

        listed = client.get(BRANCHES, headers=super_headers).json()
        assert [b["code"] for b in listed["branches"]] == ["A"]
        everything = client.get(BRANCHES, params={"include_inactive": True}, headers=super_headers).json()
        assert everything["total"] == 2
