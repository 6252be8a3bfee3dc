"""
Trip ledger API tests: creation, validation, listing filters, partial updates.
"""

import pytest

from fleetledger.time_utils import utcnow

from conftest import trip_payload


class TestCreateTrip:

    def test_create_assigns_code_and_balances(self, client, manager_headers, manager_user):
        resp = client.post("/api/trips", json=trip_payload(), headers=manager_headers)
        assert resp.status_code == 201
        trip = resp.get_json()["trip"]
        assert trip["trip_code"] == f"{utcnow().year}_1"
        assert trip["status"] == "PENDING"
        assert trip["party_balance"] == "800.00"
        assert trip["motor_owner_balance"] == "500.00"
        assert trip["created_by_user_id"] == manager_user.id

    def test_sequential_codes(self, make_trip):
        year = utcnow().year
        first = make_trip()
        second = make_trip()
        assert first["trip_code"] == f"{year}_1"
        assert second["trip_code"] == f"{year}_2"

    def test_missing_amounts_count_as_zero(self, client, manager_headers):
        payload = trip_payload()
        for key in ("party_advance", "motor_owner_bhada", "motor_owner_advance"):
            del payload[key]
        resp = client.post("/api/trips", json=payload, headers=manager_headers)
        assert resp.status_code == 201
        trip = resp.get_json()["trip"]
        assert trip["party_balance"] == "1000.00"
        assert trip["motor_owner_balance"] == "0.00"

    def test_client_balances_and_code_are_ignored(self, make_trip):
        trip = make_trip(party_balance="99999", motor_owner_balance="-5", trip_code="HACKED")
        assert trip["party_balance"] == "800.00"
        assert trip["motor_owner_balance"] == "500.00"
        assert trip["trip_code"] != "HACKED"

    def test_numeric_json_amounts(self, make_trip):
        trip = make_trip(party_freight=1500.5, party_advance=0)
        assert trip["party_freight"] == "1500.50"
        assert trip["party_balance"] == "1500.50"

    def test_enum_values_are_normalized(self, make_trip):
        trip = make_trip(vehicle_type="market", status="loaded")
        assert trip["vehicle_type"] == "MARKET"
        assert trip["status"] == "LOADED"


class TestCreateValidation:

    def _post(self, client, headers, payload):
        resp = client.post("/api/trips", json=payload, headers=headers)
        assert resp.status_code == 400
        return resp.get_json()

    def test_missing_required_field(self, client, manager_headers):
        payload = trip_payload()
        del payload["party_name"]
        body = self._post(client, manager_headers, payload)
        assert body["field"] == "party_name"
        assert body["message"]

    def test_negative_amount(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(party_advance="-1"))
        assert body["field"] == "party_advance"

    def test_non_numeric_amount(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(party_freight="lots"))
        assert body["field"] == "party_freight"

    def test_too_many_decimals(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(party_freight="10.001"))
        assert body["field"] == "party_freight"

    @pytest.mark.parametrize("amount", ["1e30", "1E+400", "1000000000000"])
    def test_amount_above_maximum(self, client, manager_headers, amount):
        body = self._post(client, manager_headers, trip_payload(party_freight=amount))
        assert body["field"] == "party_freight"
        assert "exceed" in body["message"]

    def test_tiny_exponent_is_too_precise(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(party_advance="1e-999999"))
        assert body["field"] == "party_advance"

    def test_bad_vehicle_type(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(vehicle_type="BOAT"))
        assert body["field"] == "vehicle_type"

    def test_bad_date(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(loading_date="31/12/2026"))
        assert body["field"] == "loading_date"

    def test_unknown_field(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(colour="red"))
        assert body["field"] == "colour"

    def test_blank_vehicle_number(self, client, manager_headers):
        body = self._post(client, manager_headers, trip_payload(vehicle_number="   "))
        assert body["field"] == "vehicle_number"


class TestGetTrip:

    def test_get(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = client.get(f"/api/trips/{trip['id']}", headers=manager_headers)
        assert resp.status_code == 200
        assert resp.get_json()["trip"]["trip_code"] == trip["trip_code"]

    def test_missing(self, client, manager_headers):
        assert client.get("/api/trips/9999", headers=manager_headers).status_code == 404


class TestListTrips:

    def _codes(self, client, headers, query=""):
        resp = client.get(f"/api/trips{query}", headers=headers)
        assert resp.status_code == 200
        return [t["trip_code"] for t in resp.get_json()["trips"]]

    def test_settled_filter(self, client, admin_headers, make_trip):
        open_trip = make_trip()
        settled = make_trip(status="SETTLED")

        assert self._codes(client, admin_headers, "?settled=true") == [settled["trip_code"]]
        assert self._codes(client, admin_headers, "?settled=false") == [open_trip["trip_code"]]
        assert set(self._codes(client, admin_headers)) == {open_trip["trip_code"], settled["trip_code"]}

    def test_bad_settled_value(self, client, admin_headers):
        resp = client.get("/api/trips?settled=maybe", headers=admin_headers)
        assert resp.status_code == 400
        assert resp.get_json()["field"] == "settled"

    def test_ordered_by_loading_date_desc(self, client, admin_headers, make_trip):
        old = make_trip(loading_date="2026-01-05")
        new = make_trip(loading_date="2026-03-20")
        mid = make_trip(loading_date="2026-02-11")
        assert self._codes(client, admin_headers) == [new["trip_code"], mid["trip_code"], old["trip_code"]]

    def test_vehicle_number_substring_case_insensitive(self, client, admin_headers, make_trip):
        hit = make_trip(vehicle_number="MH12AB1234")
        make_trip(vehicle_number="KA01ZZ0001")
        assert self._codes(client, admin_headers, "?vehicle_number=ab12") == [hit["trip_code"]]

    def test_trip_code_substring(self, client, admin_headers, make_trip):
        year = utcnow().year
        first = make_trip()
        for _ in range(10):
            make_trip()
        codes = self._codes(client, admin_headers, f"?trip_code={year}_1")
        assert sorted(codes) == sorted([first["trip_code"], f"{year}_10", f"{year}_11"])

    def test_like_wildcards_are_literal(self, client, admin_headers, make_trip):
        make_trip(vehicle_number="ABC123")
        literal = make_trip(vehicle_number="A_C999")
        assert self._codes(client, admin_headers, "?vehicle_number=a_c") == [literal["trip_code"]]
        assert self._codes(client, admin_headers, "?vehicle_number=%25") == []

    def test_loaded_after_is_inclusive(self, client, admin_headers, make_trip):
        make_trip(loading_date="2026-01-31")
        on_day = make_trip(loading_date="2026-02-01")
        later = make_trip(loading_date="2026-02-10")
        codes = self._codes(client, admin_headers, "?loaded_after=2026-02-01")
        assert codes == [later["trip_code"], on_day["trip_code"]]

    def test_filters_are_anded(self, client, admin_headers, make_trip):
        target = make_trip(vehicle_number="GJ05XY7777", status="SETTLED")
        make_trip(vehicle_number="GJ05XY7777")
        make_trip(vehicle_number="RJ14AA1111", status="SETTLED")
        codes = self._codes(client, admin_headers, "?vehicle_number=gj05&settled=true")
        assert codes == [target["trip_code"]]

    def test_bad_loaded_after(self, client, admin_headers):
        resp = client.get("/api/trips?loaded_after=yesterday", headers=admin_headers)
        assert resp.status_code == 400


class TestUpdateTrip:

    def _put(self, client, headers, trip_id, payload):
        return client.put(f"/api/trips/{trip_id}", json=payload, headers=headers)

    def test_partial_update_keeps_other_fields(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, manager_headers, trip["id"], {"vehicle_number": "MH14CD5678"})
        assert resp.status_code == 200
        updated = resp.get_json()["trip"]
        assert updated["vehicle_number"] == "MH14CD5678"
        assert updated["party_name"] == trip["party_name"]
        assert updated["trip_code"] == trip["trip_code"]
        assert updated["party_balance"] == trip["party_balance"]

    def test_advance_change_recomputes_balance(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, manager_headers, trip["id"], {"party_advance": "1000"})
        updated = resp.get_json()["trip"]
        assert updated["party_balance"] == "0.00"
        assert updated["motor_owner_balance"] == "500.00"

    def test_zero_advance_still_recomputes(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, manager_headers, trip["id"], {"motor_owner_advance": 0})
        assert resp.get_json()["trip"]["motor_owner_balance"] == "800.00"

    def test_trip_code_cannot_be_changed(self, client, admin_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, admin_headers, trip["id"], {"trip_code": "X_1", "party_balance": "1"})
        assert resp.status_code == 200
        updated = resp.get_json()["trip"]
        assert updated["trip_code"] == trip["trip_code"]
        assert updated["party_balance"] == "800.00"

    def test_status_moves_forward(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, manager_headers, trip["id"], {"status": "IN_TRANSIT"})
        assert resp.status_code == 200
        assert resp.get_json()["trip"]["status"] == "IN_TRANSIT"

    def test_status_cannot_move_back(self, client, admin_headers, make_trip):
        trip = make_trip(status="DELIVERED")
        resp = self._put(client, admin_headers, trip["id"], {"status": "LOADED"})
        assert resp.status_code == 400
        assert resp.get_json()["field"] == "status"

    def test_missing_trip(self, client, manager_headers):
        resp = self._put(client, manager_headers, 9999, {"vehicle_number": "X"})
        assert resp.status_code == 404

    def test_validation_error(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, manager_headers, trip["id"], {"party_freight": "-10"})
        assert resp.status_code == 400
        assert resp.get_json()["field"] == "party_freight"

    def test_null_not_allowed_for_required_column(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, manager_headers, trip["id"], {"party_name": None})
        assert resp.status_code == 400

    def test_owner_name_can_be_cleared(self, client, manager_headers, make_trip):
        trip = make_trip()
        resp = self._put(client, manager_headers, trip["id"], {"motor_owner_name": None})
        assert resp.status_code == 200
        assert resp.get_json()["trip"]["motor_owner_name"] is None
