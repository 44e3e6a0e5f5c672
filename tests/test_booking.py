from datetime import date, timedelta
from decimal import Decimal
from fastapi import status

from app.models.booking import Booking
from app.services.bookings import get_status

from tests.conf_tests import (
    client,
    clear_db,
    test_db,
    gateway,
    test_user,
    other_user,
    admin_user,
    auth_headers,
    admin_headers,
    test_room,
    make_room,
    make_booking,
    headers_for,
    future,
)


def booking_payload(room, check_in, check_out, guests=2):
    return {
        "room_id": room.id,
        "check_in_date": check_in.isoformat(),
        "check_out_date": check_out.isoformat(),
        "number_of_guests": guests,
        "special_requests": "Late arrival",
    }


# pylint: disable-next=redefined-outer-name
def test_create_booking_success(auth_headers, test_room, test_user):
    response = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(10), future(12)), headers=auth_headers
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["room_id"] == test_room.id
    assert data["user_id"] == test_user.id
    assert data["status_name"] == "Pending"
    assert Decimal(str(data["total_amount"])) == Decimal("200.00")
    assert data["session_id"] == f"cs_test_{data['id']}"
    assert data["room_number"] == "R101"
    assert data["user_email"] == test_user.email


# pylint: disable-next=redefined-outer-name
def test_create_booking_unauthorized(test_room):
    response = client.post("/api/bookings/", json=booking_payload(test_room, future(10), future(12)))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# pylint: disable-next=redefined-outer-name
def test_create_booking_invalid_token(test_room):
    response = client.post(
        "/api/bookings/",
        json=booking_payload(test_room, future(10), future(12)),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# pylint: disable-next=redefined-outer-name
def test_create_booking_check_in_in_past(auth_headers, test_room):
    yesterday = date.today() - timedelta(days=1)
    response = client.post(
        "/api/bookings/", json=booking_payload(test_room, yesterday, future(2)), headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "past" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_check_out_not_after_check_in(auth_headers, test_room):
    response = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(5), future(5)), headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "after check-in" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_missing_fields(auth_headers, test_room):
    response = client.post(
        "/api/bookings/", json={"room_id": test_room.id}, headers=auth_headers
    )
    assert response.status_code == 422


# pylint: disable-next=redefined-outer-name
def test_create_booking_zero_guests(auth_headers, test_room):
    payload = booking_payload(test_room, future(10), future(12), guests=0)
    response = client.post("/api/bookings/", json=payload, headers=auth_headers)
    assert response.status_code == 422


# pylint: disable-next=redefined-outer-name
def test_create_booking_room_not_found(auth_headers):
    payload = {
        "room_id": 999,
        "check_in_date": future(10).isoformat(),
        "check_out_date": future(12).isoformat(),
    }
    response = client.post("/api/bookings/", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Room not found"


# pylint: disable-next=redefined-outer-name
def test_create_booking_overlapping(auth_headers, test_room):
    first = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(10), future(12)), headers=auth_headers
    )
    assert first.status_code == status.HTTP_201_CREATED

    second = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(11), future(13)), headers=auth_headers
    )
    assert second.status_code == status.HTTP_409_CONFLICT
    assert "already booked" in second.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_shared_boundary_day_conflicts(auth_headers, test_room):
    client.post(
        "/api/bookings/", json=booking_payload(test_room, future(10), future(12)), headers=auth_headers
    )
    response = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(12), future(14)), headers=auth_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT


# pylint: disable-next=redefined-outer-name
def test_cancelled_booking_frees_room(auth_headers, test_room, test_db):
    first = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(10), future(12)), headers=auth_headers
    ).json()
    cancel = client.patch(
        f"/api/bookings/{first['id']}/status",
        json={"status_id": get_status(test_db, "Cancelled").id},
        headers=auth_headers,
    )
    assert cancel.status_code == status.HTTP_200_OK
    assert cancel.json()["status_name"] == "Cancelled"

    second = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(11), future(13)), headers=auth_headers
    )
    assert second.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_payment_failure_rolls_back_booking(auth_headers, test_room, test_db, gateway):
    gateway.fail = True
    response = client.post(
        "/api/bookings/", json=booking_payload(test_room, future(10), future(12)), headers=auth_headers
    )
    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert test_db.query(Booking).count() == 0


# pylint: disable-next=redefined-outer-name
def test_get_bookings_newest_first(auth_headers, test_room, test_user, test_db):
    older = make_booking(test_db, test_user, test_room, future(1), future(2))
    newer = make_booking(test_db, test_user, test_room, future(5), future(6))
    response = client.get("/api/bookings/", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [item["id"] for item in data] == [newer.id, older.id]
    assert data[0]["user_name"] == test_user.full_name
    assert data[0]["room_category"] == "Standard"
    assert data[0]["status_name"] == "Pending"


# pylint: disable-next=redefined-outer-name
def test_get_bookings_requires_auth():
    response = client.get("/api/bookings/")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# pylint: disable-next=redefined-outer-name
def test_get_active_bookings(auth_headers, test_room, test_user, test_db):
    pending = make_booking(test_db, test_user, test_room, future(1), future(2))
    make_booking(test_db, test_user, test_room, future(5), future(6), status_name="Completed")
    make_booking(test_db, test_user, test_room, future(8), future(9), status_name="Cancelled")
    confirmed = make_booking(test_db, test_user, test_room, future(12), future(13), status_name="Confirmed")

    response = client.get("/api/bookings/active", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert {item["id"] for item in response.json()} == {pending.id, confirmed.id}


# pylint: disable-next=redefined-outer-name
def test_get_booking(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(1), future(3))
    response = client.get(f"/api/bookings/{booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == booking.id
    assert data["check_in_date"] == future(1).isoformat()


# pylint: disable-next=redefined-outer-name
def test_get_booking_not_found(auth_headers):
    response = client.get("/api/bookings/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Booking not found"


# pylint: disable-next=redefined-outer-name
def test_update_booking_recomputes_total(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12), total="200.00")
    suite = make_room(test_db, room_number="S301", price="250.00", category="Suite")

    response = client.put(
        f"/api/bookings/{booking.id}",
        json={"room_id": suite.id, "check_out_date": future(13).isoformat()},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["room_id"] == suite.id
    assert data["room_category"] == "Suite"
    assert Decimal(str(data["total_amount"])) == Decimal("750.00")


# pylint: disable-next=redefined-outer-name
def test_update_booking_details_keeps_total(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12), total="200.00")
    response = client.put(
        f"/api/bookings/{booking.id}",
        json={"number_of_guests": 3, "special_requests": "Extra pillows"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["number_of_guests"] == 3
    assert data["special_requests"] == "Extra pillows"
    assert Decimal(str(data["total_amount"])) == Decimal("200.00")


# pylint: disable-next=redefined-outer-name
def test_update_booking_excludes_itself_from_conflicts(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.put(
        f"/api/bookings/{booking.id}",
        json={"check_out_date": future(14).isoformat()},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["check_out_date"] == future(14).isoformat()


# pylint: disable-next=redefined-outer-name
def test_update_booking_into_conflict(auth_headers, test_room, test_user, other_user, test_db):
    make_booking(test_db, other_user, test_room, future(20), future(22))
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.put(
        f"/api/bookings/{booking.id}",
        json={"check_out_date": future(21).isoformat()},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_409_CONFLICT


# pylint: disable-next=redefined-outer-name
def test_update_booking_invalid_dates_no_partial_write(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.put(
        f"/api/bookings/{booking.id}",
        json={"check_out_date": future(9).isoformat(), "number_of_guests": 4},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST

    test_db.expire_all()
    stored = test_db.query(Booking).filter(Booking.id == booking.id).first()
    assert stored.check_out_date == future(12)
    assert stored.number_of_guests == 1


# pylint: disable-next=redefined-outer-name
def test_update_booking_unauthorized(test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.put(f"/api/bookings/{booking.id}", json={"number_of_guests": 2})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# pylint: disable-next=redefined-outer-name
def test_update_booking_forbidden_for_other_guest(test_room, test_user, other_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.put(
        f"/api/bookings/{booking.id}",
        json={"number_of_guests": 2},
        headers=headers_for(other_user),
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_admin_can_update_any_booking(admin_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.put(
        f"/api/bookings/{booking.id}",
        json={"notes": "VIP guest"},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["notes"] == "VIP guest"


# pylint: disable-next=redefined-outer-name
def test_guest_cannot_edit_internal_notes(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.put(
        f"/api/bookings/{booking.id}", json={"notes": "upgrade me"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_completed_booking_cannot_be_edited(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12), status_name="Completed")
    response = client.put(
        f"/api/bookings/{booking.id}", json={"number_of_guests": 2}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_delete_booking(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    booking_id = booking.id
    response = client.delete(f"/api/bookings/{booking_id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    test_db.expire_all()
    assert test_db.query(Booking).filter(Booking.id == booking_id).first() is None


# pylint: disable-next=redefined-outer-name
def test_delete_booking_forbidden_for_other_guest(test_room, test_user, other_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    response = client.delete(f"/api/bookings/{booking.id}", headers=headers_for(other_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_delete_booking_not_found(auth_headers):
    response = client.delete("/api/bookings/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_create_booking_room_under_maintenance(auth_headers, test_db):
    room = make_room(test_db, room_number="R110", status="Maintenance", notes="Repainting")
    response = client.post(
        "/api/bookings/", json=booking_payload(room, future(10), future(12)), headers=auth_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.json()["detail"] == "Room is under maintenance"
    assert test_db.query(Booking).count() == 0


# pylint: disable-next=redefined-outer-name
def test_update_booking_to_room_under_maintenance(auth_headers, test_room, test_user, test_db):
    booking = make_booking(test_db, test_user, test_room, future(10), future(12))
    room = make_room(test_db, room_number="R111", status="Maintenance", notes="Repainting")
    response = client.put(
        f"/api/bookings/{booking.id}", json={"room_id": room.id}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_409_CONFLICT
    test_db.refresh(booking)
    assert booking.room_id == test_room.id
