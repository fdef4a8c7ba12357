"""Integration tests: booking form actions against the in-memory records."""

import json
from datetime import date
from decimal import Decimal

import pytest

from pms_core.booking.lifecycle import StatusTrigger
from pms_core.booking.reference import is_valid_booking_reference
from pms_core.errors import RecordNotFoundError, StoreError
from pms_core.records import bookings as booking_records
from pms_core.records import rooms as room_records
from pms_core.schemas.booking_schema import BookingStatus, DateRange, PaymentStatus, RoomKey
from pms_core.schemas.room_schema import Room, RoomStatus
from tests.conftest import MARINA_101, make_booking, make_request

TODAY = date(2024, 3, 10)


class TestCreateBooking:
    def test_create_and_retrieve_booking(self):
        result = booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 13)), today=TODAY
        )
        assert result["success"] is True
        booking = result["booking"]
        assert is_valid_booking_reference(booking.reference)
        assert booking.reference.startswith("BK-2024-")
        assert booking_records.get_booking(booking.id) == booking
        assert booking_records.get_booking_by_reference(booking.reference) == booking
        assert booking.property_name == "Marina Tower"

    def test_financials_use_configured_rates(self):
        result = booking_records.create_booking(
            make_request(date(2024, 1, 1), date(2024, 1, 4), base_rate="100"), today=TODAY
        )
        booking = result["booking"]
        assert booking.total_amount == Decimal("300.00")
        assert booking.vat == Decimal("15.00")
        assert booking.tourism_fee == Decimal("9.00")
        assert booking.commission == Decimal("30.00")
        assert booking.net_to_owner == Decimal("246.00")
        assert result["financials"].nights == 3

    def test_payment_status_follows_amount_paid(self):
        result = booking_records.create_booking(
            make_request(date(2024, 1, 1), date(2024, 1, 4), amount_paid="100"), today=TODAY
        )
        booking = result["booking"]
        assert booking.remaining_amount == Decimal("200.00")
        assert booking.payment_status == PaymentStatus.PARTIAL

    def test_overlapping_request_is_rejected(self):
        booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 15), guest_name="Amira Haddad"),
            today=TODAY,
        )
        result = booking_records.create_booking(
            make_request(date(2024, 3, 12), date(2024, 3, 18)), today=TODAY
        )
        assert result["success"] is False
        assert result["error"] == "conflict"
        assert result["conflict"].guest_name == "Amira Haddad"
        assert "Amira Haddad" in result["message"]
        assert "2024-03-10" in result["message"]
        assert len(booking_records.list_bookings()) == 1

    def test_back_to_back_request_is_accepted(self):
        booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 15)), today=TODAY
        )
        result = booking_records.create_booking(
            make_request(date(2024, 3, 15), date(2024, 3, 20)), today=TODAY
        )
        assert result["success"] is True

    def test_cancelled_stay_frees_the_room(self):
        first = booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 15)), today=TODAY
        )
        booking_records.cancel_booking(first["booking"].id, today=TODAY)
        result = booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 15)), today=TODAY
        )
        assert result["success"] is True

    def test_invalid_range_is_rejected(self):
        result = booking_records.create_booking(
            make_request(date(2024, 3, 15), date(2024, 3, 10)), today=TODAY
        )
        assert result["success"] is False
        assert result["error"] == "invalid_range"

    def test_unknown_room_is_rejected(self):
        result = booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 12), room_number="999"), today=TODAY
        )
        assert result["error"] == "unknown_room"

    def test_confirmed_stay_marks_room_occupied(self):
        booking_records.create_booking(
            make_request(date(2024, 3, 9), date(2024, 3, 12)), today=TODAY
        )
        assert room_records.find_room(MARINA_101).status == RoomStatus.OCCUPIED

    def test_pending_stay_leaves_room_available(self):
        booking_records.create_booking(
            make_request(date(2024, 3, 9), date(2024, 3, 12), status=BookingStatus.PENDING),
            today=TODAY,
        )
        assert room_records.find_room(MARINA_101).status == RoomStatus.AVAILABLE

    def test_maintenance_room_status_is_held(self):
        booking_records.create_booking(
            make_request(date(2024, 3, 9), date(2024, 3, 12),
                         property_id="downtown", room_number="401"),
            today=TODAY,
        )
        room = room_records.get_room("room-401")
        assert room.status == RoomStatus.MAINTENANCE


class TestUpdateBooking:
    def _create(self, check_in, check_out):
        return booking_records.create_booking(make_request(check_in, check_out), today=TODAY)["booking"]

    def test_extending_stay_does_not_conflict_with_itself(self):
        booking = self._create(date(2024, 3, 10), date(2024, 3, 12))
        result = booking_records.update_booking(
            booking.id, make_request(date(2024, 3, 10), date(2024, 3, 14)), today=TODAY
        )
        assert result["success"] is True
        assert result["booking"].nights == 4
        assert result["booking"].total_amount == Decimal("400.00")
        assert result["booking"].reference == booking.reference

    def test_moving_onto_another_stay_conflicts(self):
        self._create(date(2024, 3, 10), date(2024, 3, 12))
        second = self._create(date(2024, 3, 20), date(2024, 3, 22))
        result = booking_records.update_booking(
            second.id, make_request(date(2024, 3, 11), date(2024, 3, 13)), today=TODAY
        )
        assert result["error"] == "conflict"
        assert booking_records.get_booking(second.id).check_in == date(2024, 3, 20)

    def test_update_keeps_status(self):
        booking = self._create(date(2024, 3, 10), date(2024, 3, 12))
        request = make_request(date(2024, 3, 10), date(2024, 3, 13), status=BookingStatus.PENDING)
        result = booking_records.update_booking(booking.id, request, today=TODAY)
        assert result["booking"].status == BookingStatus.CONFIRMED

    def test_moving_rooms_resyncs_both(self):
        booking = self._create(date(2024, 3, 9), date(2024, 3, 12))
        assert room_records.find_room(MARINA_101).status == RoomStatus.OCCUPIED
        request = make_request(date(2024, 3, 9), date(2024, 3, 12), room_number="102")
        booking_records.update_booking(booking.id, request, today=TODAY)
        assert room_records.find_room(MARINA_101).status == RoomStatus.AVAILABLE
        assert room_records.get_room("room-102").status == RoomStatus.OCCUPIED

    def test_update_nonexistent_booking(self):
        with pytest.raises(RecordNotFoundError):
            booking_records.update_booking(
                "missing", make_request(date(2024, 3, 10), date(2024, 3, 12))
            )


class TestChangeStatus:
    def test_check_in_and_out(self):
        booking = booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 12)), today=TODAY
        )["booking"]
        result = booking_records.change_status(booking.id, StatusTrigger.CHECK_IN, today=TODAY)
        assert result["booking"].status == BookingStatus.CHECKED_IN
        result = booking_records.change_status(
            booking.id, StatusTrigger.CHECK_OUT, today=date(2024, 3, 12)
        )
        assert result["booking"].status == BookingStatus.CHECKED_OUT
        assert room_records.find_room(MARINA_101).status == RoomStatus.AVAILABLE

    def test_invalid_transition_is_a_result(self):
        booking = booking_records.create_booking(
            make_request(date(2024, 3, 10), date(2024, 3, 12)), today=TODAY
        )["booking"]
        booking_records.cancel_booking(booking.id, today=TODAY)
        result = booking_records.change_status(booking.id, StatusTrigger.CHECK_IN, today=TODAY)
        assert result["success"] is False
        assert result["error"] == "invalid_transition"

    def test_cancel_nonexistent_booking(self):
        with pytest.raises(RecordNotFoundError):
            booking_records.cancel_booking("missing")


class TestListAndLoad:
    def test_list_bookings_filters(self):
        booking_records.add_bookings([
            make_booking(date(2024, 3, 1), date(2024, 3, 3)),
            make_booking(date(2024, 5, 1), date(2024, 5, 3), status=BookingStatus.CANCELLED),
            make_booking(date(2024, 3, 2), date(2024, 3, 4), property_id="downtown",
                         room_number="301"),
        ])
        assert len(booking_records.list_bookings()) == 3
        assert len(booking_records.list_bookings(property_id="downtown")) == 1
        march = DateRange(start=date(2024, 3, 1), end=date(2024, 4, 1))
        assert len(booking_records.list_bookings(window=march)) == 2
        assert len(booking_records.list_bookings(statuses=[BookingStatus.CANCELLED])) == 1

    def test_list_bookings_sorted_by_check_in(self):
        booking_records.add_bookings([
            make_booking(date(2024, 5, 1), date(2024, 5, 3)),
            make_booking(date(2024, 3, 1), date(2024, 3, 3)),
        ])
        check_ins = [b.check_in for b in booking_records.list_bookings()]
        assert check_ins == sorted(check_ins)

    def test_load_bookings_file(self, tmp_path):
        path = tmp_path / "bookings.json"
        path.write_text(json.dumps([{
            "id": "b1",
            "reference": "BK-2024-1234-5678",
            "guest_name": "Amira Haddad",
            "property_id": "marina",
            "room_number": 101,
            "check_in": "2024-03-10",
            "check_out": "2024-03-13",
            "total_amount": "1350.00",
            "status": "confirmed",
        }]))
        [booking] = booking_records.load_bookings_file(path)
        assert booking.room_key == RoomKey(property_id="marina", room_number="101")
        assert booking.total_amount == Decimal("1350.00")

    def test_load_missing_file_raises_store_error(self, tmp_path):
        with pytest.raises(StoreError):
            booking_records.load_bookings_file(tmp_path / "missing.json")

    def test_load_invalid_json_raises_store_error(self, tmp_path):
        path = tmp_path / "bookings.json"
        path.write_text("not json")
        with pytest.raises(StoreError):
            booking_records.load_bookings_file(path)

    def test_load_invalid_row_raises_store_error(self, tmp_path):
        path = tmp_path / "bookings.json"
        path.write_text(json.dumps([{"id": "b1", "check_in": "2024-03-10"}]))
        with pytest.raises(StoreError):
            booking_records.load_bookings_file(path)

    def test_get_nonexistent_booking(self):
        with pytest.raises(RecordNotFoundError, match="missing"):
            booking_records.get_booking("missing")


class TestRoomRecords:
    def test_seed_inventory(self):
        assert room_records.count_rooms() == 5
        assert room_records.count_rooms("marina") == 3

    def test_find_room_is_exact(self):
        assert room_records.find_room(RoomKey(property_id="marina", room_number="10")) is None
        assert room_records.find_room(RoomKey(property_id="marina", room_number="110")).id == "room-110"

    def test_list_rooms_by_status(self):
        held = room_records.list_rooms(status=RoomStatus.MAINTENANCE)
        assert [r.id for r in held] == ["room-401"]

    def test_add_room(self):
        room = Room(id="room-302", number="302", property_id="downtown",
                    property_name="Downtown Heights")
        room_records.add_room(room)
        assert room_records.count_rooms("downtown") == 3

    def test_add_duplicate_room_raises(self):
        with pytest.raises(ValueError):
            room_records.add_room(Room(id="dup", number="101", property_id="marina"))

    def test_get_unknown_room(self):
        with pytest.raises(RecordNotFoundError):
            room_records.get_room("room-999")
