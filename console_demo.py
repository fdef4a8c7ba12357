"""
Offline console demo: runs a front-desk day against the in-memory records.

Books a stay, shows an overlapping request being rejected and a
back-to-back one being accepted, prints the room calendar, checks the
guest in, and ends with the dashboard and housekeeping board. No
database and no network calls.

Usage:
    python console_demo.py
    python console_demo.py --scenario turnover
    python console_demo.py --scenario dashboard
"""

import argparse
from datetime import date, timedelta
from decimal import Decimal

from pms_core.booking.availability import compute_availability, compute_calendar_cells
from pms_core.booking.lifecycle import StatusTrigger
from pms_core.config import settings
from pms_core.logging_context import new_request_id
from pms_core.records import bookings as booking_records
from pms_core.records import rooms as room_records
from pms_core.reporting.dashboard import format_dashboard_report, load_dashboard
from pms_core.rooms.cleaning import build_cleaning_board
from pms_core.schemas.booking_schema import BookingRequest, BookingStatus, RoomKey

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CELL_GLYPHS = {
    "empty": ".",
    "booking-start": "[",
    "booking-middle": "=",
    "booking-end": "]",
    "booking-single-day": "#",
}


class FrontDeskSession:
    """Walks through a short front-desk scenario in the terminal."""

    def __init__(self, today: date) -> None:
        self.today = today
        self.room = RoomKey(property_id="marina", room_number="101")
        self.created: list[str] = []

    def desk_say(self, text: str) -> None:
        print(f"{GREEN}{BOLD}[Front desk]{RESET} {GREEN}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    def banner(self, title: str) -> None:
        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.business.company_name.upper()} - {title}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

    def request(self, guest: str, start_offset: int, nights: int, rate: str) -> BookingRequest:
        check_in = self.today + timedelta(days=start_offset)
        return BookingRequest(
            guest_name=guest,
            property_id=self.room.property_id,
            room_number=self.room.room_number,
            check_in=check_in,
            check_out=check_in + timedelta(days=nights),
            base_rate=Decimal(rate),
            status=BookingStatus.CONFIRMED,
        )

    def submit(self, request: BookingRequest) -> None:
        print(
            f"\n{BLUE}[Request]{RESET} {request.guest_name}: room {request.room_number}, "
            f"{request.check_in} to {request.check_out}"
        )
        result = booking_records.create_booking(request, today=self.today)
        if not result["success"]:
            print(f"{RED}{BOLD}[Rejected]{RESET} {RED}{result['message']}{RESET}")
            return
        booking = result["booking"]
        self.created.append(booking.id)
        self.desk_say(result["message"])
        self.system_log(
            f"VAT {booking.vat}, tourism fee {booking.tourism_fee}, "
            f"commission {booking.commission}, net to owner {booking.net_to_owner}"
        )

    def show_calendar(self, days: int) -> None:
        bookings = booking_records.list_bookings(property_id=self.room.property_id)
        cells = compute_calendar_cells(bookings, self.room, self.today, days)
        row = "".join(CELL_GLYPHS[cell.state.value] for cell in cells)
        print(f"\n{YELLOW}Room {self.room.room_number} from {self.today}:{RESET} {row}")
        for block in compute_availability(bookings, self.room, self.today, days):
            self.system_log(
                f"block {block.start_index}..{block.end_index} "
                f"left {block.left_percent:.1f}% width {block.width_percent:.1f}% "
                f"({block.status.value})"
            )

    def check_in_first_guest(self) -> None:
        if not self.created:
            return
        result = booking_records.change_status(
            self.created[0], StatusTrigger.CHECK_IN, today=self.today
        )
        self.desk_say(result["message"])
        room = room_records.find_room(self.room)
        if room is not None:
            self.system_log(f"Room {room.number} is now {room.status.value}")

    def show_cleaning_board(self) -> None:
        print(f"\n{BOLD}HOUSEKEEPING{RESET}")
        board = build_cleaning_board(
            room_records.list_rooms(), booking_records.list_bookings(), self.today
        )
        for row in board:
            upcoming = row.next_check_in.isoformat() if row.next_check_in else "-"
            print(
                f"  {row.property_name:<18} {row.room_number:<5} "
                f"{row.status.value:<12} next check-in: {upcoming}"
            )

    def run_turnover(self) -> None:
        self.banner("Front desk: turnover")
        self.submit(self.request("Amira Haddad", 1, 3, "450"))
        self.submit(self.request("Jonas Berg", 2, 2, "450"))
        self.submit(self.request("Li Wei", 4, 2, "480"))
        self.show_calendar(settings.reports.calendar_view_days)

    def run_dashboard(self) -> None:
        dashboard = load_dashboard("daily", today=self.today + timedelta(days=7))
        print()
        print(format_dashboard_report(dashboard))

    def run(self) -> None:
        self.run_turnover()
        self.today += timedelta(days=1)
        print(f"\n{DIM}-- next day: {self.today} --{RESET}")
        self.check_in_first_guest()
        self.run_dashboard()
        self.show_cleaning_board()


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline front-desk demo")
    parser.add_argument(
        "--scenario",
        choices=["turnover", "dashboard"],
        default=None,
        help="Run one part of the walkthrough instead of the whole day",
    )
    args = parser.parse_args()

    new_request_id()
    session = FrontDeskSession(date.today())
    if args.scenario == "turnover":
        session.run_turnover()
    elif args.scenario == "dashboard":
        session.run_turnover()
        session.run_dashboard()
    else:
        session.run()


if __name__ == "__main__":
    main()
