#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import re
import sys
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from dotenv import load_dotenv
from loguru import logger


# ---------------------------
# Constants / Data Model
# ---------------------------

SEATS = 24      # seats per flight
NAME_MAX = 19   # longest first/last name the shell accepts


@dataclass
class Seat:
    id: int
    assigned: bool = False
    first_name: str = ""
    last_name: str = ""


# (seat id, first name, last name)
PassengerRow = Tuple[int, str, str]


# ---------------------------
# Errors
# ---------------------------

class SeatError(ValueError):
    def __init__(self, seat_id: int, message: str) -> None:
        self.seat_id = seat_id
        super().__init__(message)


class SeatOutOfRange(SeatError):
    def __init__(self, seat_id: int) -> None:
        super().__init__(seat_id, f"Seat {seat_id} is out of range (1-{SEATS}).")


class SeatAlreadyTaken(SeatError):
    def __init__(self, seat_id: int) -> None:
        super().__init__(seat_id, f"Seat {seat_id} is already taken.")


class SeatAlreadyEmpty(SeatError):
    def __init__(self, seat_id: int) -> None:
        super().__init__(seat_id, f"Seat {seat_id} is already empty.")


# ---------------------------
# Core Ledger
# ---------------------------

class SeatLedger:
    """All 24 seats of one flight. Seat ``n`` lives at index ``n - 1``."""

    def __init__(self, flight: str = "") -> None:
        self.flight = flight
        self.seats: List[Seat] = [Seat(id=i + 1) for i in range(SEATS)]
        self._log = logger.bind(flight=flight)

    def initialize(self) -> None:
        """Mark every seat empty. Safe to call any number of times."""
        for i, seat in enumerate(self.seats):
            seat.id = i + 1
            seat.assigned = False
            seat.first_name = ""
            seat.last_name = ""

    def _seat(self, seat_id: int) -> Seat:
        if not 1 <= seat_id <= SEATS:
            raise SeatOutOfRange(seat_id)
        return self.seats[seat_id - 1]

    def count_empty(self) -> int:
        return sum(1 for seat in self.seats if not seat.assigned)

    def count_assigned(self) -> int:
        return SEATS - self.count_empty()

    def list_empty(self) -> List[int]:
        return [seat.id for seat in self.seats if not seat.assigned]

    def list_assigned_alphabetical(self) -> List[PassengerRow]:
        """
        Assigned passengers ordered by last name, then first name.

        Plain ``str`` ordering compares code points, so "Zeta" sorts before
        "amy". Passengers with identical names stay in seat order because
        the sort is stable. Only indices are sorted; the seats never move.
        """
        idx = [i for i, seat in enumerate(self.seats) if seat.assigned]
        idx.sort(key=lambda i: (self.seats[i].last_name, self.seats[i].first_name))
        return [
            (self.seats[i].id, self.seats[i].first_name, self.seats[i].last_name)
            for i in idx
        ]

    def get_seat(self, seat_id: int) -> Seat:
        return replace(self._seat(seat_id))

    def assign(self, seat_id: int, first_name: str, last_name: str) -> None:
        try:
            seat = self._seat(seat_id)
        except SeatOutOfRange:
            self._log.debug("assign rejected: seat {} out of range", seat_id)
            raise
        if seat.assigned:
            self._log.debug("assign rejected: seat {} already taken", seat_id)
            raise SeatAlreadyTaken(seat_id)

        seat.first_name = first_name
        seat.last_name = last_name
        seat.assigned = True
        self._log.info("seat {} assigned to {} {}", seat_id, first_name, last_name)

    def delete(self, seat_id: int) -> None:
        try:
            seat = self._seat(seat_id)
        except SeatOutOfRange:
            self._log.debug("delete rejected: seat {} out of range", seat_id)
            raise
        if not seat.assigned:
            self._log.debug("delete rejected: seat {} already empty", seat_id)
            raise SeatAlreadyEmpty(seat_id)

        seat.assigned = False
        seat.first_name = ""
        seat.last_name = ""
        self._log.info("seat {} cleared", seat_id)


# ---------------------------
# Rendering
# ---------------------------

def format_empty_count(ledger: SeatLedger) -> str:
    return f"Empty seats: {ledger.count_empty()} out of {SEATS}"


def format_empty_list(seat_ids: List[int]) -> str:
    if not seat_ids:
        return "Empty seat numbers: (none)"
    return "Empty seat numbers: " + " ".join(str(s) for s in seat_ids)


def format_alpha_list(rows: List[PassengerRow]) -> str:
    out: List[str] = ["Alphabetical list of assigned seats:"]
    if not rows:
        out.append("(none)")
    for seat_id, first, last in rows:
        out.append(f"Seat {seat_id:>2}: {first} {last}")
    return "\n".join(out)


# ---------------------------
# Console Menus
# ---------------------------

FIRST_MENU = (
    "First Level Menu",
    "a) Outbound Flight",
    "b) Inbound Flight",
    "c) Quit",
)

SECOND_MENU = (
    "a) Show number of empty seats",
    "b) Show list of empty seats",
    "c) Show alphabetical list of seats",
    "d) Assign a customer to a seat assignment",
    "e) Delete a seat assignment",
    "f) Return to Main menu",
)


def parse_choice(raw: str) -> str:
    """First non-blank character, lower-cased ("" when the line is blank)."""
    s = raw.strip()
    return s[:1].lower()


SEAT_NUMBER_RE = re.compile(r"\s*([+-]?\d+)")


def parse_seat_number(raw: str) -> Optional[int]:
    # leading integer only, so "5abc" reads as 5
    m = SEAT_NUMBER_RE.match(raw)
    if m is None:
        return None
    return int(m.group(1))


def valid_name(name: str) -> bool:
    return 0 < len(name) <= NAME_MAX and not any(ch.isspace() for ch in name)


def describe_error(err: SeatError) -> str:
    if isinstance(err, SeatOutOfRange):
        return "Seat out of range."
    return str(err)


class MenuShell:
    def __init__(
        self,
        outbound: SeatLedger,
        inbound: SeatLedger,
        read: Optional[Callable[[str], str]] = None,
        write: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.outbound = outbound
        self.inbound = inbound
        self.read = read or input
        self.write = write or print

    def run(self) -> None:
        self.write("Welcome to Colossus Airlines Seat Reservation")
        try:
            self._first_menu()
        except EOFError:
            logger.debug("input closed, leaving menu")
            self.write("Goodbye!")

    def _first_menu(self) -> None:
        while True:
            self.write("")
            for line in FIRST_MENU:
                self.write(line)
            choice = parse_choice(self.read("Enter choice: "))

            if choice == "a":
                self.second_menu(self.outbound, "Outbound")
            elif choice == "b":
                self.second_menu(self.inbound, "Inbound")
            elif choice == "c":
                self.write("Goodbye!")
                return
            elif not choice:
                self.write("Invalid input.")
            else:
                self.write("Invalid choice.")

    def second_menu(self, ledger: SeatLedger, title: str) -> None:
        actions = {
            "a": self.show_num_empty,
            "b": self.show_empty_list,
            "c": self.show_alpha_list,
            "d": self.assign_seat,
            "e": self.delete_seat,
        }
        while True:
            self.write("")
            self.write(f"Second Level Menu - {title}")
            for line in SECOND_MENU:
                self.write(line)
            choice = parse_choice(self.read("Enter choice: "))

            if choice == "f":
                return
            if not choice:
                self.write("Invalid input.")
                continue
            action = actions.get(choice)
            if action is None:
                self.write("Invalid choice.")
                continue
            action(ledger)

    def show_num_empty(self, ledger: SeatLedger) -> None:
        self.write(format_empty_count(ledger))

    def show_empty_list(self, ledger: SeatLedger) -> None:
        self.write(format_empty_list(ledger.list_empty()))

    def show_alpha_list(self, ledger: SeatLedger) -> None:
        self.write(format_alpha_list(ledger.list_assigned_alphabetical()))

    def assign_seat(self, ledger: SeatLedger) -> None:
        self.write("Assign a customer to a seat (enter 0 to cancel)")
        self.show_empty_list(ledger)
        if ledger.count_empty() == 0:
            self.write("No empty seats.")
            return

        seat_no = parse_seat_number(self.read(f"Seat number (1-{SEATS}, 0=cancel): "))
        if seat_no is None:
            self.write("Invalid input.")
            return
        if seat_no == 0:
            self.write("Assignment canceled.")
            return

        # check before asking for names
        try:
            seat = ledger.get_seat(seat_no)
        except SeatOutOfRange:
            self.write("Seat out of range.")
            return
        if seat.assigned:
            self.write(f"Seat {seat_no} is already taken.")
            return

        first = self.read("First name (no spaces): ").strip()
        if not valid_name(first):
            self.write("Invalid input.")
            return
        last = self.read("Last name (no spaces): ").strip()
        if not valid_name(last):
            self.write("Invalid input.")
            return

        try:
            ledger.assign(seat_no, first, last)
        except SeatError as e:
            self.write(describe_error(e))
            return
        self.write(f"Assigned seat {seat_no} to {first} {last}.")

    def delete_seat(self, ledger: SeatLedger) -> None:
        self.write("Delete a seat assignment (enter 0 to cancel)")
        seat_no = parse_seat_number(self.read(f"Seat number to clear (1-{SEATS}, 0=cancel): "))
        if seat_no is None:
            self.write("Invalid input.")
            return
        if seat_no == 0:
            self.write("Delete canceled.")
            return

        try:
            seat = ledger.get_seat(seat_no)
        except SeatOutOfRange:
            self.write("Seat out of range.")
            return
        if not seat.assigned:
            self.write(f"Seat {seat_no} is already empty.")
            return

        answer = parse_choice(
            self.read(f"Confirm delete for seat {seat_no} ({seat.first_name} {seat.last_name})? (y/n): ")
        )
        if answer != "y":
            self.write("No changes made.")
            return

        try:
            ledger.delete(seat_no)
        except SeatError as e:
            self.write(describe_error(e))
            return
        self.write("Seat cleared.")


# ---------------------------
# CLI
# ---------------------------

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

LOG_FORMAT = " | ".join(
    (
        "{time:YYYY-MM-DD HH:mm:ss.SSS}",
        "{level:<8}",
        "{extra[flight]:<8}",
        "{function}:{line} - {message}",
    )
)

# unbound records (no flight) still render
logger.configure(extra={"flight": ""})


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """Send loguru output to stderr (and optionally a file) at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if log_file:
        logger.add(log_file, level=level, format=LOG_FORMAT)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="colossus",
        description="Colossus Airlines seat reservation (outbound and inbound, 24 seats each)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=os.getenv("COLOSSUS_LOG_LEVEL", "WARNING").upper(),
        help="Log level (default: $COLOSSUS_LOG_LEVEL or WARNING)",
    )
    parser.add_argument(
        "--log-file",
        default=os.getenv("COLOSSUS_LOG_FILE") or None,
        help="Also write logs to this file (default: $COLOSSUS_LOG_FILE)",
    )
    return parser


def main(argv: List[str]) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level, args.log_file)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    outbound = SeatLedger("Outbound")
    inbound = SeatLedger("Inbound")
    MenuShell(outbound, inbound).run()
    return 0


def run() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
