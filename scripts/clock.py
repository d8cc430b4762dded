#!/usr/bin/env python3
"""
Clock in or out for a client from the command line.

Usage:
    python scripts/clock.py in --client "Acme"
    python scripts/clock.py in --client "Acme" --time "2024-01-15 09:00"
    python scripts/clock.py out --time "2024-01-15 17:30"
    python scripts/clock.py status
"""

import argparse
import logging
import os
import sys
from datetime import datetime

# Add parent directory to path to import timely modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from timely.data.database import initialize_db, close_db, get_all_clients
from timely.services.clock_service import ClockService
from timely.utils.errors import TimelyError


def format_timestamp(dt):
    """Format datetime for display"""
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def parse_datetime(time_str):
    """Parse datetime string in various formats"""
    formats = [
        "%Y-%m-%d %H:%M:%S",
        "%Y-%m-%d %H:%M",
        "%d.%m.%Y %H:%M:%S",
        "%d.%m.%Y %H:%M",
    ]
    for fmt in formats:
        try:
            return datetime.strptime(time_str, fmt)
        except ValueError:
            continue
    raise ValueError(f"Could not parse datetime: {time_str}. Supported formats: YYYY-MM-DD HH:MM[:SS], DD.MM.YYYY HH:MM[:SS]")


def find_client(name_or_id):
    """Find a client by id, exact name or unique partial name"""
    clients = list(get_all_clients())
    for client in clients:
        if str(client.id) == name_or_id or client.name.lower() == name_or_id.lower():
            return client

    matches = [c for c in clients if name_or_id.lower() in c.name.lower()]
    if len(matches) == 1:
        return matches[0]
    if matches:
        print(f"❌ Multiple clients match '{name_or_id}':")
        for client in matches:
            print(f"   - {client.name} (id {client.id})")
    else:
        print(f"❌ No client found matching: {name_or_id}")
    return None


def show_status(service):
    entry = service.current_entry()
    if entry is None:
        print("⏸  Not clocked in")
        return
    elapsed = ClockService.format_elapsed(ClockService.elapsed(entry))
    print(f"▶  Clocked in for {entry.client.name} since {format_timestamp(entry.clock_in)} ({elapsed})")


def main():
    parser = argparse.ArgumentParser(description='Clock in/out against a client')
    parser.add_argument('action', choices=['in', 'out', 'status'])
    parser.add_argument('--client', '-c', help='Client name or id (required for "in")')
    parser.add_argument('--time', '-T', help='Timestamp (default: now)')
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING)
    initialize_db()
    service = ClockService()

    try:
        if args.action == 'status':
            show_status(service)
            return 0

        timestamp = parse_datetime(args.time) if args.time else None

        if args.action == 'in':
            if not args.client:
                parser.error('--client is required to clock in')
            client = find_client(args.client)
            if client is None:
                return 1
            entry = service.clock_in(client.id, at=timestamp)
            print(f"✅ Clocked in for {client.name} at {format_timestamp(entry.clock_in)}")
        else:
            entry = service.clock_out(at=timestamp)
            print(f"✅ Clocked out of {entry.client.name} at {format_timestamp(entry.clock_out)}")
            print(f"   Hours: {entry.hours_worked}  Earnings: ${entry.earnings}")
        return 0
    except (TimelyError, ValueError) as e:
        print(f"❌ {e}")
        return 1
    finally:
        close_db()


if __name__ == '__main__':
    sys.exit(main())
