#!/usr/bin/env python3
"""
List, add, update or delete clients.

Usage:
    python scripts/manage_clients.py list
    python scripts/manage_clients.py add "Acme & Co." 85
    python scripts/manage_clients.py update 3 --name "Acme Corp" --rate 90
    python scripts/manage_clients.py delete 3 [--yes]
"""
import argparse
import logging
import os
import sys

# Add parent directory to path to import timely modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from timely.data.database import (
    initialize_db, close_db, get_all_clients, get_client,
    create_client, update_client, delete_client, TimeEntry
)
from timely.utils.errors import TimelyError


def list_clients():
    clients = list(get_all_clients())
    if not clients:
        print("\nNo clients found.")
        return

    print(f"\n{'='*70}")
    print(f"{'ID':<6} {'Name':<36} {'Rate/h':>10} {'Entries':>10}")
    print(f"{'-'*70}")
    for client in clients:
        entries = TimeEntry.select().where(TimeEntry.client == client).count()
        print(f"{client.id:<6} {client.name:<36} {client.hourly_rate:>10} {entries:>10}")
    print(f"{'='*70}\n")


def confirm_delete(client):
    """Ask for confirmation before deleting"""
    entries = TimeEntry.select().where(TimeEntry.client == client).count()
    print(f"⚠️  Deleting {client.name} will also delete {entries} time entries.")
    response = input("Type 'yes' to confirm: ").strip().lower()
    return response == 'yes'


def main():
    parser = argparse.ArgumentParser(description='Manage clients')
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='List all clients')

    add = sub.add_parser('add', help='Add a client')
    add.add_argument('name')
    add.add_argument('rate', help='Hourly rate')

    upd = sub.add_parser('update', help='Rename a client or change its rate')
    upd.add_argument('id', type=int)
    upd.add_argument('--name')
    upd.add_argument('--rate')

    rm = sub.add_parser('delete', help='Delete a client and its time entries')
    rm.add_argument('id', type=int)
    rm.add_argument('--yes', action='store_true', help='Skip confirmation')

    args = parser.parse_args()
    logging.basicConfig(level=logging.WARNING)
    initialize_db()

    try:
        if args.command == 'list':
            list_clients()
        elif args.command == 'add':
            client = create_client(args.name, args.rate)
            print(f"✅ Client created: {client.name} (id {client.id}, ${client.hourly_rate}/h)")
        elif args.command == 'update':
            client = get_client(args.id)
            if client is None:
                print(f"❌ No client with id {args.id}")
                return 1
            client = update_client(
                args.id,
                args.name if args.name is not None else client.name,
                args.rate if args.rate is not None else client.hourly_rate,
            )
            print(f"✅ Client updated: {client.name} (${client.hourly_rate}/h)")
        elif args.command == 'delete':
            client = get_client(args.id)
            if client is None:
                print(f"❌ No client with id {args.id}")
                return 1
            if not args.yes and not confirm_delete(client):
                print("Cancelled.")
                return 1
            removed = delete_client(args.id)
            print(f"✅ Deleted {client.name} and {removed} time entries")
        return 0
    except TimelyError as e:
        print(f"❌ {e}")
        return 1
    finally:
        close_db()


if __name__ == '__main__':
    sys.exit(main())
