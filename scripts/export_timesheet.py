#!/usr/bin/env python3
"""
Export a client's timesheet for a date range.

Usage:
    python scripts/export_timesheet.py --client 3 --from 2024-01-01 --to 2024-01-07
    python scripts/export_timesheet.py --client 3 --from 2024-01-01 --to 2024-01-31 --print-only
    python scripts/export_timesheet.py --client 3 --from 2024-01-01 --to 2024-01-31 --encrypt --out /tmp

Without --from/--to the current week (Monday to Friday) is exported.
"""
import argparse
import getpass
import logging
import os
import sys

# Add parent directory to path to import timely modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from timely.data.database import initialize_db, close_db
from timely.services.export_service import ExportRequest, ExportService, default_export_range
from timely.services.settings_service import SettingsService
from timely.utils.errors import TimelyError
from timely.utils.export_utils import has_export_passphrase, set_runtime_export_passphrase


def main():
    monday, friday = default_export_range()
    parser = argparse.ArgumentParser(description='Export a timesheet PDF for a client')
    parser.add_argument('--client', '-c', required=True, help='Client id')
    parser.add_argument('--from', dest='start', default=monday.isoformat(), help='Start date (YYYY-MM-DD)')
    parser.add_argument('--to', dest='end', default=friday.isoformat(), help='End date (YYYY-MM-DD)')
    parser.add_argument('--out', '-o', help='Target directory (default: TIMELY_EXPORT_PATH, USB drive or ./exports)')
    parser.add_argument('--print-only', action='store_true', help='Print the timesheet instead of writing a PDF')
    parser.add_argument('--encrypt', action='store_true', help='Encrypt the PDF with the export passphrase')
    parser.add_argument('--verbose', '-v', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    if args.encrypt and not has_export_passphrase():
        set_runtime_export_passphrase(getpass.getpass("Export passphrase: "))

    initialize_db()
    service = ExportService(theme=SettingsService().load())
    request = ExportRequest(args.client, args.start, args.end)

    try:
        if args.print_only:
            print(service.preview(request).to_text())
        else:
            path = service.export_to_directory(request, directory=args.out, encrypt=args.encrypt)
            print(f"✅ Timesheet written to {path}")
        return 0
    except TimelyError as e:
        print(f"❌ {e}")
        return 1
    finally:
        close_db()


if __name__ == '__main__':
    sys.exit(main())
