"""
Database module for Timely application.
Uses SQLCipher for transparent AES-256 encryption at rest when a key is configured.
"""
import datetime
import decimal
import logging
import os

from peewee import (
    Model, CharField, DateTimeField, DecimalField, ForeignKeyField, IntegrityError, PeeweeException
)

from ..utils.errors import ConflictError, DatabaseError, InvalidActionError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Environment variables for the encryption key and database location
ENV_KEY_NAME = "TIMELY_ENV_KEY"
DB_FILE_ENV = "TIMELY_DB_FILE"
DB_FILE = os.getenv(DB_FILE_ENV, "timely.db")

CENTS = decimal.Decimal("0.01")
SECONDS_PER_HOUR = decimal.Decimal(3600)


def _get_database():
    """
    Create and return the appropriate database connection.
    Uses SQLCipher if TIMELY_ENV_KEY is set, otherwise falls back to plain SQLite.
    """
    passphrase = os.getenv(ENV_KEY_NAME)

    if passphrase:
        try:
            from playhouse.sqlcipher_ext import SqlCipherDatabase
            logger.info("SQLCipher encryption enabled")
            return SqlCipherDatabase(
                DB_FILE,
                passphrase=passphrase,
                pragmas={
                    'kdf_iter': 256000,
                    'cipher_page_size': 4096,
                    'cipher_use_hmac': True,
                    'foreign_keys': 1,
                }
            )
        except ImportError:
            logger.error(
                "SQLCipher not available! Install with: pip install sqlcipher3-binary\n"
                "Database will NOT be encrypted."
            )
    elif DB_FILE != ":memory:":
        logger.warning(
            f"No encryption key set. Set {ENV_KEY_NAME} environment variable "
            "for encrypted database. Running with UNENCRYPTED database!"
        )

    from peewee import SqliteDatabase
    return SqliteDatabase(DB_FILE, pragmas={'foreign_keys': 1})


# Initialize database connection
db = _get_database()


class BaseModel(Model):
    class Meta:
        database = db


class Client(BaseModel):
    name = CharField(max_length=100, null=False)
    hourly_rate = DecimalField(max_digits=10, decimal_places=2, auto_round=True, null=False)
    created_at = DateTimeField(default=datetime.datetime.now, null=False)

    def __str__(self):
        return f"{self.name} ({self.hourly_rate}/h)"


class TimeEntry(BaseModel):
    client = ForeignKeyField(Client, backref='time_entries', on_delete='CASCADE', null=False)
    clock_in = DateTimeField(null=False, index=True)
    clock_out = DateTimeField(null=True)
    hours_worked = DecimalField(max_digits=10, decimal_places=2, auto_round=True, null=True)
    earnings = DecimalField(max_digits=12, decimal_places=2, auto_round=True, null=True)
    created_at = DateTimeField(default=datetime.datetime.now, null=False)

    class Meta:
        indexes = (
            (('client', 'clock_in'), False),  # Composite index for range queries
        )

    def __str__(self):
        end = self.clock_out or "open"
        return f"{self.client.name} - {self.clock_in} -> {end}"

    @property
    def is_open(self):
        return self.clock_out is None


MODELS = [Client, TimeEntry]


def is_encrypted() -> bool:
    """Check if the database is using SQLCipher encryption."""
    try:
        from playhouse.sqlcipher_ext import SqlCipherDatabase
        return isinstance(db, SqlCipherDatabase)
    except ImportError:
        return False


def ensure_db_connection():
    """Ensure database connection is open"""
    if db.is_closed():
        try:
            db.connect(reuse_if_open=True)
            logger.debug("Database connection opened")
        except Exception as e:
            logger.error(f"Failed to open database connection: {e}")
            raise


def initialize_db():
    """Initialize database connection and create tables"""
    try:
        ensure_db_connection()

        if is_encrypted():
            logger.info("Database is ENCRYPTED with SQLCipher")

        db.create_tables(MODELS, safe=True)
        logger.info("Database initialized successfully")
    except PeeweeException as e:
        logger.error(f"Database initialization failed: {e}")
        raise DatabaseError(f"Database initialization failed: {e}") from e


def close_db():
    """Close database connection"""
    if not db.is_closed():
        db.close()
        logger.info("Database connection closed")


def _to_decimal(value, field_name):
    try:
        return decimal.Decimal(str(value)).quantize(CENTS, rounding=decimal.ROUND_HALF_UP)
    except (decimal.InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"{field_name} must be a number")


def _validate_client_fields(name, hourly_rate):
    if not name or len(name.strip()) == 0:
        raise ValidationError("Client name cannot be empty")
    rate = _to_decimal(hourly_rate, "Hourly rate")
    if rate <= 0:
        raise ValidationError("Hourly rate must be greater than zero")
    return name.strip(), rate


# --- Clients ---

def get_all_clients():
    """Get all clients, newest first"""
    ensure_db_connection()
    return Client.select().order_by(Client.created_at.desc(), Client.id.desc())


def get_client(client_id):
    """Safely get a client by id"""
    ensure_db_connection()
    try:
        return Client.get_by_id(client_id)
    except Client.DoesNotExist:
        return None


def create_client(name, hourly_rate):
    """Create a new client with validation"""
    name, rate = _validate_client_fields(name, hourly_rate)
    ensure_db_connection()

    try:
        with db.atomic():
            client = Client.create(name=name, hourly_rate=rate)
            logger.info(f"Client created: {client.name} ({client.hourly_rate}/h)")
            return client
    except IntegrityError as e:
        logger.error(f"Failed to create client (integrity error): {e}")
        raise DatabaseError(f"Failed to create client: {e}") from e


def update_client(client_id, name, hourly_rate):
    """Rename a client and/or change its hourly rate"""
    name, rate = _validate_client_fields(name, hourly_rate)
    client = get_client(client_id)
    if client is None:
        raise NotFoundError(f"Client {client_id} not found")

    try:
        with db.atomic():
            client.name = name
            client.hourly_rate = rate
            client.save()
    except PeeweeException as e:
        logger.error(f"Failed to update client {client_id}: {e}")
        raise DatabaseError(f"Failed to update client {client_id}: {e}") from e
    logger.info(f"Client {client_id} updated: {name} ({rate}/h)")
    return client


def delete_client(client_id):
    """
    Delete a client together with all of its time entries.

    Returns:
        Number of time entries removed alongside the client
    """
    client = get_client(client_id)
    if client is None:
        raise NotFoundError(f"Client {client_id} not found")

    try:
        with db.atomic():
            removed = TimeEntry.delete().where(TimeEntry.client == client).execute()
            client.delete_instance()
    except PeeweeException as e:
        logger.error(f"Failed to delete client {client_id}: {e}")
        raise DatabaseError(f"Failed to delete client {client_id}: {e}") from e
    logger.info(f"Client deleted: {client.name} ({removed} time entries)")
    return removed


# --- Time entries ---

def get_open_time_entry():
    """Get the currently open session (no clock-out), if any"""
    ensure_db_connection()
    return TimeEntry.select().where(
        TimeEntry.clock_out.is_null()
    ).order_by(TimeEntry.clock_in.desc()).first()


def create_time_entry(client, clock_in=None):
    """
    Open a new session for a client.

    Raises:
        ConflictError: another session is still open
    """
    ensure_db_connection()

    with db.atomic():
        open_entry = get_open_time_entry()
        if open_entry is not None:
            raise ConflictError(
                f"Already clocked in for {open_entry.client.name} since "
                f"{open_entry.clock_in:%Y-%m-%d %H:%M}"
            )
        timestamp = clock_in or datetime.datetime.now()
        entry = TimeEntry.create(client=client, clock_in=timestamp)
    logger.info(f"Time entry created: {client.name} - IN @ {timestamp}")
    return entry


def compute_hours_and_earnings(clock_in, clock_out, hourly_rate):
    """
    Hours worked and earnings for a session, both rounded to cents.
    Earnings use the unrounded duration.
    """
    seconds = decimal.Decimal(str((clock_out - clock_in).total_seconds()))
    hours = seconds / SECONDS_PER_HOUR
    rate = decimal.Decimal(str(hourly_rate))
    return (
        hours.quantize(CENTS, rounding=decimal.ROUND_HALF_UP),
        (hours * rate).quantize(CENTS, rounding=decimal.ROUND_HALF_UP),
    )


def close_time_entry(entry_id, clock_out=None):
    """
    Close an open session, storing clock-out, hours worked and earnings together.

    Raises:
        NotFoundError: no such entry
        InvalidActionError: entry already closed or clock-out before clock-in
    """
    ensure_db_connection()
    try:
        entry = TimeEntry.get_by_id(entry_id)
    except TimeEntry.DoesNotExist:
        raise NotFoundError(f"Time entry {entry_id} not found")

    if not entry.is_open:
        raise InvalidActionError(f"Time entry {entry_id} is already clocked out")

    clock_out = clock_out or datetime.datetime.now()
    if clock_out < entry.clock_in:
        raise InvalidActionError("Clock-out cannot be earlier than clock-in")

    hours, earnings = compute_hours_and_earnings(entry.clock_in, clock_out, entry.client.hourly_rate)
    with db.atomic():
        entry.clock_out = clock_out
        entry.hours_worked = hours
        entry.earnings = earnings
        entry.save()
    logger.info(f"Time entry closed: {entry.client.name} - OUT @ {clock_out} ({hours} h, {earnings})")
    return entry


def get_time_entries(client, start_date, end_date):
    """
    Get a client's time entries whose clock-in falls within [start_date, end_date].

    Args:
        client: Client object or id
        start_date: datetime.date, inclusive
        end_date: datetime.date, inclusive

    Returns:
        List of TimeEntry objects ordered by clock-in
    """
    ensure_db_connection()
    start_datetime = datetime.datetime.combine(start_date, datetime.time.min)
    end_datetime = datetime.datetime.combine(end_date, datetime.time.max)
    return list(TimeEntry.select().where(
        TimeEntry.client == client,
        TimeEntry.clock_in >= start_datetime,
        TimeEntry.clock_in <= end_datetime,
    ).order_by(TimeEntry.clock_in.asc()))
