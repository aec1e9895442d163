"""Repository layer responsible for all database access."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable, Optional

from labsched.domain.models import Assignment, LabRequest, Laboratory, ScheduleEntry, TimeSlot
from labsched.domain.slots import parse_slots, serialize_slots
from labsched.utils.config import Settings, get_settings
from labsched.utils.logger import get_logger


logger = get_logger(__name__)


DEMO_LABORATORIES = (
    ("Lab Building A301", 40),
    ("Lab Building A302", 40),
    ("Lab Building B201", 50),
)

# (class_id, student_count, teacher, priority, preferred, excluded)
DEMO_REQUESTS = (
    (
        "B210307",
        33,
        "Zhu Jie",
        1,
        [TimeSlot(9, day, 0) for day in range(5)],
        [TimeSlot(9, 0, 1), TimeSlot(9, 2, 1), TimeSlot(9, 3, 1)],
    ),
    (
        "B210308",
        36,
        "Hu Huijuan",
        2,
        [TimeSlot(9, 0, 0), TimeSlot(9, 1, 0)],
        [TimeSlot(9, 2, 0), TimeSlot(9, 4, 0), TimeSlot(9, 4, 1)],
    ),
    (
        "B210309",
        33,
        "Dai Hua",
        3,
        [TimeSlot(9, 1, 0), TimeSlot(9, 2, 0)],
        [TimeSlot(9, 0, 0), TimeSlot(9, 0, 1), TimeSlot(9, 3, 1)],
    ),
    (
        "B210310",
        33,
        "Xu He",
        4,
        [TimeSlot(9, 1, 0), TimeSlot(9, 2, 0), TimeSlot(9, 4, 0)],
        [TimeSlot(9, 0, 1), TimeSlot(9, 1, 1)],
    ),
)


def _row_to_slot(row: sqlite3.Row) -> TimeSlot:
    return TimeSlot(week=int(row["week"]), day=int(row["day"]), period=int(row["period"]))


def _row_to_request(row: sqlite3.Row) -> LabRequest:
    return LabRequest(
        request_id=int(row["id"]),
        class_id=str(row["class_id"]),
        student_count=int(row["student_count"]),
        teacher=str(row["teacher"]),
        preferred_slots=tuple(parse_slots(str(row["preferred_slots"]))),
        excluded_slots=frozenset(parse_slots(str(row["excluded_slots"]))),
        priority=int(row["priority"]),
    )


def _row_to_assignment(row: sqlite3.Row) -> Assignment:
    return Assignment(
        assignment_id=int(row["id"]),
        request_id=int(row["request_id"]),
        lab_id=int(row["lab_id"]),
        time_slot=_row_to_slot(row),
    )


class DataRepository:
    """Encapsulates SQLite access so scheduling logic stays storage-agnostic."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._db_path = Path(self._settings.database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def database_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._db_path)
        connection.row_factory = sqlite3.Row
        connection.execute("PRAGMA foreign_keys = ON;")
        return connection

    def initialize_database(self) -> None:
        """Create all persistence artifacts before API startup."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS laboratories (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        location TEXT NOT NULL,
                        capacity INTEGER NOT NULL CHECK (capacity > 0),
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS requests (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        class_id TEXT NOT NULL,
                        student_count INTEGER NOT NULL CHECK (student_count > 0),
                        teacher TEXT NOT NULL,
                        preferred_slots TEXT NOT NULL,
                        excluded_slots TEXT NOT NULL DEFAULT '',
                        priority INTEGER NOT NULL,
                        created_at DATETIME DEFAULT CURRENT_TIMESTAMP
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE TABLE IF NOT EXISTS schedules (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        request_id INTEGER NOT NULL UNIQUE,
                        lab_id INTEGER NOT NULL,
                        week INTEGER NOT NULL,
                        day INTEGER NOT NULL,
                        period INTEGER NOT NULL,
                        UNIQUE (lab_id, week, day, period),
                        FOREIGN KEY (request_id) REFERENCES requests(id) ON DELETE CASCADE,
                        FOREIGN KEY (lab_id) REFERENCES laboratories(id) ON DELETE CASCADE
                    );
                    """
                )

                cursor.execute(
                    """
                    CREATE INDEX IF NOT EXISTS idx_requests_priority
                    ON requests(priority, id);
                    """
                )
                conn.commit()
            logger.info("Database initialized at %s", self._db_path)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Database initialization failed: {exc}") from exc

    def seed_demo_data_if_empty(self) -> int:
        """Seed the reference laboratories and requests when no labs exist.

        Returns the number of requests inserted (0 when seeding was skipped).
        """
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) AS count FROM laboratories;")
                if int(cursor.fetchone()["count"]) > 0:
                    logger.info("Laboratory data already present; skipping demo seed")
                    return 0

                cursor.executemany(
                    "INSERT INTO laboratories (location, capacity) VALUES (?, ?);",
                    DEMO_LABORATORIES,
                )
                cursor.executemany(
                    """
                    INSERT INTO requests (
                        class_id,
                        student_count,
                        teacher,
                        preferred_slots,
                        excluded_slots,
                        priority
                    )
                    VALUES (?, ?, ?, ?, ?, ?);
                    """,
                    [
                        (
                            class_id,
                            student_count,
                            teacher,
                            serialize_slots(preferred),
                            serialize_slots(excluded),
                            priority,
                        )
                        for class_id, student_count, teacher, priority, preferred, excluded
                        in DEMO_REQUESTS
                    ],
                )
                conn.commit()
            logger.info(
                "Demo seed completed | laboratories=%s | requests=%s",
                len(DEMO_LABORATORIES),
                len(DEMO_REQUESTS),
            )
            return len(DEMO_REQUESTS)
        except sqlite3.Error as exc:
            raise RuntimeError(f"Demo data seeding failed: {exc}") from exc

    # Laboratories

    def add_laboratory(self, location: str, capacity: int) -> int:
        """Insert laboratory row and return the created id."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO laboratories (location, capacity) VALUES (?, ?);",
                (location, capacity),
            )
            conn.commit()
            return int(cursor.lastrowid)

    def delete_laboratory(self, lab_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM laboratories WHERE id = ?;", (lab_id,))
            conn.commit()
            return cursor.rowcount > 0

    def list_laboratories(self) -> list[Laboratory]:
        """Return laboratories in creation order, which is the room scan order."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, location, capacity
                FROM laboratories
                ORDER BY id ASC;
                """
            )
            return [
                Laboratory(
                    lab_id=int(row["id"]),
                    location=str(row["location"]),
                    capacity=int(row["capacity"]),
                )
                for row in cursor.fetchall()
            ]

    def get_laboratory(self, lab_id: int) -> Optional[Laboratory]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id, location, capacity FROM laboratories WHERE id = ?;",
                (lab_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return Laboratory(
                lab_id=int(row["id"]),
                location=str(row["location"]),
                capacity=int(row["capacity"]),
            )

    # Requests

    def add_request(
        self,
        class_id: str,
        student_count: int,
        teacher: str,
        preferred_slots: Iterable[TimeSlot],
        excluded_slots: Iterable[TimeSlot],
        priority: int,
    ) -> int:
        """Insert request row and return the created id."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO requests (
                    class_id,
                    student_count,
                    teacher,
                    preferred_slots,
                    excluded_slots,
                    priority
                )
                VALUES (?, ?, ?, ?, ?, ?);
                """,
                (
                    class_id,
                    student_count,
                    teacher,
                    serialize_slots(preferred_slots),
                    serialize_slots(sorted(excluded_slots)),
                    priority,
                ),
            )
            conn.commit()
            return int(cursor.lastrowid)

    def delete_request(self, request_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM requests WHERE id = ?;", (request_id,))
            conn.commit()
            return cursor.rowcount > 0

    def list_requests(self) -> list[LabRequest]:
        """Return requests by ascending priority; ties keep insertion order."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT
                    id,
                    class_id,
                    student_count,
                    teacher,
                    preferred_slots,
                    excluded_slots,
                    priority
                FROM requests
                ORDER BY priority ASC, id ASC;
                """
            )
            return [_row_to_request(row) for row in cursor.fetchall()]

    def get_request(self, request_id: int) -> Optional[LabRequest]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT
                    id,
                    class_id,
                    student_count,
                    teacher,
                    preferred_slots,
                    excluded_slots,
                    priority
                FROM requests
                WHERE id = ?;
                """,
                (request_id,),
            )
            row = cursor.fetchone()
            if row is None:
                return None
            return _row_to_request(row)

    def next_priority(self) -> int:
        """Return one past the largest stored priority (1 for an empty table)."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT MAX(priority) AS max_priority FROM requests;")
            row = cursor.fetchone()
            if row is None or row["max_priority"] is None:
                return 1
            return int(row["max_priority"]) + 1

    # Assignments

    def clear_assignments(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM schedules;")
                conn.commit()
        except sqlite3.Error as exc:
            raise RuntimeError(f"Clearing schedules failed: {exc}") from exc

    def add_assignment(self, request_id: int, lab_id: int, time_slot: TimeSlot) -> bool:
        """Persist one committed room/slot; storage errors are reported as False."""
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO schedules (request_id, lab_id, week, day, period)
                    VALUES (?, ?, ?, ?, ?);
                    """,
                    (request_id, lab_id, time_slot.week, time_slot.day, time_slot.period),
                )
                conn.commit()
            return True
        except sqlite3.Error as exc:
            logger.warning(
                "Assignment write failed | request_id=%s | lab_id=%s | slot=%s | error=%s",
                request_id,
                lab_id,
                time_slot,
                exc,
            )
            return False

    def list_assignments(self) -> list[Assignment]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, request_id, lab_id, week, day, period
                FROM schedules
                ORDER BY id ASC;
                """
            )
            return [_row_to_assignment(row) for row in cursor.fetchall()]

    def list_assignments_by_lab(self, lab_id: int) -> list[Assignment]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, request_id, lab_id, week, day, period
                FROM schedules
                WHERE lab_id = ?
                ORDER BY week ASC, day ASC, period ASC;
                """,
                (lab_id,),
            )
            return [_row_to_assignment(row) for row in cursor.fetchall()]

    def list_assignments_by_class(self, class_id: str) -> list[Assignment]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT s.id, s.request_id, s.lab_id, s.week, s.day, s.period
                FROM schedules AS s
                INNER JOIN requests AS r ON r.id = s.request_id
                WHERE r.class_id = ?
                ORDER BY s.week ASC, s.day ASC, s.period ASC;
                """,
                (class_id,),
            )
            return [_row_to_assignment(row) for row in cursor.fetchall()]

    def list_schedule_entries(
        self,
        lab_id: Optional[int] = None,
        class_id: Optional[str] = None,
    ) -> list[ScheduleEntry]:
        """Return assignments joined with request and laboratory details."""
        clauses: list[str] = []
        params: list[object] = []
        if lab_id is not None:
            clauses.append("s.lab_id = ?")
            params.append(lab_id)
        if class_id is not None:
            clauses.append("r.class_id = ?")
            params.append(class_id)
        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT
                    s.id,
                    s.request_id,
                    r.class_id,
                    r.teacher,
                    s.lab_id,
                    l.location,
                    s.week,
                    s.day,
                    s.period
                FROM schedules AS s
                INNER JOIN requests AS r ON r.id = s.request_id
                INNER JOIN laboratories AS l ON l.id = s.lab_id
                {where_sql}
                ORDER BY s.week ASC, s.day ASC, s.period ASC, s.lab_id ASC;
                """,
                tuple(params),
            )
            return [
                ScheduleEntry(
                    assignment_id=int(row["id"]),
                    request_id=int(row["request_id"]),
                    class_id=str(row["class_id"]),
                    teacher=str(row["teacher"]),
                    lab_id=int(row["lab_id"]),
                    location=str(row["location"]),
                    time_slot=_row_to_slot(row),
                )
                for row in cursor.fetchall()
            ]

    def clear_all_data(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM schedules;")
                conn.execute("DELETE FROM requests;")
                conn.execute("DELETE FROM laboratories;")
                conn.commit()
        except sqlite3.Error as exc:
            raise RuntimeError(f"Clearing data failed: {exc}") from exc

    def count_assignments(self) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT COUNT(*) AS count FROM schedules;")
            return int(cursor.fetchone()["count"])
