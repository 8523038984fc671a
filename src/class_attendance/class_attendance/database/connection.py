from __future__ import annotations

from dataclasses import dataclass

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "class_attendance_db"

    @classmethod
    def from_dict(cls, values: dict) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict; missing keys fall back to defaults."""
        defaults = cls()
        return cls(
            host=str(values.get("host", defaults.host)),
            port=int(values.get("port", defaults.port)),
            user=str(values.get("user", defaults.user)),
            password=str(values.get("password", defaults.password)),
            database=str(values.get("database", defaults.database)),
        )

    def connect_kwargs(self, *, with_database: bool = True) -> dict:
        kwargs = {"host": self.host, "port": self.port, "user": self.user, "password": self.password}
        if with_database:
            kwargs["database"] = self.database
        return kwargs


class DatabaseConnection:
    """Connection factory shared by the MySQL repositories.

    Every repository call opens its own short-lived connection with
    autocommit off; ``db_cursor`` owns commit/rollback.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        return mysql.connector.connect(**self._config.connect_kwargs(), autocommit=False)
