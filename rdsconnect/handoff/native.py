"""Minimal SQL REPL used when neither pgcli nor psql is installed."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any, TextIO

import psycopg2
from prompt_toolkit import PromptSession

from rdsconnect.constants import (
    NATIVE_CONNECT_TIMEOUT_SECONDS,
    NATIVE_EXIT_KEYWORDS,
    NATIVE_PROBE_QUERY,
)
from rdsconnect.exceptions import ConnectionFailedError
from rdsconnect.models import Credentials, InstanceRecord

logger = logging.getLogger(__name__)


def format_value(value: Any) -> str:
    return "NULL" if value is None else str(value)


def format_row(values: list[Any] | tuple[Any, ...]) -> str:
    return " | ".join(format_value(v) for v in values)


class NativeRepl:
    """Read-evaluate-print loop over a direct psycopg2 connection.

    Parameters
    ----------
    instance : InstanceRecord
        Target instance
    credentials : Credentials
        Login for the instance
    database : str
        Database name
    connect : Callable[..., Any] | None
        Optional connection factory. If None, uses psycopg2.connect
    session_factory : Callable[[], Any] | None
        Optional prompt session factory. If None, uses PromptSession
    output : TextIO | None
        Stream for results, stdout by default
    """

    def __init__(
        self,
        instance: InstanceRecord,
        credentials: Credentials,
        database: str,
        connect: Callable[..., Any] | None = None,
        session_factory: Callable[[], Any] | None = None,
        output: TextIO | None = None,
    ) -> None:
        self.instance = instance
        self.credentials = credentials
        self.database = database
        self._connect = connect or psycopg2.connect
        self._session_factory = session_factory or PromptSession
        self.output = output or sys.stdout
        self.connection: Any = None

    def open(self) -> None:
        """Connect with TLS required and verify the connection with a probe.

        Raises
        ------
        ConnectionFailedError
            If connecting or the probe query fails
        """
        try:
            self.connection = self._connect(
                host=self.instance.host,
                port=self.instance.port,
                user=self.credentials.username,
                password=self.credentials.password,
                dbname=self.database,
                sslmode="require",
                connect_timeout=NATIVE_CONNECT_TIMEOUT_SECONDS,
            )
            self.connection.autocommit = True

            with self.connection.cursor() as cursor:
                cursor.execute(NATIVE_PROBE_QUERY)
                cursor.fetchone()
        except psycopg2.Error as e:
            self.close()
            raise ConnectionFailedError(
                f"connection to {self.instance.host} failed: {str(e).strip()}"
            ) from e

    def close(self) -> None:
        if self.connection is not None:
            try:
                self.connection.close()
            except psycopg2.Error as e:
                logger.debug("Error closing connection: %s", e)
            self.connection = None

    def execute_and_print(self, query: str) -> None:
        """Run query and print the header followed by one line per row.

        Query errors are printed and swallowed so the loop can continue.
        """
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query)

                if cursor.description is None:
                    print(cursor.statusmessage, file=self.output)
                    return

                print(format_row([col[0] for col in cursor.description]), file=self.output)
                for row in cursor.fetchall():
                    print(format_row(row), file=self.output)
        except psycopg2.Error as e:
            print(f"ERROR: {str(e).strip()}", file=self.output)

            if self.connection.closed:
                raise ConnectionFailedError(
                    f"connection to {self.instance.host} lost"
                ) from e

    def loop(self) -> None:
        session = self._session_factory()
        prompt = f"{self.database}=> "

        while True:
            try:
                line = session.prompt(prompt)
            except KeyboardInterrupt:
                continue
            except EOFError:
                break

            query = line.strip()
            if not query:
                continue
            if query.lower() in NATIVE_EXIT_KEYWORDS:
                break

            self.execute_and_print(query)

    def run(self) -> None:
        """Open the connection, run the REPL and close the connection.

        Raises
        ------
        ConnectionFailedError
            If the connection cannot be established or is lost
        """
        self.open()
        print(f"Connected to {self.instance.host} (native mode)", file=self.output)

        try:
            self.loop()
        finally:
            self.close()
