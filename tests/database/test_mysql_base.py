import mysql.connector
import pytest
from mysql.connector import errorcode

from src.checkin_system.checkin_system.core.exceptions import (
    DuplicateKeyError,
    RepositoryError,
    RepositoryTimeoutError,
)
from src.checkin_system.checkin_system.database.bootstrap import iter_sql_statements
from src.checkin_system.checkin_system.database.mysql_base import in_clause, translate_error


def test_duplicate_entry_maps_to_duplicate_key():
    exc = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    assert isinstance(translate_error(exc), DuplicateKeyError)


@pytest.mark.parametrize("errno", [errorcode.CR_SERVER_LOST, errorcode.ER_LOCK_WAIT_TIMEOUT, 3024])
def test_timeouts_map_to_timeout_error(errno):
    exc = mysql.connector.OperationalError(msg="timeout", errno=errno)
    assert isinstance(translate_error(exc), RepositoryTimeoutError)


def test_other_errors_stay_generic():
    err = translate_error(mysql.connector.ProgrammingError(msg="syntax", errno=errorcode.ER_PARSE_ERROR))
    assert type(err) is RepositoryError


def test_in_clause():
    assert in_clause(["a", "b", "c"]) == "%s, %s, %s"
    with pytest.raises(ValueError):
        in_clause([])


def test_sql_split_ignores_semicolons_in_quotes():
    sql = "INSERT INTO t VALUES ('a;b');\nCREATE TABLE `x;y` (id INT);\nSELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        "CREATE TABLE `x;y` (id INT)",
        "SELECT 1",
    ]
