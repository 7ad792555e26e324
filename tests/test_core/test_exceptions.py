"""
Tests for exception taxonomy, HTTP mapping and general utilities.
"""

import pytest
from fastapi import HTTPException
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError

from core.exceptions import (
    AppException,
    DatabaseException,
    DuplicateException,
    NotFoundException,
    ProgrammerException,
    ValidationException,
)
from core.http import to_http_exception
from core.utils import gen_uuid_str, is_unique_violation, to_values


class TestExceptions:
    """Tests for exception messages and status codes."""

    def test_not_found_message(self):
        """Test NotFoundException includes resource and identifier."""
        e = NotFoundException(resource="UserORM", identifier="42")

        assert e.message == "UserORM no encontrado: 42"
        assert e.status_code == 404

    def test_duplicate_is_conflict(self):
        """Test DuplicateException maps to 409."""
        e = DuplicateException(resource="UserORM")

        assert e.status_code == 409
        assert "ya existe" in e.message

    def test_validation_field_in_details(self):
        """Test ValidationException stores the offending field."""
        e = ValidationException("limit inválido", field="limit")

        assert e.status_code == 422
        assert e.details == {"field": "limit"}

    @pytest.mark.parametrize(
        "exc",
        [
            DatabaseException(),
            ProgrammerException("mal uso"),
            NotFoundException(resource="X"),
        ],
    )
    def test_all_are_app_exceptions(self, exc):
        """Test every exception derives from AppException."""
        assert isinstance(exc, AppException)
        assert str(exc) == exc.message


class TestHttpMapping:
    """Tests for to_http_exception."""

    @pytest.mark.parametrize(
        "exc,status_code",
        [
            (NotFoundException(resource="UserORM", identifier="1"), 404),
            (DuplicateException(resource="UserORM"), 409),
            (ValidationException("bad"), 422),
            (DatabaseException(), 500),
        ],
    )
    def test_app_exceptions(self, exc, status_code):
        """Test AppException status codes are kept."""
        http_exc = to_http_exception(exc)

        assert isinstance(http_exc, HTTPException)
        assert http_exc.status_code == status_code
        assert http_exc.detail == exc.message

    def test_unexpected_exception(self):
        """Test unknown errors become a generic 500."""
        http_exc = to_http_exception(RuntimeError("secret"))

        assert http_exc.status_code == 500
        assert "secret" not in http_exc.detail


class _DriverError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


class TestUtils:
    """Tests for core.utils helpers."""

    def test_unique_violation_by_sqlstate(self):
        """Test SQLSTATE 23505 is a unique violation."""
        error = IntegrityError("INSERT", {}, _DriverError("duplicate key", sqlstate="23505"))

        assert is_unique_violation(error) is True

    def test_unique_violation_by_message(self):
        """Test the SQLite message is recognised."""
        error = IntegrityError("INSERT", {}, _DriverError("UNIQUE constraint failed: users.email"))

        assert is_unique_violation(error) is True

    def test_not_null_is_not_unique_violation(self):
        """Test other integrity errors are not conflicts."""
        error = IntegrityError("INSERT", {}, _DriverError("NOT NULL constraint failed: users.name"))

        assert is_unique_violation(error) is False

    def test_not_null_on_unique_named_column(self):
        """Test a NOT NULL failure on a column named *unique* is not a conflict."""
        error = IntegrityError(
            "INSERT", {}, _DriverError("NOT NULL constraint failed: users.unique_field")
        )

        assert is_unique_violation(error) is False

    def test_other_sqlstate_wins_over_message(self):
        """Test a non-23505 SQLSTATE is not a conflict whatever the message says."""
        error = IntegrityError(
            "INSERT",
            {},
            _DriverError(
                'null value in column "unique_code" violates not-null constraint',
                sqlstate="23502",
            ),
        )

        assert is_unique_violation(error) is False

    def test_to_values_mapping_copy(self):
        """Test mappings are copied."""
        source = {"name": "Alice"}
        values = to_values(source)

        values["name"] = "Bob"
        assert source["name"] == "Alice"

    def test_to_values_pydantic_exclude_unset(self):
        """Test pydantic models only contribute assigned fields."""
        class Dto(BaseModel):
            name: str
            email: str = "x@x.com"

        assert to_values(Dto(name="Alice")) == {"name": "Alice"}

    def test_to_values_rejects_other_types(self):
        """Test unsupported inputs raise TypeError."""
        with pytest.raises(TypeError):
            to_values(["name", "Alice"])

    def test_gen_uuid_str_unique(self):
        """Test generated ids are distinct 36-char strings."""
        ids = {gen_uuid_str() for _ in range(100)}

        assert len(ids) == 100
        assert all(len(i) == 36 for i in ids)
