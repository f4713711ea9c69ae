"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from apex_chat.exceptions import (
    ApexChatError,
    ApiError,
    ConfigError,
    ConfigValidationError,
    NetworkError,
    ReadError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        for cls in (ConfigError, ReadError, ApiError, NetworkError, ConfigValidationError):
            self.assertTrue(issubclass(cls, ApexChatError))
        self.assertTrue(issubclass(ApexChatError, RuntimeError))

    def test_api_error_keeps_status_code(self) -> None:
        error = ApiError("rate limited", status_code=429)
        self.assertEqual(str(error), "rate limited")
        self.assertEqual(error.status_code, 429)
        self.assertIsNone(ApiError("malformed").status_code)


if __name__ == "__main__":
    unittest.main()
