#!/usr/bin/env python3

import logging

import pytest

from ecore_to_graphql.cli_utils import configure_logging, reconstruct_command_line
from ecore_to_graphql.ecore_to_graphql import ecore_to_graphql


class TestCliUtils:
    """Test cases for CLI utilities"""

    def test_reconstruct_command_line_without_context(self):
        """Without an active Click context only the command name is returned"""
        assert reconstruct_command_line(ecore_to_graphql) == "ecore_to_graphql"

    def test_configure_logging(self):
        configure_logging(debug=True)
        assert logging.getLogger().level == logging.DEBUG
        configure_logging()
        assert logging.getLogger().level == logging.INFO


if __name__ == "__main__":
    pytest.main([__file__])
