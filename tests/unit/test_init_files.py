"""
Unit tests for __init__.py files

This module provides tests for package initialization files to ensure:
- Version attributes are defined
- __all__ exports are correct
- Module imports work without errors
"""

import importlib

import pytest


class TestRowcheckInit:
    """Test rowcheck/__init__.py"""

    def test_version_attribute_exists(self):
        """Test that __version__ attribute is defined"""
        # Arrange & Act
        import rowcheck

        # Assert
        assert isinstance(rowcheck.__version__, str)
        assert rowcheck.__version__ == "1.0.0"

    def test_all_exports_resolve(self):
        """Test that every name in __all__ is importable from the package"""
        # Arrange
        import rowcheck

        # Act & Assert
        assert "assert_row_counts" in rowcheck.__all__
        assert "run_check" in rowcheck.__all__
        for name in rowcheck.__all__:
            assert getattr(rowcheck, name) is not None


class TestCheckInit:
    """Test rowcheck/check/__init__.py"""

    def test_all_exports_resolve(self):
        """Test that the check package re-exports its public API"""
        # Arrange
        import rowcheck.check

        # Act & Assert
        for name in rowcheck.check.__all__:
            assert hasattr(rowcheck.check, name), name

    def test_top_level_and_check_share_objects(self):
        """Test the top-level exports are the same objects as in rowcheck.check"""
        import rowcheck
        import rowcheck.check

        assert rowcheck.assert_row_counts is rowcheck.check.assert_row_counts
        assert rowcheck.Severity is rowcheck.check.Severity


class TestStorageInit:
    """Test rowcheck/storage/__init__.py"""

    def test_backends(self):
        import rowcheck.storage

        assert rowcheck.storage.BACKENDS == ("postgresql", "sqlserver")
        assert "create_store" in rowcheck.storage.__all__


class TestUtilsInit:
    """Test rowcheck/utils/__init__.py"""

    def test_submodules_can_be_imported(self):
        """Test that submodules listed in __all__ can be imported"""
        # Arrange
        import rowcheck.utils

        # Act & Assert
        for module_name in rowcheck.utils.__all__:
            try:
                module = importlib.import_module(f"rowcheck.utils.{module_name}")
                assert module is not None
            except ImportError as e:
                pytest.fail(f"Failed to import rowcheck.utils.{module_name}: {e}")


class TestCliInit:
    """Test rowcheck/cli/__init__.py"""

    def test_main_exported(self):
        import rowcheck.cli

        assert callable(rowcheck.cli.main)
        assert "main" in rowcheck.cli.__all__
