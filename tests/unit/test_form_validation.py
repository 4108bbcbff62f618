"""Tests for the live form field validators."""

from __future__ import annotations

from pathlib import Path

import pytest

from ctstep.form_validation import (
    ACCOUNT_INFO_MESSAGE,
    CC_THRESHOLD_MESSAGE,
    FOLDER_PATH_NOT_DIRECTORY_MESSAGE,
    REPORT_FOLDER_MESSAGE,
    REPORT_FOLDER_NOT_DIRECTORY_MESSAGE,
    FormValidation,
    check_account_info,
    check_cc_threshold,
    check_credentials_id,
    check_environment_id,
    check_folder_path,
    check_report_folder,
    check_server_url,
)


class TestFormValidation:
    """Tests for the FormValidation result type."""

    def test_ok(self) -> None:
        """Test that ok() creates a passing result with empty message."""
        result = FormValidation.ok()
        assert result.is_ok is True
        assert result.message == ""

    def test_error(self) -> None:
        """Test that error() creates a failing result with the given message."""
        result = FormValidation.error("bad")
        assert result.is_ok is False
        assert result.message == "bad"


class TestCheckCcThreshold:
    """Tests for check_cc_threshold function."""

    @pytest.mark.parametrize("value", ["0", "1", "50", "99", "100"])
    def test_in_range_ok(self, value: str) -> None:
        """Test that thresholds within 0..100 pass."""
        assert check_cc_threshold(value).is_ok

    @pytest.mark.parametrize("value", ["-1", "101", "1000", "abc", "12.5", "", None])
    def test_out_of_range_or_non_numeric_error(self, value: str | None) -> None:
        """Test that out-of-range or non-numeric thresholds fail."""
        result = check_cc_threshold(value)
        assert not result.is_ok
        assert result.message == CC_THRESHOLD_MESSAGE

    def test_overlong_digit_string_is_error(self) -> None:
        """Test that a huge numeric threshold is an error result, not an exception."""
        assert check_cc_threshold("9" * 5000) == FormValidation.error(CC_THRESHOLD_MESSAGE)


class TestRequiredTextFields:
    """Tests for the required text field checks."""

    @pytest.mark.parametrize(
        "check", [check_environment_id, check_server_url, check_credentials_id]
    )
    @pytest.mark.parametrize("value", [None, "", "   ", "\t"])
    def test_blank_is_error(self, check, value: str | None) -> None:  # type: ignore[no-untyped-def]
        """Test that blank values fail."""
        assert not check(value).is_ok

    @pytest.mark.parametrize(
        "check", [check_environment_id, check_server_url, check_credentials_id]
    )
    def test_non_blank_is_ok(self, check) -> None:  # type: ignore[no-untyped-def]
        """Test that non-blank values pass."""
        assert check("value").is_ok


class TestCheckReportFolder:
    """Tests for check_report_folder function."""

    def test_blank_is_error(self) -> None:
        """Test that a blank report folder fails."""
        assert check_report_folder("  ") == FormValidation.error(REPORT_FOLDER_MESSAGE)

    def test_missing_path_is_ok(self, tmp_path: Path) -> None:
        """Test that a folder that does not exist yet passes."""
        assert check_report_folder(str(tmp_path / "not-yet-created")).is_ok

    def test_existing_directory_is_ok(self, tmp_path: Path) -> None:
        """Test that an existing directory passes."""
        assert check_report_folder(str(tmp_path)).is_ok

    def test_existing_file_is_error(self, tmp_path: Path) -> None:
        """Test that a path naming a file fails."""
        file_path = tmp_path / "report.txt"
        file_path.write_text("x")
        assert check_report_folder(str(file_path)) == FormValidation.error(
            REPORT_FOLDER_NOT_DIRECTORY_MESSAGE
        )

    def test_relative_path_resolved_against_base_dir(self, tmp_path: Path) -> None:
        """Test that relative paths are resolved against base_dir."""
        (tmp_path / "TTTReport").write_text("x")
        assert not check_report_folder("TTTReport", base_dir=tmp_path).is_ok


class TestCheckFolderPath:
    """Tests for check_folder_path function."""

    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_blank_is_ok(self, value: str | None) -> None:
        """Test that the optional folder path may be blank."""
        assert check_folder_path(value).is_ok

    def test_existing_directory_is_ok(self, tmp_path: Path) -> None:
        """Test that an existing directory passes."""
        assert check_folder_path(str(tmp_path)).is_ok

    def test_existing_file_is_error(self, tmp_path: Path) -> None:
        """Test that a path naming a file fails."""
        file_path = tmp_path / "suite.testsuite"
        file_path.write_text("x")
        assert check_folder_path(str(file_path)) == FormValidation.error(
            FOLDER_PATH_NOT_DIRECTORY_MESSAGE
        )


class TestCheckAccountInfo:
    """Tests for check_account_info function."""

    @pytest.mark.parametrize("value", [None, "", "A" * 52])
    def test_up_to_limit_ok(self, value: str | None) -> None:
        """Test that values up to 52 characters pass."""
        assert check_account_info(value).is_ok

    def test_over_limit_error(self) -> None:
        """Test that values over 52 characters fail."""
        assert check_account_info("A" * 53) == FormValidation.error(ACCOUNT_INFO_MESSAGE)

    def test_blank_over_limit_ok(self) -> None:
        """Whitespace-only values are treated as unset."""
        assert check_account_info(" " * 60).is_ok
