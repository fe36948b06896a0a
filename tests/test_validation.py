"""Tests for validation rules and reports."""

import json
import os

from conftest import straight_piece


def find_check(report, rule_id):
    return next(c for c in report.checks if c.rule_id == rule_id)


class TestValidationRules:
    """Tests for run_validation."""

    def test_clean_pieces_pass(self, default_config):
        """Test that simplified, unmergeable pieces pass every check."""
        from railsimplify.validate.rules import run_validation

        pieces = [straight_piece(start=0.0), straight_piece(start=0.0, y=100.0)]
        report = run_validation(pieces, default_config)

        assert all(c.passed for c in report.checks)
        assert not report.has_errors

    def test_hidden_middle_is_error(self, default_config):
        """Test that a hidden interior segment fails the simplified check."""
        from railsimplify.validate.rules import run_validation

        pieces = [straight_piece(visible=[True, False, True])]
        report = run_validation(pieces, default_config)

        check = find_check(report, "simplified")
        assert not check.passed
        assert check.evidence["pieces"] == [0]
        assert report.error_count == 1

    def test_invisible_is_error(self, default_config):
        """Test that a fully hidden piece fails the visibility check."""
        from railsimplify.validate.rules import run_validation

        pieces = [straight_piece(), straight_piece(start=100.0, visible=[False, False, False])]
        report = run_validation(pieces, default_config)

        assert not find_check(report, "visibility").passed
        assert find_check(report, "visibility").evidence["pieces"] == [1]

    def test_structure_is_error(self, default_config):
        """Test that mismatched counts fail the structure check."""
        from railsimplify.models import Piece
        from railsimplify.validate.rules import run_validation

        good = straight_piece()
        pieces = [Piece(points=good.points, visible=[True, True], kind="rail")]
        report = run_validation(pieces, default_config)

        assert not find_check(report, "structure").passed

    def test_segment_cap_is_warning(self, default_config):
        """Test that oversize pieces warn rather than fail."""
        from railsimplify.validate.rules import run_validation

        pieces = [straight_piece(segments=120, step=1.0)]
        report = run_validation(pieces, default_config)

        assert not find_check(report, "segment_cap").passed
        assert report.warning_count == 1
        assert not report.has_errors

    def test_mergeable_pairs_reported(self, default_config):
        """Test that pieces which could still merge are listed."""
        from railsimplify.validate.rules import run_validation

        pieces = [straight_piece(start=0.0), straight_piece(start=15.0)]
        report = run_validation(pieces, default_config)

        check = find_check(report, "fully_merged")
        assert not check.passed
        assert check.evidence["pairs"] == [[0, 1]]
        assert not report.has_errors


class TestReport:
    """Tests for report files."""

    def test_generate_report(self, temp_dir, default_config):
        """Test that JSON and text reports are written."""
        from railsimplify.validate.report import generate_report
        from railsimplify.validate.rules import run_validation

        report = run_validation([straight_piece(visible=[True, False, True])], default_config)
        report_path, summary_path = generate_report(report, temp_dir)

        with open(report_path, "r", encoding="utf-8") as f:
            data = json.load(f)
        assert len(data["checks"]) == 5

        with open(summary_path, "r", encoding="utf-8") as f:
            summary = f.read()
        assert "[ERROR] simplified" in summary
        assert "Failed: 1" in summary
        assert os.path.basename(summary_path) == "validation_summary.txt"

    def test_format_check_result(self):
        """Test single-line check formatting."""
        from railsimplify.models import CheckResult, Severity
        from railsimplify.validate.report import format_check_result

        check = CheckResult(rule_id="visibility", severity=Severity.ERROR, passed=True, message="ok")
        assert format_check_result(check) == "[PASS][ERROR] visibility: ok"
