"""
Validation rules for simplified pieces.

Checks a piece list against the structural and simplified-form invariants
and reports whether any pair could still be merged.
"""

from railsimplify.config import PipelineConfig
from railsimplify.models import CheckResult, Severity, ValidationReport
from railsimplify.pieces.merge import merge_pair
from railsimplify.tracer import get_tracer, trace


@trace(label="run_validation")
def run_validation(pieces, config=None):
    """
    Run all validation checks on a list of pieces.

    Returns ValidationReport with all check results.
    """
    tracer = get_tracer()

    if config is None:
        config = PipelineConfig()

    checks = [
        check_structure(pieces),
        check_visibility(pieces),
        check_simplified(pieces),
        check_segment_cap(pieces, config),
        check_fully_merged(pieces, config),
    ]

    report = ValidationReport(checks=checks)

    tracer.event(f"Validation complete: {report.error_count} errors, {report.warning_count} warnings")

    return report


def check_structure(pieces):
    """Every piece has exactly one more control point than segments."""
    bad = [i for i, p in enumerate(pieces) if len(p.points) != len(p.visible) + 1]

    if bad:
        return CheckResult(
            rule_id="structure",
            severity=Severity.ERROR,
            passed=False,
            message=f"Point and segment counts disagree for {len(bad)} pieces",
            evidence={"pieces": bad[:5]},
        )

    return CheckResult(
        rule_id="structure",
        severity=Severity.ERROR,
        passed=True,
        message="All pieces have one more control point than segments",
    )


def check_visibility(pieces):
    """Every piece has a visible segment."""
    hidden = [i for i, p in enumerate(pieces) if not any(p.visible)]

    if hidden:
        return CheckResult(
            rule_id="visibility",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(hidden)} pieces have no visible segments",
            evidence={"pieces": hidden[:5]},
        )

    return CheckResult(
        rule_id="visibility",
        severity=Severity.ERROR,
        passed=True,
        message="All pieces have visible segments",
    )


def check_simplified(pieces):
    """Hidden segments only appear at the ends of a piece."""
    middle_hidden = [i for i, p in enumerate(pieces) if not all(p.visible[1:-1])]

    if middle_hidden:
        return CheckResult(
            rule_id="simplified",
            severity=Severity.ERROR,
            passed=False,
            message=f"{len(middle_hidden)} pieces have hidden middle sections",
            evidence={"pieces": middle_hidden[:5]},
        )

    return CheckResult(
        rule_id="simplified",
        severity=Severity.ERROR,
        passed=True,
        message="No piece has hidden middle sections",
    )


def check_segment_cap(pieces, config):
    """
    No piece exceeds the segment cap.

    Merging never produces such a piece, so a failure here means the input
    already had it.
    """
    cap = config.merge.max_segments
    oversize = [i for i, p in enumerate(pieces) if len(p.visible) > cap]

    if oversize:
        return CheckResult(
            rule_id="segment_cap",
            severity=Severity.WARN,
            passed=False,
            message=f"{len(oversize)} pieces exceed {cap} segments",
            evidence={"pieces": oversize[:5], "max_segments": cap},
        )

    return CheckResult(
        rule_id="segment_cap",
        severity=Severity.WARN,
        passed=True,
        message=f"All pieces within {cap} segments",
        evidence={"max_segments": cap},
    )


def check_fully_merged(pieces, config):
    """No pair of pieces passes the merge test."""
    # broken pieces are reported by the invariant checks
    candidates = [
        i for i, p in enumerate(pieces)
        if len(p.points) == len(p.visible) + 1 and p.is_simplified
    ]

    mergeable = []
    for pos, i in enumerate(candidates):
        for j in candidates[pos + 1:]:
            if merge_pair(pieces[i], pieces[j], config.merge) is not None:
                mergeable.append([i, j])

    if mergeable:
        return CheckResult(
            rule_id="fully_merged",
            severity=Severity.INFO,
            passed=False,
            message=f"{len(mergeable)} piece pairs could still be merged",
            evidence={"pairs": mergeable[:5]},
        )

    return CheckResult(
        rule_id="fully_merged",
        severity=Severity.INFO,
        passed=True,
        message="No mergeable piece pairs remain",
    )
