"""Unit tests for deterministic parse event logging."""

from __future__ import annotations

import io

from dkimconf.telemetry.logger import ParseLogger


def test_parse_logger_emits_sorted_sanitized_context() -> None:
    """Context should be emitted in key order with unsafe characters replaced."""

    sink = io.StringIO()
    logger = ParseLogger(sink=sink, level="INFO")

    logger.log_stage_complete("dkim_signing.conf", domains=2, note="two words")

    assert sink.getvalue() == (
        "[phase] level=INFO stage=dkim_signing.conf event=complete domains=2 note=two_words\n"
    )


def test_parse_logger_respects_level_threshold() -> None:
    """Events below the configured level should not be written."""

    sink = io.StringIO()
    logger = ParseLogger(sink=sink, level="WARNING")

    logger.log_stage_start("dkim.conf")
    logger.log_stage_skipped("dkim_paths.map", "missing")
    logger.log_stage_failure("dkim.conf", "CoercionError")

    assert sink.getvalue().splitlines() == [
        "[phase] level=WARNING stage=dkim_paths.map event=skipped reason=missing",
        "[phase] level=ERROR stage=dkim.conf event=failure error_type=CoercionError",
    ]
