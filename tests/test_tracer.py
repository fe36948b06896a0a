"""Tests for the tracer module."""

import json

import numpy as np
import pytest

from conftest import straight_piece


class TestSummarize:
    """Tests for object summarization."""

    def test_piece_summary(self):
        """Test that pieces are summarized by geometry counts."""
        from railsimplify.tracer import summarize

        summary = summarize(straight_piece(segments=3, visible=[False, True, True], kind="rail"))

        assert "Piece" in summary
        assert "points=4" in summary
        assert "visible=2/3" in summary

    def test_network_summary(self, gapped_network):
        """Test that networks report their piece count."""
        from railsimplify.tracer import summarize

        assert summarize(gapped_network) == "Network(pieces=2)"

    def test_numpy_array_summary(self):
        """Test that numpy arrays are summarized with shape and type."""
        from railsimplify.tracer import summarize

        summary = summarize(np.zeros((10, 3), dtype=np.float64))

        assert "ndarray" in summary
        assert "10x3" in summary
        assert "float64" in summary

    def test_summary_capped_length(self):
        """Test that summary never exceeds max length."""
        from railsimplify.tracer import summarize

        large_dict = {f"key_{i}": i for i in range(100)}
        assert len(summarize(large_dict, max_len=20)) <= 20

    def test_list_summary(self):
        """Test list summarization."""
        from railsimplify.tracer import summarize

        summary = summarize([straight_piece(), straight_piece()])

        assert "list" in summary
        assert "len=2" in summary
        assert "first=Piece" in summary

    def test_none_summary(self):
        """Test None summarization."""
        from railsimplify.tracer import summarize

        assert summarize(None) == "None"


class TestTracerSpan:
    """Tests for tracer span functionality."""

    def test_span_nesting(self, capsys):
        """Test that spans produce start, end and event lines."""
        from railsimplify.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        try:
            with tracer.span("outer", module="test"):
                with tracer.span("inner", module="test"):
                    tracer.event("inside")
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")
        assert len(lines) == 5
        assert "    test:inner  inside" in lines[2]

    def test_span_error_reraised(self, capsys):
        """Test that a failing span logs the error and re-raises it."""
        from railsimplify.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        tracer = get_tracer()

        try:
            with pytest.raises(ValueError):
                with tracer.span("failing", module="test"):
                    raise ValueError("boom")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "ERROR" in err
        assert "ValueError: boom" in err

    def test_level_filtering(self, capsys):
        """Test that DEBUG events are hidden at INFO level."""
        from railsimplify.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO")
        try:
            get_tracer().event("hidden detail", level="DEBUG")
            get_tracer().event("shown")
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "hidden detail" not in err
        assert "shown" in err

    def test_json_output(self, capsys):
        """Test that JSON mode adds a parseable record per line."""
        from railsimplify.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=True, level="INFO", json_output=True)
        try:
            get_tracer().event("counted", pieces=3)
        finally:
            configure_tracer(enabled=False)

        lines = capsys.readouterr().err.strip().split("\n")
        record = json.loads(lines[1])
        assert record["message"] == "counted pieces=3"
        assert record["meta"] == {"pieces": "3"}

    def test_tracer_disabled_no_output(self, capsys):
        """Test that disabled tracer produces no output."""
        from railsimplify.tracer import configure_tracer, get_tracer

        configure_tracer(enabled=False)
        tracer = get_tracer()

        with tracer.span("test", module="test"):
            tracer.event("should not appear")

        assert capsys.readouterr().err == ""

    def test_pipeline_traced(self, capsys, gapped_network):
        """Test that pipeline progress reaches the tracer."""
        from railsimplify.pipeline import simplify_network
        from railsimplify.tracer import configure_tracer

        configure_tracer(enabled=True, level="INFO")
        try:
            simplify_network(gapped_network)
        finally:
            configure_tracer(enabled=False)

        err = capsys.readouterr().err
        assert "Starting with 2 pieces" in err
        assert "pipeline:merge" in err


class TestTraceDecorator:
    """Tests for the @trace decorator."""

    def test_decorator_runs_function(self):
        """Test that decorated function executes normally."""
        from railsimplify.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="test_func")
        def my_func(x):
            return x * 2

        assert my_func(5) == 10

    def test_decorator_with_exception(self):
        """Test that decorator handles exceptions properly."""
        from railsimplify.tracer import configure_tracer, trace

        configure_tracer(enabled=False)

        @trace(label="failing_func")
        def failing_func():
            raise ValueError("test error")

        with pytest.raises(ValueError):
            failing_func()
