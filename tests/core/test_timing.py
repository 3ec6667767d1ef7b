"""
Tests for Timer, the stage timer behind Result.timing.
"""

import pytest

from pybayessurv.core.compute.timing import Timer


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('log_survival'):
            pass
        with timer.section('log_survival'):
            pass
        with timer.section('exponentiate'):
            pass
        timer.stop()

        result = timer.result()
        assert set(result) == {'total_seconds', 'log_survival', 'exponentiate'}
        assert result['total_seconds'] >= result['log_survival'] >= 0.0

    def test_section_recorded_when_body_raises(self):
        timer = Timer()
        timer.start()
        with pytest.raises(ValueError):
            with timer.section('transfer'):
                raise ValueError("boom")
        timer.stop()
        assert 'transfer' in timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError, match="before start"):
            Timer().stop()

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError, match="before stop"):
            timer.result()
