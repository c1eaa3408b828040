"""
Tests for the Result[P] envelope and the timing utilities.

Validates:
    - Result works with arbitrary payload types
    - Frozen immutability and the warnings default
    - has_warning()
    - Timer sections accumulate; running reflects start/stop
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

from pylinsolve.core.result import Result
from pylinsolve.core.compute.timing import Timer


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


# ═══════════════════════════════════════════════════════════════════════
# Result
# ═══════════════════════════════════════════════════════════════════════


class TestResult:

    def test_basic_creation(self):
        result = Result(
            params=FakeParams(value=42.0),
            info={"method": "lu"},
            timing={"total_seconds": 0.01},
            backend_name="cpu_lu",
        )
        assert result.params.value == 42.0
        assert result.info["method"] == "lu"
        assert result.backend_name == "cpu_lu"
        assert result.warnings == ()

    def test_frozen(self):
        result = Result(params=FakeParams(1.0), info={}, timing=None, backend_name="cpu")
        with pytest.raises(FrozenInstanceError):
            result.backend_name = "other"

    def test_has_warning(self):
        result = Result(
            params=FakeParams(1.0),
            info={},
            timing=None,
            backend_name="cpu_svd",
            warnings=("Coefficient matrix is rank deficient (rank 2 of 3)",),
        )
        assert result.has_warning("rank deficient")
        assert not result.has_warning("singular")


# ═══════════════════════════════════════════════════════════════════════
# Timing
# ═══════════════════════════════════════════════════════════════════════


class TestTimer:

    def test_sections_accumulate(self):
        timer = Timer()
        timer.start()
        with timer.section('solve'):
            pass
        with timer.section('solve'):
            pass
        timer.stop()
        result = timer.result()
        assert set(result) == {'total_seconds', 'solve'}
        assert result['solve'] >= 0.0

    def test_result_before_stop(self):
        timer = Timer()
        timer.start()
        with pytest.raises(RuntimeError):
            timer.result()

    def test_stop_before_start(self):
        with pytest.raises(RuntimeError):
            Timer().stop()

    def test_running(self):
        timer = Timer()
        assert not timer.running
        timer.start()
        assert timer.running
        timer.stop()
        assert not timer.running
        assert timer.result()['total_seconds'] >= 0.0
