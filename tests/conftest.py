import pytest

from shapecheck.errors import ErrorCode


@pytest.fixture
def codes():
    """Collect just the codes of an outcome, in order."""
    def _codes(outcome) -> list[ErrorCode]:
        return [finding.code for finding in outcome.findings]
    return _codes
