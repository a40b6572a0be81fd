import pytest
from chartengine.core.config import reload_settings
from chartengine.core.schemas import ColumnProfile, ColumnStats, ColumnType


def _make_profile(name: str, column_type: ColumnType, valid: int = 10, total: int = 10) -> ColumnProfile:
    return ColumnProfile(
        name=name,
        type=column_type,
        sample_value="",
        use=column_type is not ColumnType.TEXT,
        stats=ColumnStats(valid_count=valid, total=total),
    )


@pytest.fixture
def make_profile():
    """Factory for hand-built profiles, for tests that skip the profiler."""
    return _make_profile


@pytest.fixture(autouse=True)
def fresh_settings():
    """Every test starts from settings built from the current environment."""
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def sales_rows():
    """Thirty days of sales across six regions."""
    regions = ["North", "South", "East", "West", "Central", "Coastal"]
    return [
        {
            "date": f"2024-01-{day:02d}",
            "region": regions[(day - 1) % len(regions)],
            "revenue": f"${1000 + day * 25:,}",
            "units": day * 3,
            "note": f"order batch {day}",
        }
        for day in range(1, 31)
    ]
