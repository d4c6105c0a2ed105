import pytest

from collision_finder.deps import verify_dependencies
from collision_finder.errors import MissingDependency


def test_installed_dependencies_pass() -> None:
    verify_dependencies()


def test_missing_module_is_reported_by_distribution_name() -> None:
    with pytest.raises(MissingDependency, match="not-a-real-dist"):
        verify_dependencies({"definitely_not_installed_pkg.sub": "not-a-real-dist"})
