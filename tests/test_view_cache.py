"""View cache tests."""

from mmanager.core.models import ActionResult, View
from mmanager.services.view_cache import ViewCache


def test_get_or_load_caches_until_invalidated() -> None:
    """A value is loaded once per key until its view is invalidated."""
    cache = ViewCache()
    calls = []

    def loader() -> int:
        calls.append(1)
        return len(calls)

    first = cache.get_or_load(View.BUDGETS, ("owner", 2024), loader)
    second = cache.get_or_load(View.BUDGETS, ("owner", 2024), loader)
    if (first, second, len(calls)) != (1, 1, 1):
        msg = f"Expected a single load, got {first}, {second}, {len(calls)} calls"
        raise AssertionError(msg)

    cache.confirm(ActionResult(revalidate=[View.DASHBOARD]))
    if (View.BUDGETS, ("owner", 2024)) not in cache:
        msg = "Invalidating another view dropped the budgets entry"
        raise AssertionError(msg)

    cache.confirm(ActionResult(revalidate=[View.BUDGETS]))
    if cache.get_or_load(View.BUDGETS, ("owner", 2024), loader) != 2:  # noqa: PLR2004
        msg = "Expected a reload after invalidation"
        raise AssertionError(msg)


def test_invalidation_during_load_is_not_overwritten() -> None:
    """A value loaded while its view was invalidated is returned but not cached."""
    cache = ViewCache()

    def loader() -> str:
        cache.invalidate([View.DASHBOARD])
        return "stale"

    cache.get_or_load(View.DASHBOARD, "k", loader)
    if (View.DASHBOARD, "k") in cache:
        msg = "A possibly stale value was cached"
        raise AssertionError(msg)


def test_disabled_cache_always_loads() -> None:
    """With caching disabled the loader runs every time."""
    cache = ViewCache(enabled=False)
    calls = []
    for _ in range(3):
        cache.get_or_load(View.CATEGORIES, "all", lambda: calls.append(1))
    if len(calls) != 3:  # noqa: PLR2004
        msg = f"Expected 3 loads, got {len(calls)}"
        raise AssertionError(msg)


def test_each_view_keeps_a_bounded_number_of_keys() -> None:
    """Past max_entries the oldest key of that view is evicted; other views are untouched."""
    cache = ViewCache(max_entries=2)
    cache.get_or_load(View.CATEGORIES, "all", lambda: "categories")
    for year in (2023, 2024, 2025):
        cache.get_or_load(View.BUDGETS, ("owner", year), lambda year=year: year)

    if (View.BUDGETS, ("owner", 2023)) in cache:
        msg = "The oldest budgets entry should have been evicted"
        raise AssertionError(msg)
    if (View.BUDGETS, ("owner", 2024)) not in cache or (View.BUDGETS, ("owner", 2025)) not in cache:
        msg = "The two newest budgets entries should remain"
        raise AssertionError(msg)
    if (View.CATEGORIES, "all") not in cache:
        msg = "Evicting budgets entries dropped another view"
        raise AssertionError(msg)
