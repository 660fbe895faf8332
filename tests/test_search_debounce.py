import asyncio

from opr_builder.models.domain import Coordinate
from opr_builder.services.geocoding.models import GeocodingResult
from opr_builder.services.geocoding.search import SearchDebouncer


def _result(label: str) -> GeocodingResult:
    return GeocodingResult(display_name=f"{label}, Iloilo", short_label=label, longitude=122.5, latitude=10.7)


class RecordingSearch:
    def __init__(self):
        self.calls = []

    def __call__(self, api_key, query, proximity=None):
        self.calls.append(query)
        return [_result(query)]


def test_short_query_is_skipped_without_lookup():
    search = RecordingSearch()
    debouncer = SearchDebouncer(search, quiet_seconds=0, min_query_length=3)

    outcome = asyncio.run(debouncer.submit("pk.test", "Ja"))

    assert outcome.skipped is True
    assert outcome.results == ()
    assert debouncer.latest is outcome
    assert search.calls == []


def test_missing_api_key_is_skipped():
    search = RecordingSearch()
    debouncer = SearchDebouncer(search, quiet_seconds=0, min_query_length=3)

    outcome = asyncio.run(debouncer.submit("", "Jaro Plaza"))

    assert outcome.skipped is True
    assert search.calls == []


def test_only_last_keystroke_is_searched():
    search = RecordingSearch()
    debouncer = SearchDebouncer(search, quiet_seconds=0.01, min_query_length=3)

    async def type_query():
        return await asyncio.gather(
            debouncer.submit("pk.test", "Jar"),
            debouncer.submit("pk.test", "Jaro"),
            debouncer.submit("pk.test", "Jaro Plaza"),
        )

    first, second, third = asyncio.run(type_query())

    assert first.stale and second.stale
    assert not third.stale
    assert [result.short_label for result in third.results] == ["Jaro Plaza"]
    assert search.calls == ["Jaro Plaza"]
    assert debouncer.latest is third
    assert debouncer.latest_request_id == 3


def test_proximity_is_forwarded():
    seen = []

    def search(api_key, query, proximity=None):
        seen.append(proximity)
        return []

    debouncer = SearchDebouncer(search, quiet_seconds=0, min_query_length=3)
    city = Coordinate(latitude=10.7202, longitude=122.5621)

    asyncio.run(debouncer.submit("pk.test", "Molo", city))

    assert seen == [city]


def test_response_superseded_in_flight_is_discarded():
    debouncer = None

    def slow_search(api_key, query, proximity=None):
        # A newer keystroke arrives while this lookup is outstanding.
        debouncer.clear()
        return [_result(query)]

    debouncer = SearchDebouncer(slow_search, quiet_seconds=0, min_query_length=3)

    outcome = asyncio.run(debouncer.submit("pk.test", "Molo Church"))

    assert outcome.stale is True
    assert outcome.results == ()
    assert debouncer.latest is None


def test_clear_forgets_results():
    debouncer = SearchDebouncer(RecordingSearch(), quiet_seconds=0, min_query_length=3)
    asyncio.run(debouncer.submit("pk.test", "Molo Church"))
    assert debouncer.latest is not None

    debouncer.clear()

    assert debouncer.latest is None
