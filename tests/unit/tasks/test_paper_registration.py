"""Unit tests for paper_registry.tasks.paper_registration (PaperRegistrationTask)."""
import asyncio
import threading
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from paper_registry.database.repositories import PaperRepository
from paper_registry.tasks.paper_registration import PaperRegistrationTask
from paper_registry.tasks.ranking_lookup import RankingLookup
from paper_registry.utils.errors import (
    APIError,
    MalformedResponseError,
    NotFoundError,
    StoreWriteFailure,
)
from tests.conftest import NATURE_DOI, FakeFetcher, make_work


def _run(coro):
    return asyncio.run(coro)


def _stored(db):
    with db.get_session() as session:
        return PaperRepository(session).list_all()


def _task(db, fetcher, **kwargs):
    return PaperRegistrationTask(fetcher, RankingLookup(db), db, **kwargs)


class TestPaperRegistrationTask:
    def test_matched_paper_is_stored_with_ranking_data(self, db, seed_rankings, nature_rows):
        seed_rankings(nature_rows)
        fetcher = FakeFetcher(works={NATURE_DOI: make_work()})

        record = _run(_task(db, fetcher).execute(NATURE_DOI))

        assert record.id is not None
        assert record.created_at is not None
        assert record.journal == "NATURE"
        assert record.impact_factor == "49.962"
        assert record.percentile == "3.3%"
        assert _stored(db) == [record]

    def test_highest_category_selected(self, db, seed_rankings, two_category_rows):
        seed_rankings(two_category_rows)
        work = make_work(doi="10.1/x", container_title="Journal of Testing", issn_candidates=["1234-5678"])
        fetcher = FakeFetcher(works={"10.1/x": work})

        record = _run(_task(db, fetcher).execute("10.1/x"))

        assert record.impact_factor == "7.100"
        assert record.percentile == "4.0%"

    def test_no_issn_candidates_falls_back(self, db, seed_rankings, nature_rows):
        seed_rankings(nature_rows)
        fetcher = FakeFetcher(works={NATURE_DOI: make_work(issn_candidates=())})

        record = _run(_task(db, fetcher).execute(NATURE_DOI))

        assert record.journal == "Nature"
        assert record.impact_factor == "N/A"
        assert record.percentile == "N/A"

    def test_ranking_failure_degrades_instead_of_aborting(self, db):
        lookup = RankingLookup(db, table="missing_ranking_table")
        fetcher = FakeFetcher(works={NATURE_DOI: make_work()})

        record = _run(PaperRegistrationTask(fetcher, lookup, db).execute(NATURE_DOI))

        assert record.journal == "Nature"
        assert record.impact_factor == "N/A"
        assert len(_stored(db)) == 1

    @pytest.mark.parametrize(
        "error",
        [NotFoundError("unknown DOI"), MalformedResponseError("no title"), APIError("HTTP 500")],
    )
    def test_fetch_failure_aborts_before_store_write(self, db, error):
        fetcher = FakeFetcher(errors={NATURE_DOI: error})

        with pytest.raises(type(error)):
            _run(_task(db, fetcher).execute(NATURE_DOI))

        assert _stored(db) == []

    def test_fetch_timeout_is_a_fetch_failure(self, db):
        fetcher = FakeFetcher(works={NATURE_DOI: make_work()}, delays={NATURE_DOI: 1.0})

        with pytest.raises(APIError, match="timed out"):
            _run(_task(db, fetcher, fetch_timeout=0.01).execute(NATURE_DOI))

        assert _stored(db) == []

    def test_store_failure_raises_store_write_failure(self, db):
        fetcher = FakeFetcher(works={NATURE_DOI: make_work()})
        task = _task(db, fetcher)

        with patch.object(
            PaperRepository, "insert", side_effect=IntegrityError("INSERT", {}, Exception("constraint"))
        ):
            with pytest.raises(StoreWriteFailure):
                _run(task.execute(NATURE_DOI))

        assert _stored(db) == []

    def test_steps_run_in_order_once(self, db):
        calls = []
        fetcher = FakeFetcher(works={NATURE_DOI: make_work()})
        lookup = MagicMock()
        lookup.lookup.side_effect = lambda issns: calls.append(("lookup", tuple(issns))) or []

        _run(PaperRegistrationTask(fetcher, lookup, db).execute(NATURE_DOI))

        assert fetcher.calls == [NATURE_DOI]
        assert calls == [("lookup", ("1476-4687", "0028-0836"))]

    def test_database_work_runs_off_the_event_loop_thread(self, db):
        threads = {}
        fetcher = FakeFetcher(works={NATURE_DOI: make_work()})
        lookup = MagicMock()
        lookup.lookup.side_effect = lambda issns: threads.setdefault("lookup", threading.get_ident()) and []
        task = PaperRegistrationTask(fetcher, lookup, db)
        store = task._store
        task._store = lambda record: threads.setdefault("store", threading.get_ident()) and store(record)

        async def register():
            threads["loop"] = threading.get_ident()
            return await task.execute(NATURE_DOI)

        record = _run(register())

        assert record.id is not None
        assert threads["lookup"] != threads["loop"]
        assert threads["store"] != threads["loop"]
