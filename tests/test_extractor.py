import unittest
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from fake_page import FakeElement, FakePage, match_row

from score_watch.config import WatchTiming
from score_watch.extractor import get_score, is_my_team, pick_sides
from score_watch.game_time import Break, Finished, Live, Scheduled
from score_watch.livescore_client.base import FieldReadError, NavigationError, NotFound, PreconditionViolation

URL = "https://www.livesport.test/team/alpha/results/"
FAST = WatchTiming(locate_attempts=3, locate_delay_ms=0, settle_ms=0)
TZ = timezone(timedelta(hours=2))


def _clock(*stamps: datetime):
    it = iter(stamps)
    last = [stamps[-1]]

    def now() -> datetime:
        last[0] = next(it, last[0])
        return last[0]

    return now


class SnapshotExtractorTests(unittest.IsolatedAsyncioTestCase):
    async def test_live_match_end_to_end(self) -> None:
        page = FakePage([[match_row(home="Alpha", away="Beta", home_score="2", away_score="1", parts=["1"], elapsed="10")]])
        stamp = datetime(2024, 9, 7, 18, 30, tzinfo=TZ)
        snap = await get_score(page, URL, "Alpha FC", timing=FAST, now_fn=lambda: stamp)
        self.assertEqual(snap.my_team, "Alpha")
        self.assertEqual(snap.my_team_score, 2)
        self.assertEqual(snap.opponent_team, "Beta")
        self.assertEqual(snap.opponent_team_score, 1)
        self.assertEqual(snap.game_time, Live(10))
        self.assertEqual(snap.generated, stamp)
        self.assertEqual(page.urls, [URL, "about:blank"])
        self.assertEqual(
            snap.to_json(),
            {
                "my_team": "Alpha",
                "my_team_score": 2,
                "opponent_team": "Beta",
                "opponent_team_score": 1,
                "game_time": {"Playing": 10},
                "generated": "2024-09-07T18:30:00+02:00",
            },
        )

    async def test_away_team_is_swapped_in(self) -> None:
        page = FakePage([[match_row(home="Gamma", away="Alpha FC", home_score="3", away_score="0", status="event__match")]])
        snap = await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual((snap.my_team, snap.my_team_score), ("Alpha FC", 0))
        self.assertEqual((snap.opponent_team, snap.opponent_team_score), ("Gamma", 3))
        self.assertEqual(snap.game_time, Finished())

    async def test_break_after_first_period(self) -> None:
        page = FakePage([[match_row(parts=["1"], elapsed=None)]])
        snap = await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual(snap.game_time, Break(20))

    async def test_scheduled_uses_clock(self) -> None:
        row = match_row(status="event__match event__match--scheduled", home_score="-", away_score="-", parts=[], elapsed=None, kickoff="18:00")
        page = FakePage([[row]])
        stamp = datetime(2024, 9, 7, 15, 45, tzinfo=TZ)
        snap = await get_score(page, URL, "Alpha", timing=FAST, now_fn=lambda: stamp)
        self.assertEqual(snap.game_time, Scheduled((2, 15)))
        self.assertEqual((snap.my_team_score, snap.opponent_team_score), (0, 0))

    async def test_missing_scores_default_to_zero(self) -> None:
        page = FakePage([[match_row(home_score=None, away_score="x")]])
        snap = await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual((snap.my_team_score, snap.opponent_team_score), (0, 0))

    async def test_unchanged_page_gives_equal_snapshots(self) -> None:
        page = FakePage([[match_row()]])
        clock = _clock(
            datetime(2024, 9, 7, 18, 0, tzinfo=TZ),
            datetime(2024, 9, 7, 18, 0, tzinfo=TZ),
            datetime(2024, 9, 7, 18, 1, tzinfo=TZ),
            datetime(2024, 9, 7, 18, 1, tzinfo=TZ),
        )
        first = await get_score(page, URL, "Alpha", timing=FAST, now_fn=clock)
        second = await get_score(page, URL, "Alpha", timing=FAST, now_fn=clock)
        self.assertEqual(replace(first, generated=second.generated), second)
        self.assertNotEqual(first.generated, second.generated)
        self.assertEqual(page.urls, [URL, "about:blank", URL, "about:blank"])

    async def test_consent_banner_is_dismissed(self) -> None:
        button = FakeElement("Accept")
        page = FakePage([[match_row()]], consent=button)
        await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual(button.clicks, 1)


class SnapshotExtractorFailureTests(unittest.IsolatedAsyncioTestCase):
    async def test_no_rows_is_not_found(self) -> None:
        page = FakePage([[]])
        with self.assertRaises(NotFound):
            await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual(page.queries, 3)
        self.assertEqual(page.urls[-1], "about:blank")

    async def test_navigation_failure(self) -> None:
        page = FakePage([[match_row()]], fail_gotos=2)
        with self.assertRaises(NavigationError):
            await get_score(page, URL, "Alpha", timing=FAST)

    async def test_navigation_retry_with_commit(self) -> None:
        page = FakePage([[match_row()]], fail_gotos=1)
        snap = await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual(snap.my_team, "Alpha")
        self.assertEqual(page.urls, [URL, URL, "about:blank"])

    async def test_http_error_status(self) -> None:
        page = FakePage([[match_row()]], status=503)
        with self.assertRaises(NavigationError):
            await get_score(page, URL, "Alpha", timing=FAST)

    async def test_missing_team_name(self) -> None:
        page = FakePage([[match_row(home="")]])
        with self.assertRaises(FieldReadError):
            await get_score(page, URL, "Alpha", timing=FAST)

    async def test_missing_status_tag(self) -> None:
        row = match_row()
        row.attrs.pop("class")
        with self.assertRaises(FieldReadError):
            await get_score(FakePage([[row]]), URL, "Alpha", timing=FAST)

    async def test_live_without_completed_periods(self) -> None:
        page = FakePage([[match_row(parts=["", ""], elapsed="3")]])
        with self.assertRaises(PreconditionViolation):
            await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual(page.urls[-1], "about:blank")

    async def test_unknown_team(self) -> None:
        page = FakePage([[match_row(home="Gamma", away="Delta")]])
        with self.assertRaises(FieldReadError) as ctx:
            await get_score(page, URL, "Alpha", timing=FAST)
        self.assertEqual(ctx.exception.code, "team_not_found")


class TeamMatchTests(unittest.TestCase):
    def test_prefix_either_way_case_sensitive(self) -> None:
        self.assertTrue(is_my_team("Alpha", "Alpha FC"))
        self.assertTrue(is_my_team("Alpha FC Women", "Alpha FC"))
        self.assertFalse(is_my_team("alpha", "Alpha"))
        self.assertFalse(is_my_team("", "Alpha"))

    def test_home_wins_when_both_match(self) -> None:
        mine, other = pick_sides("Alpha", ("Alpha", 1), ("Alpha B", 2))
        self.assertEqual(mine, ("Alpha", 1))
        self.assertEqual(other, ("Alpha B", 2))


if __name__ == "__main__":
    unittest.main()
