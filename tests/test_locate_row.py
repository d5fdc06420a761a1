import unittest

from fake_page import FakeElement, FakePage
from playwright.async_api import Error as PlaywrightError

from score_watch.livescore_client.base import FieldReadError
from score_watch.livescore_client.rows import locate_latest_match_row, parse_score, read_all_texts


class LocateRowTests(unittest.IsolatedAsyncioTestCase):
    async def test_returns_as_soon_as_rows_appear(self) -> None:
        first = FakeElement("newest")
        page = FakePage(query_results=[[], [], [first, FakeElement("older")], [FakeElement("late")]])
        row = await locate_latest_match_row(page, attempts=10, delay_ms=0)
        self.assertIs(row, first)
        self.assertEqual(page.queries, 3)

    async def test_gives_up_quietly_after_budget(self) -> None:
        page = FakePage(query_results=[])
        row = await locate_latest_match_row(page, attempts=10, delay_ms=0)
        self.assertIsNone(row)
        self.assertEqual(page.queries, 10)

    async def test_query_failure_is_field_read_error(self) -> None:
        class BrokenPage(FakePage):
            async def query_selector_all(self, selector):
                raise PlaywrightError("Target closed")

        with self.assertRaises(FieldReadError):
            await locate_latest_match_row(BrokenPage(), attempts=3, delay_ms=0)


class FieldReadTests(unittest.IsolatedAsyncioTestCase):
    async def test_unreadable_period_part_counts_as_empty(self) -> None:
        row = FakeElement(children={".p": [FakeElement("1"), FakeElement("2", text_error=True)]})
        self.assertEqual(await read_all_texts(row, ".p"), ["1", None])

    def test_parse_score_is_lenient(self) -> None:
        self.assertEqual(parse_score("3"), 3)
        self.assertEqual(parse_score(" 12 "), 12)
        self.assertEqual(parse_score("-"), 0)
        self.assertEqual(parse_score(""), 0)
        self.assertEqual(parse_score(None), 0)
        self.assertEqual(parse_score("²"), 0)
        self.assertEqual(parse_score("1" * 5000), 0)


if __name__ == "__main__":
    unittest.main()
