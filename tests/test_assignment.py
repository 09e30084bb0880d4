import unittest

from facility_matcher.assignment import AssignmentStore, completion_ratio
from facility_matcher.errors import InvalidArgument


class TestCompletionRatio(unittest.TestCase):
    def test_zero_raw_inputs(self) -> None:
        self.assertEqual(completion_ratio(0, 0), 0.0)
        self.assertEqual(completion_ratio(0, 3), 0.0)

    def test_ratio(self) -> None:
        self.assertEqual(completion_ratio(4, 1), 0.25)
        self.assertEqual(completion_ratio(4, 4), 1.0)


class TestAssignmentStore(unittest.TestCase):
    def test_assign_one_overwrites(self) -> None:
        store = AssignmentStore()
        store.assign_one(0, "Clean A")
        store.assign_one(0, "Clean B")
        self.assertEqual(store.matches, {0: "Clean B"})

    def test_assign_one_rejects_blank(self) -> None:
        store = AssignmentStore({1: "Kept"})
        for blank in ("", "   ", "\t"):
            with self.assertRaises(InvalidArgument):
                store.assign_one(1, blank)
        self.assertEqual(store.get(1), "Kept")

    def test_invalid_argument_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            AssignmentStore().assign_one(0, "")

    def test_unknown_id_is_plain_insert(self) -> None:
        store = AssignmentStore()
        store.assign_one(999, "Anything")
        self.assertIn(999, store)
        self.assertEqual(len(store), 1)

    def test_assign_bulk_writes_exactly_given_ids(self) -> None:
        store = AssignmentStore()
        written = store.assign_bulk([0, 2, 4], "Mercy Hospital")
        self.assertEqual(written, 3)
        self.assertEqual(store.matches, {0: "Mercy Hospital", 2: "Mercy Hospital", 4: "Mercy Hospital"})
        self.assertEqual(store.completion(5), 3 / 5)

    def test_assign_bulk_counts_duplicates_once(self) -> None:
        store = AssignmentStore()
        self.assertEqual(store.assign_bulk([1, 1, 2], "X"), 2)
        self.assertEqual(store.matched_count, 2)

    def test_assign_bulk_blank_leaves_mapping_untouched(self) -> None:
        store = AssignmentStore({0: "Old"})
        with self.assertRaises(InvalidArgument):
            store.assign_bulk([0, 1], " ")
        self.assertEqual(store.matches, {0: "Old"})

    def test_assign_bulk_empty_target_set(self) -> None:
        store = AssignmentStore()
        self.assertEqual(store.assign_bulk([], "X"), 0)
        self.assertEqual(store.matches, {})

    def test_matches_returns_copy(self) -> None:
        store = AssignmentStore({0: "A"})
        snapshot = store.matches
        snapshot[1] = "B"
        self.assertNotIn(1, store)

    def test_no_existence_check_against_clean_names(self) -> None:
        store = AssignmentStore()
        store.assign_one(0, "Not In Any List")
        self.assertEqual(store.get(0), "Not In Any List")


if __name__ == "__main__":
    unittest.main()
