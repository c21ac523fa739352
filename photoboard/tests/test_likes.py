import threading
import unittest

from photoboard.db import InMemoryDbClient, PhotoRecord
from photoboard.errors import LikeInvariantError, PhotoNotFoundError
from photoboard.likes import apply_toggle, check_like_invariant, toggle_like


class ApplyToggleTests(unittest.TestCase):
    def test_like_then_unlike_restores_state(self):
        photo = PhotoRecord(photo_id="p1", url="https://x/p1.png", user_id="owner")

        liked = apply_toggle(photo, "u1")
        self.assertEqual(liked.likes, 1)
        self.assertEqual(liked.liked_by, ["u1"])

        unliked = apply_toggle(liked, "u1")
        self.assertEqual(unliked.likes, 0)
        self.assertEqual(unliked.liked_by, [])

    def test_input_record_is_not_mutated(self):
        photo = PhotoRecord(
            photo_id="p1", url="u", user_id="o", likes=1, liked_by=["a"]
        )
        apply_toggle(photo, "b")
        self.assertEqual(photo.liked_by, ["a"])
        self.assertEqual(photo.likes, 1)

    def test_unlike_only_removes_actor(self):
        photo = PhotoRecord(
            photo_id="p1", url="u", user_id="o", likes=3, liked_by=["a", "b", "c"]
        )
        toggled = apply_toggle(photo, "b")
        self.assertEqual(toggled.liked_by, ["a", "c"])
        self.assertEqual(toggled.likes, 2)

    def test_invariant_rejects_mismatched_count(self):
        photo = PhotoRecord(photo_id="p1", url="u", user_id="o", likes=2, liked_by=["a"])
        with self.assertRaises(LikeInvariantError):
            check_like_invariant(photo)

    def test_invariant_rejects_duplicates(self):
        photo = PhotoRecord(
            photo_id="p1", url="u", user_id="o", likes=2, liked_by=["a", "a"]
        )
        with self.assertRaises(LikeInvariantError):
            check_like_invariant(photo)


class ToggleLikeTests(unittest.TestCase):
    def setUp(self):
        self.db = InMemoryDbClient()
        self.photo = self.db.create_photo("https://x/p.png", "owner")

    def test_toggle_persists(self):
        toggle_like(self.db, self.photo.photo_id, "u1")
        stored = self.db.get_photo(self.photo.photo_id)
        self.assertEqual(stored.likes, 1)
        self.assertEqual(stored.liked_by, ["u1"])

    def test_double_toggle_is_identity(self):
        toggle_like(self.db, self.photo.photo_id, "u2")
        before = self.db.get_photo(self.photo.photo_id)

        toggle_like(self.db, self.photo.photo_id, "u1")
        toggle_like(self.db, self.photo.photo_id, "u1")

        after = self.db.get_photo(self.photo.photo_id)
        self.assertEqual(after.likes, before.likes)
        self.assertEqual(after.liked_by, before.liked_by)

    def test_unknown_photo_raises_and_changes_nothing(self):
        snapshot = [p.as_dict() for p in self.db.list_photos()]
        with self.assertRaises(PhotoNotFoundError):
            toggle_like(self.db, "missing", "u1")
        self.assertEqual([p.as_dict() for p in self.db.list_photos()], snapshot)

    def test_concurrent_toggles_do_not_lose_updates(self):
        actors = [f"user-{i}" for i in range(50)]
        barrier = threading.Barrier(len(actors))

        def worker(actor_id):
            barrier.wait()
            toggle_like(self.db, self.photo.photo_id, actor_id)

        threads = [threading.Thread(target=worker, args=(a,)) for a in actors]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        stored = self.db.get_photo(self.photo.photo_id)
        self.assertEqual(stored.likes, len(actors))
        self.assertEqual(sorted(stored.liked_by), sorted(actors))


if __name__ == "__main__":
    unittest.main()
