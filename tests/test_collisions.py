"""
Test destination path disambiguation.
"""

from photoprep.collisions import CollisionResolver


class TestCollisionResolver:
    """Test that resolved paths never point at an existing file."""

    def test_free_path_unchanged(self, tmp_path):
        candidate = tmp_path / "IMG_01.jpg"
        assert CollisionResolver().resolve(candidate) == candidate

    def test_existing_path_gets_marker(self, tmp_path):
        (tmp_path / "IMG_01.jpg").write_bytes(b"first")

        resolved = CollisionResolver().resolve(tmp_path / "IMG_01.jpg")

        assert resolved == tmp_path / "IMG_01 - New.jpg"
        assert not resolved.exists()

    def test_second_collision_counts_up(self, tmp_path):
        (tmp_path / "IMG_01.jpg").write_bytes(b"first")
        (tmp_path / "IMG_01 - New.jpg").write_bytes(b"second")
        (tmp_path / "IMG_01 - New (2).jpg").write_bytes(b"third")

        resolved = CollisionResolver().resolve(tmp_path / "IMG_01.jpg")

        assert resolved == tmp_path / "IMG_01 - New (3).jpg"

    def test_never_returns_existing_path(self, tmp_path):
        resolver = CollisionResolver()
        candidate = tmp_path / "photo.png"

        for _ in range(5):
            resolved = resolver.resolve(candidate)
            assert not resolved.exists()
            resolved.write_bytes(b"x")

        assert len(list(tmp_path.iterdir())) == 5

    def test_resolve_does_not_touch_filesystem(self, tmp_path):
        (tmp_path / "a.jpg").write_bytes(b"a")

        CollisionResolver().resolve(tmp_path / "a.jpg")

        assert [p.name for p in tmp_path.iterdir()] == ["a.jpg"]

    def test_custom_marker(self, tmp_path):
        (tmp_path / "a.jpg").write_bytes(b"a")

        resolved = CollisionResolver(marker="_copy").resolve(tmp_path / "a.jpg")

        assert resolved.name == "a_copy.jpg"

    def test_reserved_paths_count_as_taken(self, tmp_path):
        reserved = {tmp_path / "IMG_01.jpg", tmp_path / "IMG_01 - New.jpg"}

        resolved = CollisionResolver().resolve(tmp_path / "IMG_01.jpg", reserved)

        assert resolved == tmp_path / "IMG_01 - New (2).jpg"
