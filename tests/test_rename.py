"""
Test date-prefix renaming of stills and videos.
"""

import pytest

from photoprep.dates import DateResolver
from photoprep.errors import VideoMetadataError
from photoprep.file_operations import FileOperations
from photoprep.rename import RenamePipeline, RenameStatus


@pytest.fixture
def make_pipeline(fake_tools):
    def make(recursive=False, dry_run=False):
        resolver = DateResolver(fake_tools.properties, fake_tools.videos)
        return RenamePipeline(resolver, FileOperations(dry_run=dry_run), recursive=recursive)
    return make


class TestRenamePipeline:
    """Test renaming with resolved, missing and broken capture dates."""

    def test_stills_and_videos_are_prefixed(self, make_pipeline, fake_tools,
                                            create_test_files, snapshot):
        source = create_test_files([
            {"name": "IMG_01.HEIC"},
            {"name": "IMG_02.jpg"},
            {"name": "CLIP.MP4"},
        ])
        fake_tools.properties.dates["IMG_01.HEIC"] = "2023:05:01 10:15:00"
        fake_tools.properties.dates["IMG_02.jpg"] = "2023:05:02 18:40:12"
        fake_tools.videos.dates["CLIP.MP4"] = "2023-05-03 07:05:00 UTC"

        outcomes = make_pipeline().rename_all(source, "jpg")

        assert all(o.status is RenameStatus.RENAMED for o in outcomes)
        assert snapshot(source) == [
            "2023-05-01_10-15_IMG_01.HEIC",
            "2023-05-02_18-40_IMG_02.jpg",
            "2023-05-03_07-05_CLIP.MP4",
        ]

    def test_missing_still_date_is_skipped(self, make_pipeline, fake_tools, create_test_files):
        source = create_test_files([
            {"name": "IMG_01.HEIC"},
            {"name": "screenshot.png", "content": b"untouched"},
        ])
        fake_tools.properties.dates["IMG_01.HEIC"] = "2023:05:01 10:15:00"

        outcomes = make_pipeline().rename_all(source, "jpg")

        statuses = {o.source.name: o.status for o in outcomes}
        assert statuses == {
            "IMG_01.HEIC": RenameStatus.RENAMED,
            "screenshot.png": RenameStatus.SKIPPED_NO_DATE,
        }
        assert (source / "screenshot.png").read_bytes() == b"untouched"

    def test_bad_video_metadata_aborts_before_any_rename(self, make_pipeline, fake_tools,
                                                         create_test_files, snapshot):
        source = create_test_files([
            {"name": "A_first.HEIC"},
            {"name": "CLIP.MP4"},
        ])
        fake_tools.properties.dates["A_first.HEIC"] = "2023:05:01 10:15:00"
        fake_tools.videos.dates["CLIP.MP4"] = "not a date"
        before = snapshot(source)

        with pytest.raises(VideoMetadataError):
            make_pipeline().rename_all(source, "jpg")

        assert snapshot(source) == before

    def test_existing_target_fails_without_overwrite(self, make_pipeline, fake_tools,
                                                     create_test_files):
        source = create_test_files([
            {"name": "IMG_01.HEIC", "content": b"original"},
            {"name": "2023-05-01_10-15_IMG_01.HEIC", "content": b"already there"},
        ])
        fake_tools.properties.dates["IMG_01.HEIC"] = "2023:05:01 10:15:00"

        outcomes = make_pipeline().rename_all(source, "jpg")

        failed = [o for o in outcomes if o.status is RenameStatus.FAILED]
        assert [o.source.name for o in failed] == ["IMG_01.HEIC"]
        assert (source / "IMG_01.HEIC").read_bytes() == b"original"
        assert (source / "2023-05-01_10-15_IMG_01.HEIC").read_bytes() == b"already there"

    def test_prefixed_files_are_not_prefixed_again(self, make_pipeline, fake_tools,
                                                   create_test_files, snapshot):
        source = create_test_files([{"name": "2023-05-01_10-15_IMG_01.HEIC"}])
        fake_tools.properties.dates["2023-05-01_10-15_IMG_01.HEIC"] = "2023:05:01 10:15:00"

        outcomes = make_pipeline().rename_all(source, "jpg")

        assert [o.status for o in outcomes] == [RenameStatus.ALREADY_PREFIXED]
        assert snapshot(source) == ["2023-05-01_10-15_IMG_01.HEIC"]
        assert fake_tools.properties.calls == []

    def test_target_extension_counts_as_still(self, make_pipeline, fake_tools, create_test_files):
        source = create_test_files([
            {"name": "IMG_01.webp"},
            {"name": "notes.txt"},
        ])
        fake_tools.properties.dates["IMG_01.webp"] = "2023:05:01 10:15:00"

        outcomes = make_pipeline().rename_all(source, "webp")

        assert [o.source.name for o in outcomes] == ["IMG_01.webp"]
        assert (source / "2023-05-01_10-15_IMG_01.webp").exists()
        assert (source / "notes.txt").exists()

    def test_subfolder_videos_only_when_recursive(self, make_pipeline, fake_tools,
                                                  create_test_files):
        source = create_test_files([
            {"name": "Live Photos/IMG_01.MOV"},
            {"name": "Live Photos/IMG_01.HEIC"},
        ])
        fake_tools.videos.dates["IMG_01.MOV"] = "2023-05-01 10:15:03 UTC"
        fake_tools.properties.dates["IMG_01.HEIC"] = "2023:05:01 10:15:00"

        assert make_pipeline().rename_all(source, "jpg") == []

        outcomes = make_pipeline(recursive=True).rename_all(source, "jpg")

        assert [o.source.name for o in outcomes] == ["IMG_01.MOV"]
        assert (source / "Live Photos" / "2023-05-01_10-15_IMG_01.MOV").exists()
        assert (source / "Live Photos" / "IMG_01.HEIC").exists()

    def test_dry_run_renames_nothing(self, make_pipeline, fake_tools, create_test_files, snapshot):
        source = create_test_files([{"name": "IMG_01.HEIC"}])
        fake_tools.properties.dates["IMG_01.HEIC"] = "2023:05:01 10:15:00"

        outcomes = make_pipeline(dry_run=True).rename_all(source, "jpg")

        assert outcomes[0].status is RenameStatus.RENAMED
        assert snapshot(source) == ["IMG_01.HEIC"]

    def test_excluded_files_are_not_planned(self, make_pipeline, fake_tools, create_test_files):
        source = create_test_files([
            {"name": "IMG_01.HEIC"},
            {"name": "IMG_01.MOV"},
        ])
        fake_tools.properties.dates["IMG_01.HEIC"] = "2023:05:01 10:15:00"

        outcomes = make_pipeline(dry_run=True).rename_all(source, "jpg",
                                                          exclude=[source / "IMG_01.MOV"])

        assert [o.source.name for o in outcomes] == ["IMG_01.HEIC"]
        assert fake_tools.videos.calls == []
