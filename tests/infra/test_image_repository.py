"""
Tests for infra/storage/image_repository.py

All tests use real filesystem operations with temporary directories.
"""

import pytest

from infra.errors import DirectoryNotFound, ImageNotFound, SaveFailed
from infra.storage import ImageRepository


class TestConstruction:

    def test_missing_directory(self, tmp_path):
        with pytest.raises(DirectoryNotFound):
            ImageRepository(tmp_path / "nope")

    def test_file_is_not_a_directory(self, tmp_path):
        path = tmp_path / "file.jpg"
        path.write_bytes(b"x")

        with pytest.raises(DirectoryNotFound):
            ImageRepository(path)

    def test_relative_output_resolves_against_input_dir(self, image_dir):
        repository = ImageRepository(image_dir, output_path="transcript.txt")

        assert repository.output_path == image_dir / "transcript.txt"

    def test_absolute_output_kept(self, image_dir, tmp_path):
        target = tmp_path / "elsewhere" / "out.txt"

        repository = ImageRepository(image_dir, output_path=target)

        assert repository.output_path == target


class TestListImages:

    def test_sorted_and_filtered(self, image_dir):
        repository = ImageRepository(image_dir)

        assert repository.list_images() == ["page_001.jpg", "page_002.png", "page_003.jpg"]

    def test_extension_match_is_case_insensitive(self, tmp_path, make_image):
        (tmp_path / "B.JPG").write_bytes(make_image(4, 4))
        (tmp_path / "a.WebP").write_bytes(b"x")
        (tmp_path / "c.Bmp").write_bytes(b"x")
        (tmp_path / "d.tiff").write_bytes(b"x")

        assert ImageRepository(tmp_path).list_images() == ["B.JPG", "a.WebP", "c.Bmp"]

    def test_walks_subdirectories(self, image_dir, make_image):
        nested = image_dir / "box_2"
        nested.mkdir()
        (nested / "page_000.gif").write_bytes(make_image(4, 4, fmt="GIF"))

        names = ImageRepository(image_dir).list_images()

        assert names[0] == "page_000.gif"
        assert len(names) == 4

    def test_empty_directory(self, tmp_path):
        assert ImageRepository(tmp_path).list_images() == []


class TestLoadImage:

    def test_load(self, image_dir):
        repository = ImageRepository(image_dir)

        assert repository.load_image("page_001.jpg") == (image_dir / "page_001.jpg").read_bytes()

    def test_load_from_subdirectory(self, image_dir):
        nested = image_dir / "box_2"
        nested.mkdir()
        (nested / "page_009.jpg").write_bytes(b"nested bytes")

        assert ImageRepository(image_dir).load_image("page_009.jpg") == b"nested bytes"

    def test_missing_image(self, image_dir):
        with pytest.raises(ImageNotFound):
            ImageRepository(image_dir).load_image("page_999.jpg")


class TestSaveOutput:

    def test_save(self, image_dir):
        repository = ImageRepository(image_dir)

        path = repository.save_output("---\npage_001.jpg\nhello\n")

        assert path == image_dir / "output.txt"
        assert path.read_text(encoding="utf-8") == "---\npage_001.jpg\nhello\n"

    def test_save_failure(self, image_dir):
        (image_dir / "output.txt").mkdir()

        with pytest.raises(SaveFailed):
            ImageRepository(image_dir).save_output("text")
