import os
from pathlib import Path
from typing import List, Optional, Union

from infra.errors import DirectoryNotFound, ImageNotFound, SaveFailed

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"})


class ImageRepository:
    """
    File access for one transcription run.

    Lists and loads page images from an input directory and writes the
    transcript to an output path. A relative output path is resolved
    against the input directory.
    """

    def __init__(
        self,
        input_dir: Optional[Union[str, Path]] = None,
        output_path: Union[str, Path] = "output.txt"
    ):
        input_dir = Path(input_dir) if input_dir else Path.cwd()

        if not input_dir.exists():
            raise DirectoryNotFound(f"directory not found: {input_dir}")
        if not input_dir.is_dir():
            raise DirectoryNotFound(f"path is not a directory: {input_dir}")

        output_path = Path(output_path)
        if not output_path.is_absolute():
            output_path = input_dir / output_path

        self.input_dir = input_dir
        self.output_path = output_path

    def list_images(self) -> List[str]:
        """
        Image filenames under the input directory, sorted.

        Walks subdirectories; returns base names of files whose extension
        (case-insensitive) is a recognized raster format.
        """
        names = []
        try:
            for root, _dirs, files in os.walk(self.input_dir, onerror=_raise):
                for filename in files:
                    if Path(filename).suffix.lower() in IMAGE_EXTENSIONS:
                        names.append(filename)
        except OSError as e:
            raise DirectoryNotFound(f"failed to walk directory: {e}") from e

        return sorted(names)

    def image_path(self, name: str) -> Path:
        path = self.input_dir / name
        if path.is_file():
            return path
        # Names come from a recursive walk; fall back to searching subdirectories
        for match in sorted(self.input_dir.rglob(name)):
            if match.is_file():
                return match
        return path

    def load_image(self, name: str) -> bytes:
        path = self.image_path(name)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise ImageNotFound(f"image not found: {name}") from e
        except OSError as e:
            raise ImageNotFound(f"image not found: {name}: {e}") from e

    def save_output(self, content: str) -> Path:
        try:
            self.output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise SaveFailed(f"failed to save output to {self.output_path}: {e}") from e
        return self.output_path


def _raise(error: OSError):
    raise error
