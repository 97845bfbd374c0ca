import pytest

from api_feature_gen.errors import EmissionError
from api_feature_gen.writer import write_files


class TestWriteFiles:
    def test_creates_directories(self, tmp_path):
        written = write_files(tmp_path, {"lib/core/entities/pets/pet.dart": "class Pet {}\n"})
        target = tmp_path / "lib/core/entities/pets/pet.dart"
        assert written == [target]
        assert target.read_text(encoding="utf-8") == "class Pet {}\n"

    def test_overwrites_by_default(self, tmp_path):
        (tmp_path / "a.dart").write_text("old", encoding="utf-8")
        write_files(tmp_path, {"a.dart": "new"})
        assert (tmp_path / "a.dart").read_text(encoding="utf-8") == "new"

    def test_append_keeps_existing(self, tmp_path):
        (tmp_path / "a.dart").write_text("old", encoding="utf-8")
        written = write_files(tmp_path, {"a.dart": "new", "b.dart": "fresh"}, overwrite=False)
        assert written == [tmp_path / "b.dart"]
        assert (tmp_path / "a.dart").read_text(encoding="utf-8") == "old"

    def test_write_failure(self, tmp_path):
        (tmp_path / "lib").write_text("not a directory", encoding="utf-8")
        with pytest.raises(EmissionError) as exc_info:
            write_files(tmp_path, {"lib/pets.dart": "x"})
        assert exc_info.value.path == tmp_path / "lib/pets.dart"
        assert "Failed to write" in str(exc_info.value)
