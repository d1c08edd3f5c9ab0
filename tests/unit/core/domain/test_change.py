"""Unit tests: Change entity and Hunk value object."""

from diff_submitter.core.domain.change import (
    Change,
    ChangeKind,
    FileType,
    Hunk,
    UploadedArtifact,
)


def _hunk(corpus: bytes) -> Hunk:
    return Hunk(corpus=corpus, old_offset=1, old_length=2, new_offset=1, new_length=3)


class TestHunk:
    def test_dictionary_counts_added_and_deleted_lines(self) -> None:
        hunk = _hunk(b" keep\n-old\n+new\n+extra\n")

        data = hunk.to_dictionary()

        assert data["addLines"] == 2
        assert data["delLines"] == 1
        assert data["oldOffset"] == 1
        assert data["newLength"] == 3
        assert data["corpus"] == " keep\n-old\n+new\n+extra\n"

    def test_invalid_utf8_is_detected(self) -> None:
        assert _hunk("+café\n".encode("latin-1")).is_valid_utf8() is False
        assert _hunk("+café\n".encode("utf-8")).is_valid_utf8() is True

    def test_nul_bytes_look_binary(self) -> None:
        assert _hunk(b"+\x00\x01\x02\n").looks_binary() is True
        assert _hunk(b"+plain\n").looks_binary() is False


class TestChange:
    def test_convert_to_binary_drops_hunks(self) -> None:
        change = Change(current_path="logo.png", hunks=[_hunk(b"+x\n")])

        change.convert_to_binary()

        assert change.file_type == FileType.BINARY
        assert change.hunks == []
        assert change.is_binary

    def test_hunk_corpus_size_sums_all_hunks(self) -> None:
        change = Change(current_path="a.txt", hunks=[_hunk(b"+ab\n"), _hunk(b"-c\n")])

        assert change.hunk_corpus_size() == 7

    def test_failed_upload_records_size_and_mime_but_no_identifier(self) -> None:
        change = Change(current_path="blob.bin", file_type=FileType.BINARY)

        change.attach_artifact("new", UploadedArtifact(artifact_id=None, mime_type="application/zip", byte_size=12))

        assert "new:binary-phid" not in change.metadata
        assert change.metadata["new:file:size"] == 12
        assert change.metadata["new:file:mime-type"] == "application/zip"

    def test_successful_upload_records_identifier(self) -> None:
        change = Change(current_path="blob.bin", file_type=FileType.BINARY)

        change.attach_artifact("old", UploadedArtifact(artifact_id="PHID-FILE-1", mime_type="image/gif", byte_size=3))

        assert change.metadata["old:binary-phid"] == "PHID-FILE-1"

    def test_image_promotion_only_for_image_mime_types(self) -> None:
        change = Change(current_path="logo.png", file_type=FileType.BINARY)

        change.promote_to_image_if("application/pdf")
        assert change.file_type == FileType.BINARY

        change.promote_to_image_if("image/png")
        assert change.file_type == FileType.IMAGE

    def test_move_summary_names_both_paths(self) -> None:
        change = Change(current_path="new.py", old_path="old.py", kind=ChangeKind.MOVE_HERE)

        assert change.render_text_summary() == "V old.py -> new.py"

    def test_dictionary_uses_wire_codes(self) -> None:
        change = Change(current_path="a.py", old_path="a.py", kind=ChangeKind.DELETE)

        data = change.to_dictionary()

        assert data["type"] == 3
        assert data["fileType"] == 1
        assert data["currentPath"] == "a.py"
        assert data["hunks"] == []
