import pytest

from core.errors import PreviewError
from core.models import BatchState, FileRecord, GeoCoordinate, MediaFile, PreviewHandle


def test_media_kind():
    assert MediaFile.from_bytes("a.jpg", b"", "image/jpeg").media_kind == "image"
    assert MediaFile.from_bytes("a.mp4", b"", "video/mp4").media_kind == "video"
    assert MediaFile.from_bytes("a.txt", b"", "text/plain").media_kind is None
    assert MediaFile.from_bytes("a", b"", "").media_kind is None


def test_last_modified_iso():
    f = MediaFile.from_bytes("a.jpg", b"", "image/jpeg", 1_709_287_200_123)
    assert f.last_modified_iso == "2024-03-01T10:00:00.123Z"


def test_from_path(tmp_path):
    p = tmp_path / "IMG_0001.HEIC"
    p.write_bytes(b"12345")
    f = MediaFile.from_path(p)
    assert f.name == "IMG_0001.HEIC"
    assert f.size == 5
    assert f.type == "image/heic"
    assert f.read_bytes() == b"12345"


def test_from_bytes_reads_in_memory_data():
    f = MediaFile.from_bytes("a.bin", b"abc", "application/octet-stream")
    assert f.size == 3
    assert f.read_bytes() == b"abc"
    assert f.last_modified > 0


def test_open_without_source_raises():
    f = MediaFile(name="x", size=0, type="", last_modified=0)
    with pytest.raises(FileNotFoundError):
        f.read_bytes()


def test_preview_handle_release_once():
    released = []
    handle = PreviewHandle("p.jpg", on_release=released.append)
    handle.release()
    assert handle.released
    assert released == [handle]
    with pytest.raises(PreviewError):
        handle.release()
    assert released == [handle]


def test_batch_state_release_previews():
    handles = [PreviewHandle("a"), PreviewHandle("b")]
    f = MediaFile.from_bytes("a", b"", "image/png")
    state = BatchState(
        total=3,
        records=[
            FileRecord(file=f, preview=handles[0]),
            FileRecord(file=f),
            FileRecord(file=f, preview=handles[1]),
        ],
    )
    assert not state.is_complete
    assert state.release_previews() == 2
    assert all(h.released for h in handles)
    assert state.release_previews() == 0


def test_geo_coordinate_to_dict():
    full = GeoCoordinate(1.0, 2.0, 3.0).to_dict()
    assert full == {"latitude": 1.0, "longitude": 2.0, "altitude": 3.0}
    assert GeoCoordinate(1.0, 2.0).to_dict() == {"latitude": 1.0, "longitude": 2.0}


def test_failing_release_does_not_stop_the_others():
    def explode(_handle):
        raise OSError("disk gone")

    handles = [PreviewHandle("a", on_release=explode), PreviewHandle("b")]
    f = MediaFile.from_bytes("a", b"", "image/png")
    state = BatchState(total=2, records=[FileRecord(file=f, preview=h) for h in handles])
    assert state.release_previews() == 1
    assert all(h.released for h in handles)
    assert all(r.preview is None for r in state)
