import asyncio

from fakes import FakeDecoder, FakeReader, image_file, text_file, video_file

from core.models import GeoCoordinate, MediaFile, RawTagRecord
from core.services.extractor import UNSUPPORTED_TYPE_ERROR, MetadataExtractor, file_base_info


def extract(extractor, media_file):
    return asyncio.run(extractor.extract(media_file))


def test_image_record_merges_file_media_and_tag_fields(extractor):
    record = extract(extractor, image_file("beach.jpg"))
    assert record.error is None
    md = record.metadata
    assert md["name"] == "beach.jpg"
    assert md["type"] == "image/jpeg"
    assert md["lastModified"] == "1970-01-01T00:00:00.000Z"
    assert md["width"] == 640
    assert md["height"] == 480
    assert md["Make"] == "Canon"
    assert md["GPSAltitude"] == "61.5 m"
    assert "duration" not in md


def test_image_record_resolves_gps(extractor):
    record = extract(extractor, image_file())
    assert record.gps == GeoCoordinate(-34.05, -118.25, 61.5)


def test_tag_failure_is_not_fatal(reader):
    extractor = MetadataExtractor(FakeDecoder(fail=True), reader)
    record = extract(extractor, image_file("plain.jpg"))
    assert record.error is None
    assert record.gps is None
    assert record.metadata["width"] == 640
    assert record.metadata["name"] == "plain.jpg"
    assert "Make" not in record.metadata


def test_image_without_gps_tags(reader):
    extractor = MetadataExtractor(FakeDecoder({"Make": RawTagRecord(description="Sony")}), reader)
    record = extract(extractor, image_file())
    assert record.gps is None
    assert record.metadata["Make"] == "Sony"


def test_undecodable_image_becomes_error_record(extractor, decoder):
    record = extract(extractor, image_file("bad.jpg", data=b"broken"))
    assert record.error == "Failed to load image for EXIF extraction"
    assert record.metadata is None
    assert record.gps is None
    assert decoder.calls == 0


def test_video_record_has_duration_and_no_gps(extractor, decoder):
    record = extract(extractor, video_file("clip.mp4"))
    assert record.error is None
    assert record.gps is None
    assert record.metadata["width"] == 1920
    assert record.metadata["height"] == 1080
    assert record.metadata["duration"] == 125.0
    assert record.metadata["type"] == "video/mp4"
    assert decoder.calls == 0


def test_undecodable_video_becomes_error_record(decoder):
    extractor = MetadataExtractor(decoder, FakeReader(broken={"bad.mov"}))
    record = extract(extractor, video_file("bad.mov"))
    assert record.error == "Failed to load video metadata"
    assert record.metadata is None


def test_unsupported_type(extractor):
    record = extract(extractor, text_file())
    assert record.error == UNSUPPORTED_TYPE_ERROR
    assert record.metadata is None
    assert record.file_name == "notes.txt"


def test_unreadable_file_becomes_error_record(extractor, tmp_path):
    missing = MediaFile(
        name="gone.jpg", size=10, type="image/jpeg", last_modified=0, path=tmp_path / "gone.jpg"
    )
    record = extract(extractor, missing)
    assert record.error
    assert record.metadata is None


def test_file_base_info():
    info = file_base_info(MediaFile.from_bytes("a.png", b"xyz", "image/png", 1500))
    assert info == {
        "name": "a.png",
        "size": 3,
        "type": "image/png",
        "lastModified": "1970-01-01T00:00:01.500Z",
    }
