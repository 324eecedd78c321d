from fakes import image_file, text_file

from app.viewmodels.record_vm import FileRecordVM, MapMarker
from core.models import FileRecord, GeoCoordinate, PreviewHandle
from core.services.classifier import EXIF_DATA, FILE_INFORMATION
from core.services.extractor import UNSUPPORTED_TYPE_ERROR


def test_categories_and_rows():
    vm = FileRecordVM(
        FileRecord(file=image_file(), metadata={"name": "a.jpg", "size": 1536, "Make": "Canon"})
    )
    categories = vm.categories
    assert [c.name for c in categories] == [FILE_INFORMATION, EXIF_DATA]
    assert vm.rows_for(categories[0]) == [("Name", "a.jpg"), ("Size", "1.5 KB")]


def test_error_records_show_message_instead_of_categories():
    vm = FileRecordVM(FileRecord(file=image_file(), error="Failed to load video metadata"))
    assert vm.has_error
    assert vm.categories == []
    assert vm.error_text == "Error reading metadata: Failed to load video metadata"


def test_unsupported_type_message_is_shown_as_is():
    vm = FileRecordVM(FileRecord(file=text_file(), error=UNSUPPORTED_TYPE_ERROR))
    assert vm.error_text == UNSUPPORTED_TYPE_ERROR


def test_no_map_marker_without_gps():
    vm = FileRecordVM(FileRecord(file=image_file(), metadata={"name": "a.jpg"}))
    assert vm.map_marker is None
    assert vm.map_url is None
    assert vm.error_text is None


def test_map_marker_and_url():
    record = FileRecord(file=image_file("beach.jpg"), metadata={}, gps=GeoCoordinate(-34.05, 18.5))
    vm = FileRecordVM(record)
    assert vm.map_marker == MapMarker(-34.05, 18.5, "beach.jpg")
    assert "mlat=-34.050000&mlon=18.500000" in vm.map_url
    assert vm.map_url.endswith("#map=13/-34.050000/18.500000")


def test_preview_path_hidden_after_release():
    handle = PreviewHandle("/tmp/p.jpg")
    vm = FileRecordVM(FileRecord(file=image_file(), preview=handle))
    assert vm.preview_path == "/tmp/p.jpg"
    handle.release()
    assert vm.preview_path is None
