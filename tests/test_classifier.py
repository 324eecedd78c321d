from core.services.classifier import (
    CATEGORY_ORDER,
    EXIF_DATA,
    FILE_INFORMATION,
    MEDIA_PROPERTIES,
    OTHER,
    TECHNICAL_DETAILS,
    MetadataClassifier,
    category_for_key,
)

METADATA = {
    "name": "a.jpg",
    "size": 2048,
    "type": "image/jpeg",
    "lastModified": "2024-03-01T10:00:00.000Z",
    "width": 640,
    "height": 480,
    "Make": "Canon",
    "ExifVersion": "0232",
    "GPSLatitude": "34.05",
    "FocalLength": "50",
    "Compression": "JPEG",
    "Software": "GIMP",
}


def test_categories_follow_fixed_order():
    names = [c.name for c in MetadataClassifier().classify(METADATA)]
    assert names == CATEGORY_ORDER


def test_every_key_lands_in_exactly_one_category():
    categories = MetadataClassifier().classify(METADATA)
    seen = [key for c in categories for key in c.items]
    assert sorted(seen) == sorted(METADATA)
    assert sum(c.count for c in categories) == len(METADATA)


def test_empty_categories_are_skipped():
    categories = MetadataClassifier().classify({"name": "a.jpg", "Software": "x"})
    assert [c.name for c in categories] == [FILE_INFORMATION, OTHER]


def test_empty_metadata_yields_no_categories():
    assert MetadataClassifier().classify({}) == []
    assert MetadataClassifier().classify(None) == []


def test_bucket_rules():
    assert category_for_key("lastModified") == FILE_INFORMATION
    assert category_for_key("duration") == MEDIA_PROPERTIES
    assert category_for_key("Model") == EXIF_DATA
    assert category_for_key("ISOSpeedRatings") == EXIF_DATA
    assert category_for_key("ShutterSpeedValue") == EXIF_DATA
    assert category_for_key("VideoCodec") == TECHNICAL_DETAILS
    assert category_for_key("PixelFormat") == TECHNICAL_DETAILS
    assert category_for_key("Artist") == OTHER


def test_exif_hints_win_over_technical_hints():
    assert category_for_key("ExifImageFormat") == EXIF_DATA


def test_preview_is_first_item_formatted():
    categories = {c.name: c for c in MetadataClassifier().classify(METADATA)}
    assert categories[FILE_INFORMATION].preview == "a.jpg"
    assert categories[MEDIA_PROPERTIES].preview == "640px"


def test_long_preview_is_truncated():
    categories = MetadataClassifier().classify({"Software": "x" * 80})
    assert categories[0].preview == "x" * 50 + "..."


def test_preview_at_limit_is_not_truncated():
    categories = MetadataClassifier().classify({"Software": "y" * 50})
    assert categories[0].preview == "y" * 50


def test_none_values_are_kept():
    categories = MetadataClassifier().classify({"Artist": None})
    assert categories[0].items == {"Artist": None}
    assert categories[0].preview == "None"
