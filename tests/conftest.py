from __future__ import annotations

from fakes import GPS_TAGS, FakeDecoder, FakePreviews, FakeReader
import pytest

from core.services.extractor import MetadataExtractor


@pytest.fixture
def decoder() -> FakeDecoder:
    return FakeDecoder(GPS_TAGS)


@pytest.fixture
def reader() -> FakeReader:
    return FakeReader()


@pytest.fixture
def extractor(decoder: FakeDecoder, reader: FakeReader) -> MetadataExtractor:
    return MetadataExtractor(tag_decoder=decoder, media_reader=reader)


@pytest.fixture
def previews() -> FakePreviews:
    return FakePreviews()
