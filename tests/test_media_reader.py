from fakes import make_image_bytes
import pytest

from core.errors import MediaDecodeError
from core.models import MediaFile
from infrastructure.media_reader import (
    IMAGE_DECODE_ERROR,
    VIDEO_DECODE_ERROR,
    MediaPropertyReader,
)


def test_read_image_reports_pixel_size():
    props = MediaPropertyReader().read_image(make_image_bytes(fmt="PNG", size=(32, 20)))
    assert (props.width, props.height) == (32, 20)
    assert props.duration is None


def test_undecodable_image_raises_with_fixed_message():
    with pytest.raises(MediaDecodeError) as exc:
        MediaPropertyReader().read_image(b"definitely not an image")
    assert str(exc.value) == IMAGE_DECODE_ERROR


def test_truncated_image_raises():
    data = make_image_bytes(size=(200, 200))
    with pytest.raises(MediaDecodeError):
        MediaPropertyReader().read_image(data[: len(data) // 3])


def test_video_without_video_track_raises_with_fixed_message():
    media = MediaFile.from_bytes("fake.mp4", b"not a container at all", "video/mp4", 0)
    with pytest.raises(MediaDecodeError) as exc:
        MediaPropertyReader().read_video(media)
    assert str(exc.value) == VIDEO_DECODE_ERROR
