"""Unit tests for the piexif-backed metadata gateway using real JPEG files."""

from pathlib import Path

import piexif
import pytest

from geostamp.exceptions import MetadataPersistError, MetadataReadError, MetadataWriteError
from geostamp.services.interfaces import (
    DATE_TIME_ORIGINAL_TAG,
    GPS_DATE_STAMP_TAG,
    GPS_TIME_STAMP_TAG,
    MetadataGateway,
    MetadataHandle,
)
from geostamp.services.piexif_metadata_gateway import PiexifMetadataGateway

from tests.conftest import JpegFactory, read_date_time_original


@pytest.fixture
def gateway() -> PiexifMetadataGateway:
    return PiexifMetadataGateway()


def test_implements_protocols(gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory) -> None:
    handle = gateway.open(make_jpeg(temp_folder / "a.jpg"))
    assert isinstance(gateway, MetadataGateway)
    assert isinstance(handle, MetadataHandle)


def test_reads_gps_date_and_time(gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory) -> None:
    handle = gateway.open(make_jpeg(temp_folder / "a.jpg", date="2023:05:01", time=(7, 5, 9)))

    assert handle.read_tag_literal(GPS_DATE_STAMP_TAG) == "2023:05:01"
    assert handle.read_tag_interpreted(GPS_TIME_STAMP_TAG) == "07:05:09"


def test_missing_tags_read_as_none(gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory) -> None:
    handle = gateway.open(make_jpeg(temp_folder / "a.jpg", date=None, time=None))

    assert handle.read_tag_literal(GPS_DATE_STAMP_TAG) is None
    assert handle.read_tag_interpreted(GPS_TIME_STAMP_TAG) is None
    assert handle.read_gps_coordinates() is None


def test_jpeg_without_exif_opens_with_no_tags(
    gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory
) -> None:
    handle = gateway.open(make_jpeg(temp_folder / "plain.jpg", exif=False))
    assert handle.read_tag_literal(GPS_DATE_STAMP_TAG) is None


def test_reads_coordinates_with_hemisphere(
    gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory
) -> None:
    handle = gateway.open(make_jpeg(temp_folder / "a.jpg", position=(-33.8688, 151.2093)))
    coordinate = handle.read_gps_coordinates()

    assert coordinate is not None
    assert coordinate.latitude == pytest.approx(-33.8688, abs=1e-6)
    assert coordinate.longitude == pytest.approx(151.2093, abs=1e-6)

    west = gateway.open(make_jpeg(temp_folder / "b.jpg", position=(40.7128, -74.006))).read_gps_coordinates()
    assert west is not None
    assert west.longitude == pytest.approx(-74.006, abs=1e-6)


def test_write_and_persist_timestamp(gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory) -> None:
    path = make_jpeg(temp_folder / "a.jpg")
    handle = gateway.open(path)

    handle.write_tag(DATE_TIME_ORIGINAL_TAG, "2023:05:01 12:30:00")
    assert read_date_time_original(path) == b"2000:01:01 00:00:00"

    handle.persist()
    assert read_date_time_original(path) == b"2023:05:01 12:30:00"
    assert gateway.open(path).read_tag_literal(GPS_DATE_STAMP_TAG) == "2023:05:01"


def test_non_ascii_write_is_rejected(gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory) -> None:
    handle = gateway.open(make_jpeg(temp_folder / "a.jpg"))
    with pytest.raises(MetadataWriteError):
        handle.write_tag(DATE_TIME_ORIGINAL_TAG, "2023:05:01 12:30:00é")


def test_non_image_is_unreadable(gateway: PiexifMetadataGateway, temp_folder: Path) -> None:
    notes = temp_folder / "notes.txt"
    notes.write_text("hello world, not a picture")
    with pytest.raises(MetadataReadError):
        gateway.open(notes)


def test_empty_file_is_unreadable(gateway: PiexifMetadataGateway, temp_folder: Path) -> None:
    empty = temp_folder / "empty.jpg"
    empty.touch()
    with pytest.raises(MetadataReadError):
        gateway.open(empty)


def test_persist_failure_when_file_disappears(
    gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory
) -> None:
    path = make_jpeg(temp_folder / "a.jpg")
    handle = gateway.open(path)
    path.unlink()

    with pytest.raises(MetadataPersistError):
        handle.persist()


def test_zero_denominator_time_is_treated_as_missing(
    gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory
) -> None:
    path = make_jpeg(temp_folder / "a.jpg")
    exif = piexif.load(str(path))
    exif["GPS"][piexif.GPSIFD.GPSTimeStamp] = ((12, 1), (30, 0), (0, 1))
    piexif.insert(piexif.dump(exif), str(path))

    assert gateway.open(path).read_tag_interpreted(GPS_TIME_STAMP_TAG) is None


def test_unsupported_tag_errors_match_the_operation(
    gateway: PiexifMetadataGateway, temp_folder: Path, make_jpeg: JpegFactory
) -> None:
    handle = gateway.open(make_jpeg(temp_folder / "a.jpg"))

    with pytest.raises(MetadataReadError, match="Unsupported tag"):
        handle.read_tag_literal("Exif.Image.Artist")
    with pytest.raises(MetadataReadError):
        handle.read_tag_interpreted("Exif.Image.Artist")
    with pytest.raises(MetadataWriteError, match="Unsupported tag"):
        handle.write_tag("Exif.Image.Artist", "someone")
