import pytest
from PIL import Image as PILImage

from imagefilters.errors import DecodeError, InvalidFactorError, ResourceNotFoundError
from imagefilters.models.pixel_buffer import PixelBuffer
from imagefilters.repositories.image_repository import ImageRepository
from imagefilters.services.image_session import ImageSession

from conftest import make_buffer


@pytest.fixture
def grey_session():
    """Single opaque pixel at 100, far enough from 128 to see contrast changes."""
    return ImageSession.from_buffer(make_buffer([[(100, 100, 100, 255)]]))


def red(session):
    return session.buffer.pixel(0).red


def test_construct_from_image(mixed_image, mixed_buffer):
    session = ImageSession(mixed_image)
    assert (session.width, session.height) == (2, 2)
    assert session.buffer == mixed_buffer


def test_construct_from_name_and_default(repository):
    assert ImageSession.from_name("plain", repository).width == 3
    assert ImageSession.from_default(repository).width == 2


def test_construct_from_missing_name(repository):
    with pytest.raises(ResourceNotFoundError):
        ImageSession.from_name("nope", repository)


def test_construct_from_bad_handle():
    with pytest.raises(DecodeError):
        ImageSession(None)


def test_lighten_and_darken_defaults(grey_session):
    assert red(grey_session.lighten()) == 138     # 100 + 155 * 0.25
    assert red(grey_session.lighten(None)) == 138
    assert red(grey_session.darken()) == 75
    assert red(grey_session.darken(50)) == 50
    assert red(grey_session.darken(-0.5)) == 50
    assert red(grey_session.lighten(0)) == 100


def test_contrast_zero_argument_defaults(grey_session):
    assert red(grey_session.more_contrast()) == 72    # x2
    assert red(grey_session.less_contrast()) == 114   # x0.5


def test_contrast_explicit_none_is_neutral(grey_session):
    assert red(grey_session.more_contrast(None)) == 100
    assert red(grey_session.less_contrast(None)) == 100
    assert red(grey_session.more_contrast(0)) == 100


def test_contrast_arguments_are_inverted_when_needed(grey_session):
    assert red(grey_session.less_contrast(4)) == 121     # x0.25
    assert red(grey_session.less_contrast(0.5)) == 114
    assert red(grey_session.more_contrast(0.5)) == 72    # x2
    assert red(grey_session.more_contrast(3)) == 44      # x3


def test_change_contrast_primitive(grey_session):
    assert red(grey_session.change_contrast()) == 72
    assert red(grey_session.change_contrast(-2)) == 72
    assert red(grey_session.change_contrast(1.0)) == 100
    assert red(grey_session.change_contrast(0)) == 128


def test_transforms_return_new_sessions(mixed_image):
    base = ImageSession(mixed_image)
    before = base.buffer

    result = base.darken(0.5).grey_scale()

    assert result is not base
    assert base.buffer == before
    assert result.buffer != before


def test_image_property_is_a_copy(mixed_image):
    session = ImageSession(mixed_image)
    image = session.image
    image.putpixel((0, 0), (1, 2, 3, 4))
    assert session.buffer.pixel(0) == (100, 100, 100, 255)


def test_caller_mutating_source_image_does_not_leak(mixed_image):
    session = ImageSession(mixed_image)
    mixed_image.putpixel((0, 0), (1, 2, 3, 4))
    assert session.image.getpixel((0, 0)) == (100, 100, 100, 255)


def test_chained_calls(mixed_image):
    chained = ImageSession(mixed_image).more_contrast(3.0).darken(0.3).grey_scale().less_contrast(0.6).lighten(0.4)
    assert isinstance(chained, ImageSession)
    values = chained.buffer.pixels[..., :3]
    assert (values[..., 0] == values[..., 1]).all() and (values[..., 1] == values[..., 2]).all()


def test_rgba_averages(two_pixel_buffer):
    session = ImageSession.from_buffer(two_pixel_buffer)
    assert session.rgba_averages() == {"red": 127, "green": 127, "blue": 127, "alpha": 255}


def test_image_is_rgba_even_for_rgb_input():
    session = ImageSession(PILImage.new("RGB", (2, 1), (1, 2, 3)))
    assert session.image.mode == "RGBA"
    assert session.image.getpixel((0, 0)) == (1, 2, 3, 255)


def test_construct_from_explicit_path(resource_dir, tmp_path):
    outside = tmp_path / "elsewhere.png"
    PILImage.new("RGB", (1, 1), (9, 8, 7)).save(outside)
    repository = ImageRepository(resource_dir=resource_dir)

    session = ImageSession.from_path(outside, repository)
    assert session.rgba_averages() == {"red": 9, "green": 8, "blue": 7, "alpha": 255}


@pytest.mark.parametrize("factor", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_factors_are_rejected(mixed_image, factor):
    session = ImageSession(mixed_image)
    for call in (session.lighten, session.darken, session.less_contrast,
                 session.more_contrast, session.change_contrast):
        with pytest.raises(InvalidFactorError):
            call(factor)


def test_strict_flag_from_environment(monkeypatch, mixed_image):
    monkeypatch.setenv("FILTER_STRICT", "true")
    assert ImageSession(mixed_image).strict is True
    assert ImageSession(mixed_image, strict=False).strict is False


def test_strict_flag_carries_through_transforms(mixed_image):
    session = ImageSession(mixed_image, strict=True)
    assert session.grey_scale().strict is True
    assert isinstance(session.buffer, PixelBuffer)
