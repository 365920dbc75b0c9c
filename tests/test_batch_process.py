from PIL import Image as PILImage

from imagefilters.cli.batch_process import main
from imagefilters.repositories.image_repository import ImageRepository
from imagefilters.services.image_session import ImageSession


def test_single_named_image(resource_dir, tmp_path):
    out_dir = tmp_path / "out"
    code = main([
        "--image", "sample",
        "--resource_dir", str(resource_dir),
        "--save_dir", str(out_dir),
        "--filters", "darken", "greyScale",
        "--averages",
    ])

    assert code == 0
    written = out_dir / "sample_filtered.png"
    assert written.is_file()

    expected = ImageSession.from_name("sample", ImageRepository(resource_dir=resource_dir)).darken().grey_scale()
    assert ImageSession(PILImage.open(written)).buffer == expected.buffer


def test_directory(resource_dir, tmp_path):
    out_dir = tmp_path / "out"
    code = main(["--dir", str(resource_dir), "--save_dir", str(out_dir), "--ext", "jpg"])

    assert code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ["plain_filtered.jpg", "sample_filtered.jpg"]


def test_requires_an_input(tmp_path):
    assert main(["--save_dir", str(tmp_path)]) == 1


def test_missing_resource(resource_dir, tmp_path):
    assert main(["--image", "nope", "--resource_dir", str(resource_dir), "--save_dir", str(tmp_path)]) == 1


def test_strict_rejects_unknown_filter(resource_dir, tmp_path):
    out_dir = tmp_path / "out"
    code = main([
        "--image", "sample", "--resource_dir", str(resource_dir),
        "--save_dir", str(out_dir), "--filters", "darken", "sepia", "--strict",
    ])

    assert code == 1
    assert not out_dir.exists()


def test_unknown_filter_is_skipped_by_default(resource_dir, tmp_path):
    out_dir = tmp_path / "out"
    code = main([
        "--image", "sample", "--resource_dir", str(resource_dir),
        "--save_dir", str(out_dir), "--filters", "sepia",
    ])

    assert code == 0
    original = ImageSession.from_name("sample", ImageRepository(resource_dir=resource_dir))
    assert ImageSession(PILImage.open(out_dir / "sample_filtered.png")).buffer == original.buffer


def test_recursive_directory_mirrors_sub_folders(tmp_path):
    src = tmp_path / "photos"
    for sub, colour in (("a", (10, 10, 10)), ("b", (200, 200, 200))):
        (src / sub).mkdir(parents=True)
        PILImage.new("RGB", (2, 2), colour).save(src / sub / "x.png")
    out_dir = tmp_path / "out"

    code = main(["--dir", str(src), "--recursive", "--save_dir", str(out_dir), "--filters", "greyScale"])

    assert code == 0
    first = PILImage.open(out_dir / "a" / "x_filtered.png").convert("RGBA")
    second = PILImage.open(out_dir / "b" / "x_filtered.png").convert("RGBA")
    assert first.getpixel((0, 0)) == (10, 10, 10, 255)
    assert second.getpixel((0, 0)) == (200, 200, 200, 255)


def test_explicit_image_path(resource_dir, tmp_path):
    source = tmp_path / "loose" / "photo.png"
    source.parent.mkdir()
    PILImage.new("RGB", (1, 1), (40, 80, 120)).save(source)
    out_dir = tmp_path / "out"

    code = main(["--image", str(source), "--resource_dir", str(resource_dir), "--save_dir", str(out_dir)])

    assert code == 0
    assert (out_dir / "photo_filtered.png").is_file()


def test_unsupported_extension_is_an_error_not_a_crash(resource_dir, tmp_path):
    code = main([
        "--image", "sample", "--resource_dir", str(resource_dir),
        "--save_dir", str(tmp_path / "out"), "--ext", "nope",
    ])
    assert code == 1


def test_unwritable_output_is_an_error_not_a_crash(resource_dir, tmp_path):
    blocker = tmp_path / "taken"
    blocker.write_text("a file where the output folder should go")
    code = main(["--image", "sample", "--resource_dir", str(resource_dir), "--save_dir", str(blocker)])
    assert code == 1
