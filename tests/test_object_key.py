from app.api.dependencies.upload_validation import is_allowed_content_type
from app.utils.object_key import ObjectKeyGenerator


def test_key_uses_time_token_and_lowercase_extension():
    generator = ObjectKeyGenerator(clock=lambda: 1718000000000)
    assert generator.generate("Holiday.JPEG") == "1718000000000.jpeg"


def test_key_without_extension():
    generator = ObjectKeyGenerator(clock=lambda: 42)
    assert generator.generate("README") == "42"
    assert generator.generate(None) == "43"


def test_tokens_strictly_increase_when_clock_stalls_or_goes_back():
    ticks = iter([1000, 1000, 999, 1005, 1005])
    generator = ObjectKeyGenerator(clock=lambda: next(ticks))

    tokens = [generator.next_token() for _ in range(5)]

    assert tokens == [1000, 1001, 1002, 1005, 1006]


def test_same_extension_never_collides_in_process():
    generator = ObjectKeyGenerator()
    keys = {generator.generate("photo.png") for _ in range(1000)}
    assert len(keys) == 1000


def test_allowed_content_types():
    allowed = ["image/", "application/pdf"]
    assert is_allowed_content_type("image/png", allowed)
    assert is_allowed_content_type("image/svg+xml", allowed)
    assert is_allowed_content_type("application/pdf", allowed)
    assert not is_allowed_content_type("text/plain", allowed)
    assert not is_allowed_content_type("application/pdfx", allowed)
    assert not is_allowed_content_type("application/octet-stream", allowed)
    assert not is_allowed_content_type(None, allowed)


def test_unsafe_extension_is_dropped():
    generator = ObjectKeyGenerator(clock=lambda: 7)
    assert generator.generate("photo.png?v=1") == "7"
    assert generator.generate("photo.png#frag") == "8"
    assert generator.generate("my photo.j pg") == "9"
    assert generator.generate("archive.tar.GZ") == "10.gz"
