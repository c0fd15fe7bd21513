import base64

from blogchat.utils import decode_data_url, encode_image_to_data_url, extract_image_payload


def test_extract_image_payload_not_provided_keeps_image():
    assert extract_image_payload(None, provided=False) is None


def test_extract_image_payload_remove():
    assert extract_image_payload(None).remove is True
    assert extract_image_payload("   ").remove is True


def test_extract_image_payload_data_url():
    payload = extract_image_payload("data:image/jpeg;base64," + base64.b64encode(b"jpg").decode())
    assert payload.data == b"jpg"
    assert payload.content_type == "image/jpeg"
    assert payload.error is None


def test_extract_image_payload_errors():
    assert extract_image_payload("not base64 !!").error == "invalid"
    assert extract_image_payload(123).error == "invalid"
    big = base64.b64encode(b"x" * 11).decode()
    assert extract_image_payload(big, max_bytes=10).error == "too_large"


def test_decode_data_url():
    url = encode_image_to_data_url(b"abc", "image/gif")
    assert decode_data_url(url) == (b"abc", "image/gif")
    assert decode_data_url("https://example.com/a.png") is None
    assert decode_data_url(None) is None
