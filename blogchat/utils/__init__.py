from .image import (
    ImagePayload,
    encode_image_to_data_url,
    decode_data_url,
    extract_image_payload
)
from .object_id import parse_object_id
from .upload_to_cloudinary import upload_to_cloudinary
from .map_to_dict import (
    map_user_to_public,
    map_user_to_participant,
    map_post_to_public,
    map_comment_to_public,
    map_message_to_public,
    map_message_to_public_dict
)
