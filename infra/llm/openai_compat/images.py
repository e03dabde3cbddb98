#!/usr/bin/env python3
import base64
from typing import List, Dict, Optional

from infra.images import mime_type_for
from infra.logger import PipelineLogger


def image_data_url(image_bytes: bytes) -> str:
    mime_type = mime_type_for(image_bytes)
    img_b64 = base64.b64encode(image_bytes).decode('utf-8')
    return f"data:{mime_type};base64,{img_b64}"


def add_image_to_messages(
    messages: List[Dict],
    image_bytes: bytes,
    logger: Optional[PipelineLogger] = None
) -> List[Dict]:
    """Attach an encoded image to the last user message in multipart format."""
    user_msg_idx = None
    for i in range(len(messages) - 1, -1, -1):
        if messages[i]['role'] == 'user':
            user_msg_idx = i
            break

    if user_msg_idx is None:
        raise ValueError("No user message found to attach images to")

    original_content = messages[user_msg_idx]['content']

    if isinstance(original_content, list):
        content = original_content.copy()
    else:
        content = [{"type": "text", "text": original_content}]

    data_url = image_data_url(image_bytes)
    content.append({
        "type": "image_url",
        "image_url": {
            "url": data_url
        }
    })

    messages = messages.copy()
    messages[user_msg_idx] = messages[user_msg_idx].copy()
    messages[user_msg_idx]['content'] = content

    if logger:
        logger.debug(
            "Attached image to user message",
            size_bytes=len(image_bytes),
            base64_length=len(data_url),
            message_index=user_msg_idx
        )

    return messages
