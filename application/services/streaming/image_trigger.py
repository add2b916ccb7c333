"""Detection of the image generation directive in model output.

The model is instructed to embed ``[[GENERATE_IMAGE: <prompt>]]`` in its reply
when the user asks for a picture. Matching is case-sensitive, the prompt is
captured non-greedily up to the first ``]]`` on the same line, and only the
first directive of a reply is honoured.
"""

import re
from typing import Optional

IMAGE_DIRECTIVE_PATTERN = re.compile(r"\[\[GENERATE_IMAGE:\s*(.*?)]]")


def extract_image_prompt(text: str) -> Optional[str]:
    """Return the prompt of the first directive in ``text``, or None.

    >>> extract_image_prompt("Fine. [[GENERATE_IMAGE: a cat]] Happy now?")
    'a cat'
    >>> extract_image_prompt("[[GENERATE_IMAGE: a cat") is None
    True
    """
    if not text:
        return None

    match = IMAGE_DIRECTIVE_PATTERN.search(text)
    if match is None or not match.group(1):
        return None
    return match.group(1)
