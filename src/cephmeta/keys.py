"""Object key resolution from object URLs."""

import httpx


def prepare_key(url: str | httpx.URL, bucket_name: str) -> str:
    """Return the store key of the object addressed by ``url``.

    The key is everything after the first occurrence of the bucket name plus
    one separator character, taken verbatim from the URL's string form (so it
    stays percent-encoded exactly as the URL carried it).

    A URL that does not contain the bucket name yields an empty key rather
    than an error; callers must treat ``""`` as "not found".

    Args:
        url: The fully qualified object URL.
        bucket_name: The source bucket name.

    Returns:
        The object key, or "" when the bucket name is absent.
    """
    raw = str(url)
    index = raw.find(bucket_name)
    if index == -1:
        return ""
    return raw[index + len(bucket_name) + 1:]
