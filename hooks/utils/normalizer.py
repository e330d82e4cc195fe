#!/usr/bin/env python3
"""
TTS text normalizer: cleans URLs, file paths, hex hashes and dotted
identifiers so they sound natural when spoken aloud.

Runs on every announcement before the text reaches a backend.
"""

import re
from urllib.parse import urlsplit


URL_RE = re.compile(r'https?://[^\s,)}\]]+')
# The lookbehind keeps this from starting in the middle of a relative path
ABSOLUTE_PATH_RE = re.compile(r'(?<![\w.~-])~?/(?:[^\s/]+/){2,}[^\s/]+')
RELATIVE_PATH_RE = re.compile(r'(?<![:\w])(?:[a-zA-Z0-9_.-]+/){2,}[a-zA-Z0-9_.-]+')
HEX_RE = re.compile(r'\b[0-9a-fA-F]{8,}\b')
DOTTED_RE = re.compile(r'\b[a-zA-Z][a-zA-Z0-9]*(?:\.[a-zA-Z][a-zA-Z0-9]*){3,}\b')
KEEP_DOTTED_SUFFIX_RE = re.compile(r'\.(com|org|net|io|dev|js|ts|py|go|rs|java|css|html)$', re.IGNORECASE)
MULTI_SPACE_RE = re.compile(r'\s{2,}')


def simplify_url(url: str) -> str:
    """
    "https://www.api.example.com/v2/users?q=1" -> "api dot example dot com"
    """
    try:
        host = urlsplit(url).hostname or ''
    except ValueError:
        host = ''
    if not host:
        # Malformed: keep whatever sits between the scheme and the first slash
        host = re.sub(r'^https?://', '', url).split('/')[0]
    if host.startswith('www.'):
        host = host[4:]
    return host.replace('.', ' dot ')


def simplify_path(path: str) -> str:
    """
    "/Users/jeff/dev/hooks/lib/config.ts" -> "config.ts"
    "src/components/widgets" -> "components/widgets"
    """
    segments = [segment for segment in path.split('/') if segment]
    if len(segments) <= 2:
        return '/'.join(segments)
    filename = segments[-1]
    if '.' in filename:
        return filename
    return f"{segments[-2]}/{filename}"


def simplify_hex(match: re.Match) -> str:
    value = match.group(0)
    # Words like "deadbeef" or runs of digits stay as they are
    if re.search(r'\d', value) and re.search(r'[a-fA-F]', value):
        return f"hash {value[:6]}"
    return value


def simplify_dotted(match: re.Match) -> str:
    value = match.group(0)
    if KEEP_DOTTED_SUFFIX_RE.search(value):
        return value
    return value.split('.')[-1]


def normalize_tts_text(text: str) -> str:
    """Normalize text for natural TTS pronunciation."""
    if not text:
        return ''

    result = URL_RE.sub(lambda m: simplify_url(m.group(0)), text)
    result = ABSOLUTE_PATH_RE.sub(lambda m: simplify_path(m.group(0)), result)
    result = RELATIVE_PATH_RE.sub(lambda m: simplify_path(m.group(0)), result)
    result = HEX_RE.sub(simplify_hex, result)
    result = DOTTED_RE.sub(simplify_dotted, result)
    return MULTI_SPACE_RE.sub(' ', result).strip()
