"""Shared input rules: markup screening for user text, review length, pagination bounds"""

import re
import bleach

# Markup a review may keep after sanitizing
ALLOWED_TAGS = ['b', 'i', 'u', 'em', 'strong', 'p', 'br']

# Rejected outright rather than stripped
SCRIPT_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in (r'<script[^>]*>', r'javascript:', r'on\w+\s*=', r'<iframe')
]

# Content-quality floor for review bodies, counted after trimming whitespace
MIN_REVIEW_LENGTH = 50

MAX_PAGE_SIZE = 100


class SafeStringMixin:
    """Validators for free text written by users"""

    @staticmethod
    def sanitize_html(value: str) -> str:
        """Strip every tag outside ALLOWED_TAGS"""
        if not value:
            return value
        return bleach.clean(value, tags=ALLOWED_TAGS, strip=True)

    @staticmethod
    def validate_no_script(value: str) -> str:
        if value and any(pattern.search(value) for pattern in SCRIPT_PATTERNS):
            raise ValueError("Invalid characters detected")
        return value

    @classmethod
    def clean_review_text(cls, value: str) -> str:
        """Screen, sanitize, then enforce the minimum review length"""
        value = cls.sanitize_html(cls.validate_no_script(value))
        if len(value.strip()) < MIN_REVIEW_LENGTH:
            raise ValueError(f"Review must be at least {MIN_REVIEW_LENGTH} characters")
        return value


def validate_pagination(page: int, limit: int) -> tuple[int, int]:
    """Clamp pagination parameters into the supported range"""
    page = max(1, page)
    limit = max(1, min(limit, MAX_PAGE_SIZE))
    return page, limit
