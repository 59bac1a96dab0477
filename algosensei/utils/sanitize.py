"""
Log redaction helpers
Session tokens, cookies and provider keys must never reach the logs
"""

from typing import Dict, Any
import re

# Headers that contain sensitive information
SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "set-cookie",
    "api-key",
    "x-api-key",
}

# Patterns to detect and redact sensitive data
SENSITIVE_PATTERNS = [
    (re.compile(r'(Bearer\s+[a-zA-Z0-9_\-\.]+)'), 'Bearer ***REDACTED***'),  # Bearer tokens
    (re.compile(r'(eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+)'), '***JWT***'),  # Session tokens
    (re.compile(r'(sk-[a-zA-Z0-9]{32,})'), 'sk-***REDACTED***'),  # OpenAI-style keys
]


def sanitize_headers(headers: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of headers with credential-bearing values masked

    Args:
        headers: Dictionary of headers

    Returns:
        New dict; the input is not modified
    """
    if not isinstance(headers, dict):
        return headers

    return {
        key: "***REDACTED***" if key.lower() in SENSITIVE_HEADERS else value
        for key, value in headers.items()
    }


def sanitize_string(text: str) -> str:
    """
    Mask credentials embedded in free text (error messages, URLs)

    Args:
        text: String that may contain sensitive data

    Returns:
        String with sensitive values replaced
    """
    if not isinstance(text, str):
        return text

    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def get_safe_token_display(token: str) -> str:
    """
    Short, non-reversible display form of a credential

    Example:
        >>> get_safe_token_display("eyJhbGciOiJIUzI1NiJ9.payload.signature")
        'eyJhbG...ture'
    """
    if not token or len(token) < 12:
        return "***"
    return f"{token[:6]}...{token[-4:]}"
