"""Identifier and human-presentable code generation"""

import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def generate_code(prefix: str = "") -> str:
    """
    Short unique code used for external lookup.

    Examples: "TX-1f0c9a2b" for transactions, "PAY-8e41d7c0" for tax payments.
    Uniqueness is finally enforced by a unique column in storage.
    """
    short = str(uuid.uuid4())[:8]
    return f"{prefix}-{short}" if prefix else short
