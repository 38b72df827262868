"""Decoders for service payloads."""

from __future__ import annotations

from DocQuery.parsers.response import decode_document, decode_response

__all__ = ["decode_document", "decode_response"]
