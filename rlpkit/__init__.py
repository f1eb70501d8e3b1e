"""Recursive Length Prefix encoding and decoding, with fixed-width integers, hashes and hex helpers."""

__version__ = "0.1.0"