"""
radixstream - Gap Encoder

Reads a byte stream, records for every distinct symbol how many steps have
passed since it last occurred, and shows those gaps as base-36 columns.
"""

__version__ = "0.1.0"
