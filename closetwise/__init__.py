"""ClosetWise - anti-consumption analytics for personal wardrobes.

Turns wardrobe usage records (purchase prices, wear events and outfit
confidence ratings) into metrics that help people wear what they own
instead of buying more.
"""

__version__ = "0.1.0"
__author__ = "ClosetWise Team"
