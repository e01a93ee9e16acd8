"""
Shatter — Core
Pixel buffers, codec, randomness, safety checks, and the glitch session.
"""
