"""Board representation, move legality and game state.

Pure and synchronous; nothing here performs I/O.
"""
