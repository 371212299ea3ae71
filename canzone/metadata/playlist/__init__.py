"""Playlist models: attributes, permissions, items, operations, diffs and annotations."""