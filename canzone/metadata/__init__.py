"""Metadata models: artists, albums, tracks, episodes, shows, lyrics and availability rules."""